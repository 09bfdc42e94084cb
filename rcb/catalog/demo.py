"""Built-in demo catalog served when BigCommerce credentials are absent.

Deterministic: the same category always yields the same products with the
same ids, names, prices and brands.
"""

from __future__ import annotations

import re

from rcb.schemas.catalog import Brand, Category, Product, ProductImage

DEMO_CATEGORIES: list[tuple[int, str, int]] = [
    (1, "Lake Malawi Cichlids", 64),
    (2, "Livebearers", 60),
    (3, "Central/South American", 53),
    (4, "Tetras", 43),
    (5, "Lake Tanganyika Cichlids", 35),
    (6, "Catfish", 38),
    (7, "Barbs", 29),
    (8, "Danios", 25),
    (9, "Gouramis", 31),
    (10, "Loaches", 22),
    (11, "Rainbowfish", 18),
]

SAMPLE_NAMES: dict[str, list[str]] = {
    "Lake Malawi Cichlids": [
        "Aulonocara Blue Peacock",
        "Labidochromis Yellow",
        "Pseudotropheus Zebra",
        "Aulonocara Firefish",
        "Melanochromis Johannii",
        "Protomelas Taeniolatus",
        "Sciaenochromis Fryeri",
        "Copadichromis Borleyi",
    ],
    "Livebearers": [
        "Fancy Guppy",
        "Mollies Black",
        "Platy Red",
        "Endlers Livebearer",
        "Swordtail Green",
        "Balloon Molly",
        "Mickey Mouse Platy",
        "Blue Moscow Guppy",
    ],
    "Central/South American": [
        "German Blue Ram",
        "Electric Blue Acara",
        "Bolivian Ram",
        "Firemouth Cichlid",
        "Convict Cichlid",
        "Jack Dempsey",
        "Green Terror",
        "Oscar Tiger",
    ],
    "Tetras": [
        "Neon Tetra",
        "Cardinal Tetra",
        "Black Skirt Tetra",
        "Serpae Tetra",
        "Congo Tetra",
        "Rummy Nose Tetra",
        "Ember Tetra",
        "Diamond Tetra",
    ],
    "Lake Tanganyika Cichlids": [
        "Frontosa Cichlid",
        "Calvus Cichlid",
        "Leleupi Cichlid",
        "Brichardi Cichlid",
        "Multifasciatus Cichlid",
        "Compressiceps Cichlid",
    ],
    "Catfish": [
        "Corydoras Panda",
        "Bristlenose Pleco",
        "Otocinclus Catfish",
        "Synodontis Catfish",
        "Pictus Catfish",
        "Banjo Catfish",
        "Royal Pleco",
        "Zebra Pleco",
    ],
    "Barbs": ["Tiger Barb", "Cherry Barb", "Rosy Barb", "Gold Barb", "Denison Barb", "Odessa Barb"],
    "Danios": ["Zebra Danio", "Giant Danio", "Pearl Danio", "Leopard Danio", "Celestial Pearl Danio"],
    "Gouramis": [
        "Dwarf Gourami",
        "Pearl Gourami",
        "Blue Gourami",
        "Honey Gourami",
        "Kissing Gourami",
        "Paradise Fish",
    ],
    "Loaches": ["Clown Loach", "Yoyo Loach", "Kuhli Loach", "Zebra Loach", "Weather Loach"],
    "Rainbowfish": [
        "Boesemani Rainbow",
        "Turquoise Rainbow",
        "Red Rainbow",
        "Australian Rainbow",
        "Madagascar Rainbow",
    ],
}

BRANDS = [
    "AquaLife",
    "TropicalFish Co.",
    "FreshWater Specialists",
    "Aquarium Direct",
    "Fish Paradise",
    "AquaWorld",
]


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.lower())


class DemoCatalog:
    """In-process product source with sample aquarium-fish data."""

    def __init__(self, categories: list[tuple[int, str, int]] | None = None):
        self._categories = categories if categories is not None else DEMO_CATEGORIES

    async def get_categories(self) -> list[Category]:
        return [Category(id=i, name=n, product_count=c) for i, n, c in self._categories]

    async def get_products_by_category(self, category_id: int) -> list[Product]:
        for cid, name, count in self._categories:
            if cid == category_id:
                return self._products_for(cid, name, count)
        return []

    async def get_all_products(self) -> list[Product]:
        products: list[Product] = []
        for cid, name, count in self._categories:
            products.extend(self._products_for(cid, name, count))
        return products

    async def get_product(self, product_id: int) -> Product | None:
        category_id, index = divmod(product_id, 1000)
        for cid, name, count in self._categories:
            if cid == category_id and 1 <= index <= count:
                return self._products_for(cid, name, count)[index - 1]
        return None

    def _products_for(self, category_id: int, category_name: str, count: int) -> list[Product]:
        names = SAMPLE_NAMES.get(category_name, ["Generic Fish"])
        products = []
        for i in range(count):
            base_name = names[i % len(names)]
            variety = i // len(names)
            name = f"{base_name} (Variety {variety + 1})" if variety else base_name
            product_id = category_id * 1000 + i + 1
            products.append(
                Product(
                    entity_id=product_id,
                    product_id=product_id,
                    name=name,
                    price=float(10 + (product_id * 7) % 50),
                    categories=[category_name],
                    description=(
                        f"Beautiful {base_name.lower()} perfect for aquarium enthusiasts. "
                        "Hardy and colorful fish suitable for appropriate tank setups."
                    ),
                    brand=Brand(name=BRANDS[product_id % len(BRANDS)]),
                    default_image=ProductImage(
                        url="https://example.com/fish-image.jpg",
                        alt_text=f"{base_name} aquarium fish",
                    ),
                    path=f"/products/{_slug(base_name)}-{product_id}",
                )
            )
        return products
