"""Tests for product sources: BigCommerce pagination, demo catalog and caching."""

import httpx
import pytest

from rcb.catalog import (
    BigCommerceClient,
    CachingProductSource,
    DemoCatalog,
    InMemoryProductCache,
    build_product_source,
    parse_category_ids,
    resolve_products,
)
from rcb.catalog.bigcommerce import transform_product
from rcb.catalog.demo import DEMO_CATEGORIES
from rcb.errors import SourceUnavailable
from tests.conftest import FakeSource, make_product


def _api_product(pid, categories=(4,)):
    return {
        "id": pid,
        "name": f"Cardinal Tetra {pid}",
        "price": "3.49",
        "categories": list(categories),
        "description": "<p>Schooling fish</p>",
        "brand": {"name": "AquaLife"},
        "images": [{"url_standard": f"https://cdn.test/{pid}.jpg", "description": ""}],
        "custom_url": {"url": f"/cardinal-tetra-{pid}/"},
    }


def _bigcommerce(products, page_limit=2, categories=None, seen=None):
    categories = categories or [{"id": 4, "name": "Tetras", "product_count": len(products)}]

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        assert request.headers["X-Auth-Token"] == "token"
        path = request.url.path
        page = int(request.url.params.get("page", 1))
        limit = int(request.url.params.get("limit", page_limit))
        if path.endswith("/catalog/categories"):
            items = categories
        elif path.endswith("/catalog/products"):
            items = products
        else:
            pid = int(path.rsplit("/", 1)[-1])
            match = [p for p in products if p["id"] == pid]
            if not match:
                return httpx.Response(404, json={"title": "not found"})
            return httpx.Response(200, json={"data": match[0]})
        return httpx.Response(200, json={"data": items[(page - 1) * limit:page * limit]})

    return BigCommerceClient("abc123", "token", page_limit=page_limit, transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# BigCommerce
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_bigcommerce_paginates_until_short_page():
    seen = []
    client = _bigcommerce([_api_product(i) for i in range(1, 6)], page_limit=2, seen=seen)
    products = await client.get_products_by_category(4)

    assert [p.product_id for p in products] == [1, 2, 3, 4, 5]
    product_pages = [r.url.params["page"] for r in seen if r.url.path.endswith("/catalog/products")]
    assert product_pages == ["1", "2", "3"]
    assert all(
        r.url.params["categories:in"] == "4" for r in seen if r.url.path.endswith("/catalog/products")
    )


@pytest.mark.asyncio
async def test_bigcommerce_exact_multiple_needs_one_empty_page():
    seen = []
    client = _bigcommerce([_api_product(i) for i in range(1, 5)], page_limit=2, seen=seen)
    products = await client.get_all_products()
    assert len(products) == 4
    product_pages = [r.url.params["page"] for r in seen if r.url.path.endswith("/catalog/products")]
    assert product_pages == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_bigcommerce_resolves_category_names():
    client = _bigcommerce([_api_product(1)])
    [product] = await client.get_products_by_category(4)
    assert product.categories == ["Tetras"]
    assert product.price == 3.49
    assert product.brand.name == "AquaLife"
    assert product.default_image.url == "https://cdn.test/1.jpg"
    assert product.path == "/cardinal-tetra-1/"


@pytest.mark.asyncio
async def test_bigcommerce_categories():
    client = _bigcommerce([], categories=[{"id": 4, "name": "Tetras", "product_count": 43}])
    categories = await client.get_categories()
    assert [(c.id, c.name, c.product_count) for c in categories] == [(4, "Tetras", 43)]


@pytest.mark.asyncio
async def test_bigcommerce_get_product():
    client = _bigcommerce([_api_product(7)])
    assert (await client.get_product(7)).name == "Cardinal Tetra 7"
    assert await client.get_product(8) is None


@pytest.mark.asyncio
async def test_bigcommerce_error_status_is_source_unavailable():
    client = BigCommerceClient(
        "abc123", "token", transport=httpx.MockTransport(lambda r: httpx.Response(503))
    )
    with pytest.raises(SourceUnavailable, match="503"):
        await client.get_all_products()


@pytest.mark.asyncio
async def test_bigcommerce_transport_error_is_source_unavailable():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = BigCommerceClient("abc123", "token", transport=httpx.MockTransport(handler))
    with pytest.raises(SourceUnavailable):
        await client.get_categories()


def test_transform_product_defaults():
    product = transform_product({"id": 9, "name": "Mystery Fish", "price": None}, {})
    assert product.product_id == product.entity_id == 9
    assert product.price == 0.0
    assert product.brand.name == "Unknown"
    assert product.default_image.alt_text == "Mystery Fish"
    assert product.path == "/products/9"


# ---------------------------------------------------------------------------
# Demo catalog
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_demo_categories_and_counts():
    demo = DemoCatalog()
    categories = await demo.get_categories()
    assert len(categories) == 11
    for category, (_, _, count) in zip(categories, DEMO_CATEGORIES):
        assert len(await demo.get_products_by_category(category.id)) == count == category.product_count


@pytest.mark.asyncio
async def test_demo_catalog_is_deterministic():
    first = await DemoCatalog().get_products_by_category(4)
    second = await DemoCatalog().get_products_by_category(4)
    assert first == second
    assert first[0].product_id == 4001
    assert first[0].name == "Neon Tetra"
    assert first[8].name == "Neon Tetra (Variety 2)"
    assert first[0].categories == ["Tetras"]


@pytest.mark.asyncio
async def test_demo_get_product_and_unknown_category():
    demo = DemoCatalog()
    assert (await demo.get_product(4002)).name == "Cardinal Tetra"
    assert await demo.get_product(4044) is None
    assert await demo.get_product(99001) is None
    assert await demo.get_products_by_category(42) == []


def test_factory_serves_demo_without_credentials(settings):
    source = build_product_source(settings)
    assert isinstance(source, CachingProductSource)
    assert isinstance(source.source, DemoCatalog)


def test_factory_uses_bigcommerce_with_credentials(settings):
    settings.bigcommerce_store_hash = "abc123"
    settings.bigcommerce_access_token = "token"
    source = build_product_source(settings)
    assert isinstance(source.source, BigCommerceClient)


# ---------------------------------------------------------------------------
# Resolution and caching
# ---------------------------------------------------------------------------

def test_parse_category_ids_skips_non_numeric():
    assert parse_category_ids(["4", " 7 ", "tetras", ""]) == [4, 7]
    assert parse_category_ids(None) == []


@pytest.mark.asyncio
async def test_resolve_products_without_categories_takes_all():
    source = FakeSource({1: [make_product(1)], 2: [make_product(2)]})
    products = await resolve_products(source, [])
    assert [p.product_id for p in products] == [1, 2]
    assert source.calls == [None]


@pytest.mark.asyncio
async def test_caching_source_serves_lookups_from_cache():
    source = FakeSource({4: [make_product(1)]})
    caching = CachingProductSource(source, InMemoryProductCache())
    await caching.get_products_by_category(4)
    assert caching.cache.count() == 1

    source.by_category = {}
    assert (await caching.get_product(1)).product_id == 1
    assert await caching.get_product(2) is None
