"""Product source protocol and category resolution."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from rcb.schemas.catalog import Category, Product

logger = logging.getLogger(__name__)


@runtime_checkable
class ProductSource(Protocol):
    """Supplies catalog items. Implementations raise ``SourceUnavailable``
    when the backing catalog cannot be reached."""

    async def get_categories(self) -> list[Category]:
        ...

    async def get_products_by_category(self, category_id: int) -> list[Product]:
        """All products in one category (pagination handled internally)."""
        ...

    async def get_all_products(self) -> list[Product]:
        ...

    async def get_product(self, product_id: int) -> Product | None:
        ...


def parse_category_ids(categories: list[str] | None) -> list[int]:
    """Integer category ids; blanks and non-numeric ids are skipped."""
    ids: list[int] = []
    for raw in categories or []:
        try:
            ids.append(int(str(raw).strip()))
        except ValueError:
            logger.warning("Ignoring non-numeric category id %r", raw)
    return ids


async def resolve_products(source: ProductSource, categories: list[str] | None) -> list[Product]:
    """Products for the given categories, or the whole catalog when none are given.

    Order follows the category order, then the source's order within each category.
    """
    if not categories:
        logger.info("Resolving entire catalog")
        return await source.get_all_products()

    products: list[Product] = []
    for category_id in parse_category_ids(categories):
        found = await source.get_products_by_category(category_id)
        logger.info("Found %d products in category %d", len(found), category_id)
        products.extend(found)
    logger.info("Total products resolved: %d", len(products))
    return products
