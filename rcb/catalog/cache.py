"""Product cache: snapshots of products resolved for jobs.

Lets single-product lookups (regeneration, diagnostics) skip the remote
catalog. ``CachingProductSource`` wraps any source and fills the cache.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Protocol

from rcb.catalog.base import ProductSource
from rcb.schemas.catalog import Category, Product

logger = logging.getLogger(__name__)


class ProductCache(Protocol):
    def upsert(self, products: list[Product]) -> None: ...
    def get(self, product_id: int) -> Product | None: ...
    def count(self) -> int: ...


class InMemoryProductCache:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._products: dict[int, Product] = {}

    def upsert(self, products: list[Product]) -> None:
        with self._lock:
            for p in products:
                self._products[p.product_id] = p.model_copy(deep=True)

    def get(self, product_id: int) -> Product | None:
        with self._lock:
            p = self._products.get(product_id)
            return p.model_copy(deep=True) if p else None

    def count(self) -> int:
        with self._lock:
            return len(self._products)


class PostgresProductCache:
    """Products table keyed by BigCommerce product id."""

    def __init__(self, database_url: str):
        self._url = database_url
        self._conn = self._connect()

    def _connect(self):
        try:
            import psycopg
        except ImportError:
            raise ImportError(
                "psycopg required for Postgres product cache. pip install 'psycopg[binary]'"
            )
        conn = psycopg.connect(self._url, autocommit=True)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS rcb_products (
                product_id INT PRIMARY KEY,
                name TEXT NOT NULL,
                data JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)
        return conn

    def upsert(self, products: list[Product]) -> None:
        with self._conn.transaction():
            for p in products:
                self._conn.execute(
                    """
                    INSERT INTO rcb_products (product_id, name, data)
                    VALUES (%s, %s, %s::jsonb)
                    ON CONFLICT (product_id) DO UPDATE SET
                        name = EXCLUDED.name, data = EXCLUDED.data, updated_at = NOW()
                    """,
                    (p.product_id, p.name, json.dumps(p.to_wire())),
                )

    def get(self, product_id: int) -> Product | None:
        row = self._conn.execute(
            "SELECT data FROM rcb_products WHERE product_id = %s", (product_id,)
        ).fetchone()
        if not row:
            return None
        data = row[0] if isinstance(row[0], dict) else json.loads(row[0])
        return Product.model_validate(data)

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM rcb_products").fetchone()[0]


class CachingProductSource:
    """Product source that records everything it returns in a cache."""

    def __init__(self, source: ProductSource, cache: ProductCache):
        self.source = source
        self.cache = cache

    async def get_categories(self) -> list[Category]:
        return await self.source.get_categories()

    async def get_products_by_category(self, category_id: int) -> list[Product]:
        products = await self.source.get_products_by_category(category_id)
        self.cache.upsert(products)
        return products

    async def get_all_products(self) -> list[Product]:
        products = await self.source.get_all_products()
        self.cache.upsert(products)
        return products

    async def get_product(self, product_id: int) -> Product | None:
        cached = self.cache.get(product_id)
        if cached is not None:
            return cached
        product = await self.source.get_product(product_id)
        if product is not None:
            self.cache.upsert([product])
        return product
