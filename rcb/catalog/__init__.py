"""Product sources: BigCommerce, demo catalog and the product cache."""

import logging

from rcb.catalog.base import ProductSource, parse_category_ids, resolve_products
from rcb.catalog.bigcommerce import BigCommerceClient
from rcb.catalog.cache import (
    CachingProductSource,
    InMemoryProductCache,
    PostgresProductCache,
    ProductCache,
)
from rcb.catalog.demo import DemoCatalog
from rcb.config import Settings

logger = logging.getLogger(__name__)


def build_product_cache(settings: Settings) -> ProductCache:
    """Postgres product cache if configured, else in-memory."""
    if settings.rcb_database_url:
        try:
            return PostgresProductCache(settings.rcb_database_url)
        except Exception as e:
            logger.warning("Postgres product cache failed (%s), using in-memory cache", e)
    return InMemoryProductCache()


def build_product_source(settings: Settings, cache: ProductCache | None = None) -> ProductSource:
    """BigCommerce when credentials are set, otherwise the demo catalog; always cached."""
    if settings.bigcommerce_configured:
        logger.info("Using BigCommerce catalog (store %s)", settings.bigcommerce_store_hash)
        source: ProductSource = BigCommerceClient(
            settings.bigcommerce_store_hash,
            settings.bigcommerce_access_token,
            page_limit=settings.bigcommerce_page_limit,
            timeout=settings.bigcommerce_timeout,
        )
    else:
        logger.warning("BigCommerce credentials not configured, serving demo catalog")
        source = DemoCatalog()
    return CachingProductSource(source, cache or build_product_cache(settings))


__all__ = [
    "BigCommerceClient",
    "CachingProductSource",
    "DemoCatalog",
    "InMemoryProductCache",
    "PostgresProductCache",
    "ProductCache",
    "ProductSource",
    "build_product_cache",
    "build_product_source",
    "parse_category_ids",
    "resolve_products",
]
