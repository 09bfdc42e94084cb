"""Catalog endpoints: categories and products from the product source."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.deps import Services, get_services
from rcb.catalog import resolve_products
from rcb.errors import SourceUnavailable
from rcb.schemas.catalog import Category

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/categories", response_model=list[Category])
async def list_categories(services: Services = Depends(get_services)):
    try:
        return await services.source.get_categories()
    except SourceUnavailable as e:
        logger.error("Failed to fetch categories: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to fetch categories: {e}")


@router.get("/products")
async def list_products(
    categories: Optional[str] = Query(default=None, description="Comma-separated category ids"),
    services: Services = Depends(get_services),
):
    """Products for the given categories, or the whole catalog when omitted."""
    ids = [c.strip() for c in (categories or "").split(",") if c.strip()]
    try:
        products = await resolve_products(services.source, ids)
    except SourceUnavailable as e:
        logger.error("Failed to fetch products: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to fetch products: {e}")
    return [p.to_wire() for p in products]
