"""Catalog shapes: categories and product snapshots."""

from __future__ import annotations

from pydantic import BaseModel, Field

from rcb.schemas.base import CamelModel


class Category(BaseModel):
    """A storefront category as listed by GET /categories."""

    id: int
    name: str
    product_count: int = 0


class Brand(CamelModel):
    name: str = "Unknown"


class ProductImage(CamelModel):
    url: str = ""
    alt_text: str = ""


class Product(CamelModel):
    """Catalog item snapshot taken when a job is created."""

    entity_id: int
    product_id: int
    name: str
    price: float = 0.0
    categories: list[str] = Field(default_factory=list)
    description: str = ""
    brand: Brand = Field(default_factory=Brand)
    default_image: ProductImage = Field(default_factory=ProductImage)
    path: str = ""
