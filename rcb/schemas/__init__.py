"""Pydantic models used across the package."""

from rcb.schemas.catalog import Brand, Category, Product, ProductImage
from rcb.schemas.content import (
    AISearchContent,
    ContentConfig,
    ContentMetadata,
    GeneratedSections,
    SpeciesContent,
    ValidationResult,
)

__all__ = [
    "AISearchContent",
    "Brand",
    "Category",
    "ContentConfig",
    "ContentMetadata",
    "GeneratedSections",
    "Product",
    "ProductImage",
    "SpeciesContent",
    "ValidationResult",
]
