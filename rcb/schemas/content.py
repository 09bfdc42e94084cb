"""Pydantic models for generated product content.

Covers the generation config, each section of the full ``ai-search`` record,
the quick-reference summary record, and content validation results.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from rcb.schemas.base import CamelModel

FishFamily = Literal[
    "cichlids",
    "tetras",
    "livebearers",
    "catfish",
    "barbs",
    "danios",
    "gouramis",
    "loaches",
    "rainbowfish",
    "community",
    "specialty",
]

FishBehavior = Literal[
    "peaceful-schooling",
    "territorial-aggressive",
    "semi-aggressive",
    "bottom-dwelling",
    "surface-dwelling",
    "community-friendly",
]

TemplateType = Literal[
    "cichlid-aggressive",
    "cichlid-peaceful",
    "tetra-schooling",
    "livebearer-breeding",
    "catfish-bottom",
    "community-standard",
    "specialty-care",
]

AIModel = Literal["gpt-4o", "gpt-4", "gpt-4-turbo"]
ValidationLevel = Literal["strict", "moderate", "lenient"]
Confidence = Literal["high", "medium", "low"]


# ---------------------------------------------------------------------------
# Generation config
# ---------------------------------------------------------------------------

class ContentConfig(CamelModel):
    """Selects the care profile and model parameters for a product."""

    family: FishFamily = "community"
    behavior: FishBehavior = "community-friendly"
    template_type: TemplateType = "community-standard"
    ai_model: AIModel = "gpt-4"
    validation: ValidationLevel = "moderate"


# ---------------------------------------------------------------------------
# Content sections
# ---------------------------------------------------------------------------

class BasicInfo(CamelModel):
    scientific_name: str
    common_names: list[str]
    category: str
    family: str
    origin: str
    water_type: str


class CareRequirements(CamelModel):
    min_tank_size: str
    temperature_range: str
    ph_range: str
    max_size: str
    diet: str
    care_level: str
    temperament: str
    social_needs: str
    lifespan: str


class Compatibility(CamelModel):
    compatible_with: list[str]
    avoid_with: list[str]
    tank_mate_categories: list[str]


class QAPair(CamelModel):
    question: str
    answer: str


class AIContext(CamelModel):
    why_popular: str
    key_selling_points: list[str]
    common_questions: list[QAPair]
    alternative_names: list[str]


class RelatedProducts(CamelModel):
    complementary_products: list[str] = Field(default_factory=list)
    similar_species: list[str] = Field(default_factory=list)


class Breeding(CamelModel):
    breeding_type: str
    breeding_difficulty: str
    breeding_notes: str


class ContentMetadata(CamelModel):
    generated_at: str
    last_updated: str
    confidence: Confidence
    sources: list[str] = Field(default_factory=list)
    fish_family: FishFamily
    template: TemplateType


class GeneratedSections(CamelModel):
    """The part of the content object a language model is asked to write."""

    basic_info: BasicInfo
    search_keywords: list[str]
    care_requirements: CareRequirements
    compatibility: Compatibility
    ai_context: AIContext
    related_products: RelatedProducts = Field(default_factory=RelatedProducts)
    breeding: Breeding


class AISearchContent(GeneratedSections):
    """Full structured content bundle for one product."""

    product_id: int
    type: Literal["ai-search"] = "ai-search"
    version: str = "1.0"
    metadata: ContentMetadata


class SummaryMetadata(CamelModel):
    fish_family: FishFamily
    template: TemplateType


class SpeciesContent(CamelModel):
    """Quick-reference summary record (``quickref`` / ``species`` file)."""

    product_id: int
    type: str = "quickref"
    scientific_name: str
    common_name: str
    quick_reference: list[str]
    generated_at: str
    metadata: SummaryMetadata


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationIssue(CamelModel):
    field: str
    message: str
    severity: Literal["critical", "major", "minor"] = "major"


class ValidationWarning(CamelModel):
    field: str
    message: str
    suggestion: str = ""


class ValidationResult(CamelModel):
    is_valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)
    score: int = Field(default=100, ge=0, le=100)
