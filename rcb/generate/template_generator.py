"""Deterministic content generator built from care profiles and name heuristics."""

from __future__ import annotations

import logging

from rcb.generate import templates as t
from rcb.generate.validation import ensure_valid
from rcb.schemas.base import utcnow
from rcb.schemas.catalog import Product
from rcb.schemas.content import (
    AIContext,
    AISearchContent,
    BasicInfo,
    Breeding,
    CareRequirements,
    Compatibility,
    ContentConfig,
    ContentMetadata,
    QAPair,
    RelatedProducts,
)

logger = logging.getLogger(__name__)

TEMPLATE_SOURCES = ["Template Library", "Fish Database", "Care Guides"]


def build_metadata(product: Product, config: ContentConfig, sources: list[str]) -> ContentMetadata:
    now = utcnow().isoformat()
    return ContentMetadata(
        generated_at=now,
        last_updated=now,
        confidence=t.confidence(product),
        sources=sources,
        fish_family=config.family,
        template=config.template_type,
    )


class TemplateContentGenerator:
    """Same product and config always give the same content, apart from timestamps."""

    async def generate(self, product: Product, config: ContentConfig) -> AISearchContent:
        content = self.build(product, config)
        ensure_valid(content, config.validation)
        return content

    def build(self, product: Product, config: ContentConfig) -> AISearchContent:
        profile = t.CARE_PROFILES[config.template_type]
        name = product.name
        return AISearchContent(
            product_id=product.product_id,
            basic_info=BasicInfo(
                scientific_name=t.scientific_name(name),
                common_names=t.common_names(name),
                category=product.categories[0] if product.categories else "Freshwater Fish",
                family=t.fish_family(name),
                origin=t.origin(name, product.categories),
                water_type="Freshwater",
            ),
            search_keywords=t.search_keywords(name),
            care_requirements=CareRequirements(
                min_tank_size=profile.tank_size,
                temperature_range=profile.temperature,
                ph_range=profile.ph,
                max_size=t.max_size(name),
                diet=profile.diet,
                care_level=profile.care_level,
                temperament=profile.temperament,
                social_needs=profile.social_needs,
                lifespan=profile.lifespan,
            ),
            compatibility=Compatibility(
                compatible_with=list(profile.compatible_with),
                avoid_with=list(profile.avoid_with),
                tank_mate_categories=list(profile.tank_mate_categories),
            ),
            ai_context=AIContext(
                why_popular=profile.why_popular,
                key_selling_points=list(profile.selling_points),
                common_questions=_questions(name, profile),
                alternative_names=list(dict.fromkeys([name, " ".join(name.split())])),
            ),
            related_products=RelatedProducts(
                complementary_products=list(t.COMPLEMENTARY_PRODUCTS),
                similar_species=t.similar_species(name),
            ),
            breeding=Breeding(
                breeding_type=profile.breeding_type,
                breeding_difficulty=profile.breeding_difficulty,
                breeding_notes=profile.breeding_notes,
            ),
            metadata=build_metadata(product, config, TEMPLATE_SOURCES),
        )


def _questions(name: str, profile: t.CareProfile) -> list[QAPair]:
    return [
        QAPair(
            question=f"What size tank do {name} need?",
            answer=f"{name} require a minimum of {profile.tank_size} with proper filtration and heating.",
        ),
        QAPair(
            question=f"Are {name} good for beginners?",
            answer=(
                f"{name} are considered {profile.care_level.lower()} level fish "
                f"with {profile.temperament.lower()} temperament."
            ),
        ),
        QAPair(question=f"What do {name} eat?", answer=profile.diet),
    ]
