"""Care profiles per template type and product-name heuristics."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from rcb.schemas.catalog import Product


@dataclass(frozen=True)
class CareProfile:
    """Everything the template generator knows about one template type."""

    tank_size: str
    temperature: str
    ph: str
    diet: str
    care_level: str
    temperament: str
    social_needs: str
    lifespan: str
    compatible_with: list[str] = field(default_factory=list)
    avoid_with: list[str] = field(default_factory=list)
    tank_mate_categories: list[str] = field(default_factory=list)
    why_popular: str = ""
    selling_points: list[str] = field(default_factory=list)
    breeding_type: str = ""
    breeding_difficulty: str = ""
    breeding_notes: str = ""


CARE_PROFILES: dict[str, CareProfile] = {
    "cichlid-aggressive": CareProfile(
        tank_size="55+ gallons",
        temperature="76-82°F (24-28°C)",
        ph="7.8-8.6",
        diet="Omnivore - high-quality cichlid pellets, frozen foods",
        care_level="Intermediate",
        temperament="Aggressive",
        social_needs="Species-only or with similar aggressive cichlids",
        lifespan="8-15 years",
        compatible_with=["Other aggressive cichlids", "Large catfish", "Synodontis"],
        avoid_with=["Small peaceful fish", "Delicate species"],
        tank_mate_categories=["Aggressive cichlids", "Large catfish"],
        why_popular="Popular for their vibrant colors and bold personalities in species-specific setups.",
        selling_points=["Vibrant colors", "Bold personality", "Long-lived", "Intelligent behavior"],
        breeding_type="Mouthbrooder",
        breeding_difficulty="Moderate",
        breeding_notes="Provide proper territory and breeding caves. Separate breeding pairs.",
    ),
    "cichlid-peaceful": CareProfile(
        tank_size="30+ gallons",
        temperature="74-80°F (23-27°C)",
        ph="7.5-8.5",
        diet="Omnivore - cichlid pellets, vegetables, small live foods",
        care_level="Beginner-Intermediate",
        temperament="Peaceful",
        social_needs="Community tank with peaceful cichlids",
        lifespan="8-12 years",
        compatible_with=["Peaceful cichlids", "Rainbow fish", "Larger tetras"],
        avoid_with=["Aggressive cichlids", "Very small fish"],
        tank_mate_categories=["Peaceful cichlids", "Medium community fish"],
        why_popular="Loved for their beautiful colors and relatively peaceful nature in community cichlid tanks.",
        selling_points=["Beautiful coloration", "Peaceful for cichlids", "Hardy", "Interesting behavior"],
        breeding_type="Substrate spawner",
        breeding_difficulty="Moderate",
        breeding_notes="Provide flat surfaces for spawning. Parents may guard eggs.",
    ),
    "tetra-schooling": CareProfile(
        tank_size="20+ gallons",
        temperature="72-78°F (22-26°C)",
        ph="6.0-7.5",
        diet="Omnivore - tropical flakes, micro pellets, frozen foods",
        care_level="Beginner",
        temperament="Peaceful",
        social_needs="School of 6+ individuals",
        lifespan="3-8 years",
        compatible_with=["Other tetras", "Corydoras", "Peaceful cichlids", "Livebearers"],
        avoid_with=["Large aggressive fish", "Fish that will eat them"],
        tank_mate_categories=["Small community fish", "Bottom dwellers", "Peaceful fish"],
        why_popular="Favorite among beginners for their peaceful nature, schooling behavior, and easy care.",
        selling_points=["Peaceful schooling", "Beginner-friendly", "Active swimmers", "Community safe"],
        breeding_type="Egg scatterer",
        breeding_difficulty="Moderate",
        breeding_notes="Requires soft water and fine-leaved plants for egg laying.",
    ),
    "livebearer-breeding": CareProfile(
        tank_size="20+ gallons",
        temperature="72-82°F (22-28°C)",
        ph="7.0-8.5",
        diet="Omnivore - tropical flakes, vegetables, live foods",
        care_level="Beginner",
        temperament="Peaceful",
        social_needs="Community tank, breeds readily",
        lifespan="2-5 years",
        compatible_with=["Tetras", "Corydoras", "Peaceful cichlids", "Other livebearers"],
        avoid_with=["Large predatory fish"],
        tank_mate_categories=["Community fish", "Peaceful species"],
        why_popular="Popular for their ease of breeding, colorful varieties, and beginner-friendly care.",
        selling_points=["Easy breeding", "Multiple color varieties", "Hardy", "Beginner-friendly"],
        breeding_type="Livebearer",
        breeding_difficulty="Easy",
        breeding_notes="Very easy to breed. Provide plants for fry protection.",
    ),
    "catfish-bottom": CareProfile(
        tank_size="30+ gallons",
        temperature="72-78°F (22-26°C)",
        ph="6.5-7.5",
        diet="Omnivore - sinking pellets, algae wafers, frozen foods",
        care_level="Beginner",
        temperament="Peaceful",
        social_needs="Bottom-dwelling, good with most community fish",
        lifespan="10-15 years",
        compatible_with=["Most community fish", "Cichlids", "Tetras"],
        avoid_with=["Extremely aggressive fish"],
        tank_mate_categories=["Community fish", "Most peaceful species"],
        why_popular="Appreciated for their algae-eating abilities and peaceful bottom-dwelling nature.",
        selling_points=["Algae control", "Bottom cleaning", "Peaceful nature", "Hardy"],
        breeding_type="Cave spawner",
        breeding_difficulty="Difficult",
        breeding_notes="Requires caves and excellent water quality. Eggs are guarded.",
    ),
    "community-standard": CareProfile(
        tank_size="20+ gallons",
        temperature="72-78°F (22-26°C)",
        ph="6.5-7.5",
        diet="Omnivore - tropical flakes, pellets",
        care_level="Beginner",
        temperament="Peaceful",
        social_needs="Community tank friendly",
        lifespan="5-10 years",
        compatible_with=["Most peaceful community fish"],
        avoid_with=["Aggressive species"],
        tank_mate_categories=["Peaceful community fish"],
        why_popular="Popular community fish known for their peaceful temperament and easy care.",
        selling_points=["Peaceful temperament", "Easy care", "Community friendly", "Attractive"],
        breeding_type="Various",
        breeding_difficulty="Moderate",
        breeding_notes="Breeding varies by species. Research specific requirements.",
    ),
    "specialty-care": CareProfile(
        tank_size="40+ gallons",
        temperature="Variable, species-specific",
        ph="Variable",
        diet="Species-specific diet requirements",
        care_level="Advanced",
        temperament="Variable",
        social_needs="Specific requirements, research needed",
        lifespan="Variable",
        compatible_with=["Research species-specific compatibility"],
        avoid_with=["Incompatible species vary by fish"],
        tank_mate_categories=["Species-specific"],
        why_popular="Sought after by advanced aquarists for their unique characteristics and care challenges.",
        selling_points=["Unique characteristics", "Rare species", "Advanced challenge", "Distinctive"],
        breeding_type="Species-specific",
        breeding_difficulty="Very Difficult",
        breeding_notes="Complex breeding requirements. Research species-specific needs.",
    ),
}

COMPLEMENTARY_PRODUCTS = ["Aquarium heater", "Filter media", "Fish food", "Water conditioner"]

_SCIENTIFIC_RE = re.compile(r"([A-Z][a-z]+ [a-z]+)")


def scientific_name(product_name: str) -> str:
    match = _SCIENTIFIC_RE.search(product_name)
    return match.group(1) if match else "Genus species"


def common_names(product_name: str) -> list[str]:
    names = [product_name]
    if "Cichlid" in product_name:
        stripped = product_name.replace("Cichlid", "").strip()
        if stripped and stripped not in names:
            names.append(stripped)
    return names[:3]


def fish_family(product_name: str) -> str:
    """Taxonomic family guessed from the product name."""
    name = product_name.lower()
    if "cichlid" in name:
        return "Cichlidae"
    if "tetra" in name:
        return "Characidae"
    if "guppy" in name or "molly" in name:
        return "Poeciliidae"
    if "catfish" in name or "pleco" in name:
        return "Loricariidae"
    return "Cyprinidae"


def origin(product_name: str, categories: list[str] | None = None) -> str:
    text = " ".join([product_name, *(categories or [])]).lower()
    if "malawi" in text:
        return "Lake Malawi, Africa"
    if "tanganyika" in text:
        return "Lake Tanganyika, Africa"
    if "victoria" in text:
        return "Lake Victoria, Africa"
    if "south american" in text:
        return "South America"
    if "asian" in text:
        return "Southeast Asia"
    return "Various freshwater habitats"


def search_keywords(product_name: str) -> list[str]:
    name = product_name.lower()
    keywords = ["freshwater fish", "aquarium fish", "tropical fish", name]
    if "cichlid" in name:
        keywords += ["cichlid", "african cichlid"]
    if "tetra" in name:
        keywords += ["schooling fish", "community fish"]
    return keywords[:8]


def max_size(product_name: str) -> str:
    name = product_name.lower()
    if "dwarf" in name:
        return "2-3 inches"
    if "large" in name or "giant" in name:
        return "8-12 inches"
    if "tetra" in name:
        return "1-2 inches"
    if "cichlid" in name:
        return "4-6 inches"
    return "3-5 inches"


def similar_species(product_name: str) -> list[str]:
    first = product_name.split(" ")[0] if product_name else "Related"
    return [f"Similar {first} species", "Related varieties"]


def confidence(product: Product) -> str:
    """high / medium / low from how complete the product record is."""
    score = 70
    if product.description and len(product.description) > 50:
        score += 10
    if product.categories:
        score += 10
    if product.brand and product.brand.name:
        score += 5
    if product.default_image and product.default_image.url:
        score += 5
    if score >= 90:
        return "high"
    if score >= 80:
        return "medium"
    return "low"
