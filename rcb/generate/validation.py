"""Content validation at the generator boundary.

Each rule yields an issue with a severity. The job's validation level picks
which severities reject the content:

- strict: critical, major and minor
- moderate: critical and major
- lenient: critical only

Score starts at 100 and loses points per issue and warning.
"""

from __future__ import annotations

from rcb.errors import ContentValidationFailure
from rcb.schemas.content import (
    AISearchContent,
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
)

REJECTING_SEVERITIES: dict[str, frozenset[str]] = {
    "strict": frozenset({"critical", "major", "minor"}),
    "moderate": frozenset({"critical", "major"}),
    "lenient": frozenset({"critical"}),
}

_PENALTY = {"critical": 30, "major": 15, "minor": 5}
_WARNING_PENALTY = 2
PLACEHOLDER_SCIENTIFIC_NAME = "Genus species"


def _blank(value: object) -> bool:
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list):
        return not value
    return value is None


def check_content(content: AISearchContent) -> tuple[list[ValidationIssue], list[ValidationWarning]]:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationWarning] = []

    info = content.basic_info
    if _blank(info.scientific_name):
        errors.append(ValidationIssue(field="basicInfo.scientificName", message="Scientific name is missing", severity="critical"))
    elif info.scientific_name == PLACEHOLDER_SCIENTIFIC_NAME:
        warnings.append(ValidationWarning(
            field="basicInfo.scientificName",
            message="Scientific name is a placeholder",
            suggestion="Add the species' binomial name to the product title or description",
        ))
    if _blank(info.common_names):
        errors.append(ValidationIssue(field="basicInfo.commonNames", message="At least one common name is required", severity="major"))
    for name in ("family", "origin", "water_type"):
        if _blank(getattr(info, name)):
            errors.append(ValidationIssue(field=f"basicInfo.{_camel(name)}", message=f"{name} is empty", severity="minor"))

    care = content.care_requirements
    for name, value in care.model_dump().items():
        if _blank(value):
            errors.append(ValidationIssue(
                field=f"careRequirements.{_camel(name)}",
                message=f"Care requirement '{name}' is empty",
                severity="major",
            ))

    if _blank(content.compatibility.compatible_with):
        errors.append(ValidationIssue(field="compatibility.compatibleWith", message="No compatible species listed", severity="minor"))
    if _blank(content.ai_context.why_popular):
        errors.append(ValidationIssue(field="aiContext.whyPopular", message="Popularity summary is empty", severity="minor"))
    if _blank(content.ai_context.common_questions):
        errors.append(ValidationIssue(field="aiContext.commonQuestions", message="No FAQ entries", severity="minor"))
    elif any(_blank(q.question) or _blank(q.answer) for q in content.ai_context.common_questions):
        errors.append(ValidationIssue(field="aiContext.commonQuestions", message="FAQ entry with empty question or answer", severity="major"))

    if len(content.search_keywords) < 3:
        warnings.append(ValidationWarning(
            field="searchKeywords",
            message=f"Only {len(content.search_keywords)} search keywords",
            suggestion="Provide at least three keywords",
        ))
    if content.metadata.confidence == "low":
        warnings.append(ValidationWarning(
            field="metadata.confidence",
            message="Low confidence content",
            suggestion="Enrich the product description, categories, brand and image",
        ))
    return errors, warnings


def validate_content(content: AISearchContent, level: str = "moderate") -> ValidationResult:
    errors, warnings = check_content(content)
    rejecting = REJECTING_SEVERITIES.get(level, REJECTING_SEVERITIES["moderate"])
    score = 100 - sum(_PENALTY[e.severity] for e in errors) - _WARNING_PENALTY * len(warnings)
    return ValidationResult(
        is_valid=not any(e.severity in rejecting for e in errors),
        errors=errors,
        warnings=warnings,
        score=max(0, score),
    )


def ensure_valid(content: AISearchContent, level: str) -> ValidationResult:
    """Validate and raise ContentValidationFailure when the level rejects it."""
    result = validate_content(content, level)
    if not result.is_valid:
        fields = ", ".join(e.field for e in result.errors)
        raise ContentValidationFailure(
            f"Content for product {content.product_id} failed {level} validation: {fields}",
            result,
        )
    return result


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)
