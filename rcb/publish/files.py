"""Build the two per-product content artifacts.

One builder serves both naming layouts:

- dashboard: ``quickref`` (summary) and ``details`` (full content)
- storefront: ``species`` (summary) and ``ai-search`` (full content)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rcb.schemas.catalog import Product
from rcb.schemas.content import AISearchContent, SpeciesContent, SummaryMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileLayout:
    summary_type: str
    details_type: str

    @property
    def types(self) -> tuple[str, str]:
        return (self.summary_type, self.details_type)


DASHBOARD_LAYOUT = FileLayout(summary_type="quickref", details_type="details")
STOREFRONT_LAYOUT = FileLayout(summary_type="species", details_type="ai-search")


def quick_reference(content: AISearchContent) -> list[str]:
    care = content.care_requirements
    info = content.basic_info
    return [
        f"Tank Size: {care.min_tank_size}",
        f"Temperature: {care.temperature_range}",
        f"pH: {care.ph_range}",
        f"Care Level: {care.care_level}",
        f"Temperament: {care.temperament}",
        f"Max Size: {care.max_size}",
        f"Diet: {care.diet}",
        f"Lifespan: {care.lifespan}",
        f"Origin: {info.origin}",
        f"Family: {info.family}",
    ]


class ContentFileBuilder:
    def __init__(self, layout: FileLayout = DASHBOARD_LAYOUT):
        self.layout = layout

    def filename(self, product_id: int, file_type: str) -> str:
        return f"{product_id}-{file_type}.json"

    def build_summary(self, content: AISearchContent, product: Product) -> SpeciesContent:
        return SpeciesContent(
            product_id=content.product_id,
            type=self.layout.summary_type,
            scientific_name=content.basic_info.scientific_name,
            common_name=(content.basic_info.common_names or [product.name])[0],
            quick_reference=quick_reference(content),
            generated_at=content.metadata.generated_at,
            metadata=SummaryMetadata(
                fish_family=content.metadata.fish_family,
                template=content.metadata.template,
            ),
        )

    def build(self, content: AISearchContent, product: Product) -> dict[str, dict[str, Any]]:
        """Both artifacts as wire dicts keyed by file type."""
        return {
            self.layout.summary_type: self.build_summary(content, product).to_wire(),
            self.layout.details_type: content.to_wire(),
        }

    def write(self, output_dir: Path, content: AISearchContent, product: Product) -> list[Path]:
        """Write both artifacts as JSON files under ``output_dir``."""
        output_dir.mkdir(parents=True, exist_ok=True)
        paths = []
        for file_type, data in self.build(content, product).items():
            path = output_dir / self.filename(content.product_id, file_type)
            path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            paths.append(path)
        logger.info("Wrote %s for product %s", ", ".join(p.name for p in paths), content.product_id)
        return paths
