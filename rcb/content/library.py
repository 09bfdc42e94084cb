"""Dashboard view of generated content: record, edit, delete and regenerate."""

from __future__ import annotations

import logging
from typing import Any

from rcb.catalog.base import ProductSource
from rcb.content.store import ContentRecord, ContentStore
from rcb.errors import InvalidContentFile, NotFound
from rcb.generate.base import ContentGenerator
from rcb.generate.validation import validate_content
from rcb.publish.files import DASHBOARD_LAYOUT, ContentFileBuilder
from rcb.schemas.api_schemas import RegenerateResponse, RegenerateResult
from rcb.schemas.base import utcnow
from rcb.schemas.catalog import Product
from rcb.schemas.content import AISearchContent, ContentConfig

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "quickref": ("productId", "type", "quickReference"),
    "details": ("productId", "basicInfo", "careRequirements"),
}


class ContentLibrary:
    def __init__(self, store: ContentStore, builder: ContentFileBuilder | None = None):
        self.store = store
        self.builder = builder or ContentFileBuilder(DASHBOARD_LAYOUT)

    def record(
        self,
        content: AISearchContent,
        product: Product,
        *,
        validation_level: str = "moderate",
        types: tuple[str, ...] | None = None,
    ) -> list[ContentRecord]:
        """Save the summary and details artifacts for a generated content object."""
        validation = validate_content(content, validation_level)
        saved = []
        for file_type, data in self.builder.build(content, product).items():
            if types is not None and file_type not in types:
                continue
            record = ContentRecord(
                product_id=product.product_id,
                product_name=product.name,
                type=file_type,
                content=data,
                validation=validation,
            )
            self.store.save(record)
            saved.append(record)
        return saved

    def list(self) -> list[ContentRecord]:
        return self.store.list()

    def put(self, product_id: int, file_type: str, content: dict[str, Any]) -> ContentRecord:
        """Replace one artifact with edited JSON. Refreshes its generation timestamp."""
        required = REQUIRED_FIELDS.get(file_type)
        if required is None:
            raise InvalidContentFile(f'Type must be one of {", ".join(REQUIRED_FIELDS)}')
        missing = [f for f in required if not content.get(f)]
        if missing:
            raise InvalidContentFile(
                f"{file_type} JSON must have {', '.join(required)} fields (missing {', '.join(missing)})"
            )

        content = dict(content)
        now = utcnow().isoformat()
        if file_type == "quickref":
            content["generatedAt"] = now
        else:
            content["metadata"] = {**(content.get("metadata") or {}), "generatedAt": now}

        existing = self.store.get(product_id, file_type)
        record = ContentRecord(
            product_id=product_id,
            product_name=existing.product_name if existing else f"Product {product_id}",
            type=file_type,
            content=content,
        )
        self.store.save(record)
        return record

    def delete(self, product_id: int, file_type: str) -> None:
        if not self.store.delete(product_id, file_type):
            raise NotFound(f"JSON file {product_id}-{file_type} not found")

    async def regenerate(
        self,
        source: ProductSource,
        generator: ContentGenerator,
        product_id: int,
        regenerate_type: str | None = None,
        config: ContentConfig | None = None,
    ) -> RegenerateResponse:
        """Generate fresh content for one product and store the requested artifacts.

        Raises NotFound for an unknown product and lets GenerationFailure propagate.
        """
        product = await source.get_product(product_id)
        if product is None:
            raise NotFound(f"Product {product_id} not found")
        config = config or ContentConfig()
        content = await generator.generate(product, config)
        types = (regenerate_type,) if regenerate_type else self.builder.layout.types
        saved = self.record(content, product, validation_level=config.validation, types=types)
        logger.info("Regenerated %s for product %s", ", ".join(types), product_id)
        saved_types = {r.type for r in saved}
        return RegenerateResponse(
            success=True,
            product_id=product_id,
            product_name=product.name,
            results=[RegenerateResult(type=t, success=t in saved_types) for t in types],
        )
