"""Content generator contract."""

from typing import Protocol

from rcb.schemas.catalog import Product
from rcb.schemas.content import AISearchContent, ContentConfig


class ContentGenerator(Protocol):
    async def generate(self, product: Product, config: ContentConfig) -> AISearchContent:
        """Full content object for ``product``.

        Raises ``GenerationFailure`` (or a subclass) instead of returning
        partial content.
        """
        ...
