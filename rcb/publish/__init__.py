"""Publishing: content artifacts and delivery to the Catalyst storefront."""

from typing import Protocol

from rcb.config import Settings
from rcb.publish.catalyst import (
    DEPLOYMENT_METHODS,
    CatalystPublisher,
    transform_for_catalyst,
)
from rcb.publish.files import (
    DASHBOARD_LAYOUT,
    STOREFRONT_LAYOUT,
    ContentFileBuilder,
    FileLayout,
)
from rcb.schemas.catalog import Product
from rcb.schemas.content import AISearchContent


class Publisher(Protocol):
    async def publish(self, content: AISearchContent, product: Product) -> bool:
        """True once delivered; raises DeploymentFailure otherwise."""
        ...


def build_publisher(settings: Settings) -> CatalystPublisher:
    return CatalystPublisher(
        settings.catalyst_url,
        api_key=settings.catalyst_api_key,
        deployment_method=settings.catalyst_deployment_method,
        output_dir=settings.output_dir,
        timeout=settings.catalyst_timeout,
    )


__all__ = [
    "DASHBOARD_LAYOUT",
    "DEPLOYMENT_METHODS",
    "STOREFRONT_LAYOUT",
    "CatalystPublisher",
    "ContentFileBuilder",
    "FileLayout",
    "Publisher",
    "build_publisher",
    "transform_for_catalyst",
]
