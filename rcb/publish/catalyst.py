"""Deliver generated content to the Catalyst storefront.

Strategies are tried in a fixed order starting from the configured
deployment method: webhook, api, file-sync. Only an absent endpoint (HTTP 404)
moves on to the next one; when even the sync endpoint is absent the content is
written as static JSON files for manual import. Any other HTTP or transport
error is a ``DeploymentFailure``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from rcb.errors import DeploymentFailure
from rcb.publish.files import STOREFRONT_LAYOUT, ContentFileBuilder
from rcb.schemas.base import utcnow
from rcb.schemas.catalog import Product
from rcb.schemas.content import AISearchContent

logger = logging.getLogger(__name__)

DEPLOYMENT_METHODS = ("webhook", "api", "file-sync")


class EndpointAbsent(Exception):
    """The storefront does not expose the strategy's endpoint."""


def enhanced_description(content: AISearchContent) -> str:
    info = content.basic_info
    care = content.care_requirements
    points = "\n".join(f"• {p}" for p in content.ai_context.key_selling_points)
    return (
        f"**{info.scientific_name}** ({', '.join(info.common_names)})\n\n"
        f"{content.ai_context.why_popular}\n\n"
        "**Quick Care Facts:**\n"
        f"• Tank Size: {care.min_tank_size}\n"
        f"• Temperature: {care.temperature_range}\n"
        f"• pH: {care.ph_range}\n"
        f"• Care Level: {care.care_level}\n"
        f"• Temperament: {care.temperament}\n\n"
        f"**Key Features:**\n{points}\n\n"
        f"**Origin:** {info.origin}\n"
        f"**Family:** {info.family}"
    )


def transform_for_catalyst(content: AISearchContent) -> dict[str, Any]:
    """Storefront-facing payload derived from the full content object."""
    wire = content.to_wire()
    care = content.care_requirements
    compat = content.compatibility
    return {
        "enhancedDescription": enhanced_description(content),
        "careGuide": {
            "difficulty": care.care_level,
            "tankSize": care.min_tank_size,
            "temperature": care.temperature_range,
            "ph": care.ph_range,
            "diet": care.diet,
            "temperament": care.temperament,
            "lifespan": care.lifespan,
        },
        "compatibility": {
            "compatibleSpecies": compat.compatible_with,
            "avoidSpecies": compat.avoid_with,
            "tankMateCategories": compat.tank_mate_categories,
        },
        "frequentlyAsked": wire["aiContext"]["commonQuestions"],
        "seoKeywords": content.search_keywords,
        "alternativeNames": content.ai_context.alternative_names,
        "breedingInfo": wire["breeding"],
        "recommendations": wire["relatedProducts"],
        "displayMetadata": {
            "scientificName": content.basic_info.scientific_name,
            "family": content.basic_info.family,
            "origin": content.basic_info.origin,
            "whyPopular": content.ai_context.why_popular,
            "sellingPoints": content.ai_context.key_selling_points,
        },
    }


class CatalystPublisher:
    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        deployment_method: str = "file-sync",
        output_dir: Path | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if deployment_method not in DEPLOYMENT_METHODS:
            raise ValueError(
                f"Unknown deployment method {deployment_method!r}; expected one of {DEPLOYMENT_METHODS}"
            )
        self.base_url = base_url.rstrip("/")
        self.deployment_method = deployment_method
        self._api_key = api_key
        self._output_dir = output_dir
        self._timeout = timeout
        self._transport = transport
        self._files = ContentFileBuilder(STOREFRONT_LAYOUT)

    def _client(self) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def publish(self, content: AISearchContent, product: Product) -> bool:
        """Deliver ``content``; True on success, DeploymentFailure otherwise."""
        strategies = {
            "webhook": self._via_webhook,
            "api": self._via_api,
            "file-sync": self._via_file_sync,
        }
        start = DEPLOYMENT_METHODS.index(self.deployment_method)
        try:
            async with self._client() as client:
                for method in DEPLOYMENT_METHODS[start:]:
                    try:
                        await strategies[method](client, content)
                        logger.debug("Published product %s via %s", content.product_id, method)
                        return True
                    except EndpointAbsent:
                        logger.info("Catalyst %s endpoint not found, falling back", method)
        except httpx.HTTPStatusError as e:
            raise DeploymentFailure(
                f"Catalyst rejected product {content.product_id}: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise DeploymentFailure(f"Catalyst unreachable: {e}") from e

        return self._write_static_files(content, product)

    async def _via_webhook(self, client: httpx.AsyncClient, content: AISearchContent) -> None:
        response = await client.post(
            "/api/content/ai-generated",
            json={
                "productId": content.product_id,
                "content": content.to_wire(),
                "timestamp": utcnow().isoformat(),
            },
        )
        _check(response)

    async def _via_api(self, client: httpx.AsyncClient, content: AISearchContent) -> None:
        response = await client.put(
            f"/api/products/{content.product_id}/ai-content", json=content.to_wire()
        )
        _check(response)

    async def _via_file_sync(self, client: httpx.AsyncClient, content: AISearchContent) -> None:
        response = await client.post(
            "/api/sync/content",
            headers={"X-Content-Type": "ai-generated"},
            json={
                "productId": content.product_id,
                "catalystContent": transform_for_catalyst(content),
                "metadata": {
                    "generatedAt": content.metadata.generated_at,
                    "confidence": content.metadata.confidence,
                    "template": content.metadata.template,
                },
            },
        )
        _check(response)

    def _write_static_files(self, content: AISearchContent, product: Product) -> bool:
        if self._output_dir is None:
            raise DeploymentFailure("Catalyst sync endpoint absent and no output directory configured")
        try:
            self._files.write(self._output_dir, content, product)
            bundle = {
                "productId": content.product_id,
                "lastUpdated": utcnow().isoformat(),
                "content": transform_for_catalyst(content),
                "rawAIContent": content.to_wire(),
            }
            path = self._output_dir / f"{content.product_id}-catalyst.json"
            path.write_text(json.dumps(bundle, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise DeploymentFailure(f"Could not write static content files: {e}") from e
        logger.info("Catalyst sync unavailable; wrote static content for product %s", content.product_id)
        return True

    async def test_connection(self) -> bool:
        try:
            async with self._client() as client:
                response = await client.get("/api/health")
            return response.is_success
        except httpx.HTTPError as e:
            logger.warning("Catalyst connection test failed: %s", e)
            return False

    async def get_deployment_status(self, product_id: int) -> dict[str, Any] | None:
        try:
            async with self._client() as client:
                response = await client.get(f"/api/content/status/{product_id}")
            if response.is_success:
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not fetch deployment status for %s: %s", product_id, e)
        return None


def _check(response: httpx.Response) -> None:
    if response.status_code == 404:
        raise EndpointAbsent(str(response.url))
    response.raise_for_status()
