"""Catalyst storefront diagnostics."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from backend.deps import Services, get_services
from rcb.errors import DeploymentFailure, GenerationFailure, SourceUnavailable
from rcb.publish import DEPLOYMENT_METHODS
from rcb.schemas.api_schemas import CatalystTestRequest
from rcb.schemas.content import ContentConfig

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/catalyst/test")
async def catalyst_info(services: Services = Depends(get_services)) -> dict[str, Any]:
    """Connection test, deployment methods and a sample product."""
    connection_ok = await services.publisher.test_connection()
    try:
        categories = await services.source.get_categories()
        sample = None
        for category in categories:
            products = await services.source.get_products_by_category(category.id)
            if products:
                sample = products[0]
                break
    except SourceUnavailable as e:
        raise HTTPException(status_code=500, detail=f"Failed to get Catalyst information: {e}")

    return {
        "catalyst": {
            "url": services.publisher.base_url,
            "connectionTest": connection_ok,
            "deploymentMethod": services.publisher.deployment_method,
            "deploymentMethods": list(DEPLOYMENT_METHODS),
        },
        "sampleProduct": (
            {"id": sample.product_id, "name": sample.name, "categories": sample.categories}
            if sample
            else None
        ),
        "instructions": {
            "testSingleProduct": 'POST /catalyst/test with {"productId": 123}',
            "integration": "Content is generated and published to Catalyst during job processing",
        },
    }


@router.post("/catalyst/test")
async def catalyst_test(body: CatalystTestRequest, services: Services = Depends(get_services)) -> dict[str, Any]:
    """Generate and publish one product, then report the outcome."""
    try:
        product = await services.source.get_product(body.product_id)
    except SourceUnavailable as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch product: {e}")
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    logger.info("Testing Catalyst integration for product %s (%s)", product.product_id, product.name)
    try:
        content = await services.generator.generate(product, ContentConfig())
    except GenerationFailure as e:
        raise HTTPException(status_code=502, detail=f"Content generation failed: {e}")

    connection_ok = await services.publisher.test_connection()
    publish_error = None
    try:
        published = await services.publisher.publish(content, product)
    except DeploymentFailure as e:
        published = False
        publish_error = str(e)
    deployment_status = await services.publisher.get_deployment_status(product.product_id)

    wire = content.to_wire()
    return {
        "success": published,
        "product": {"id": product.product_id, "name": product.name},
        "aiContent": {
            "generated": True,
            "confidence": content.metadata.confidence,
            "template": content.metadata.template,
        },
        "catalyst": {
            "connectionTest": connection_ok,
            "publishResult": published,
            "publishError": publish_error,
            "deploymentStatus": deployment_status,
            "catalystUrl": services.publisher.base_url,
        },
        "generatedContent": {
            "basicInfo": wire["basicInfo"],
            "careGuide": wire["careRequirements"],
            "compatibility": wire["compatibility"],
            "faqs": wire["aiContext"]["commonQuestions"],
        },
    }
