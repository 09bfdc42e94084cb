"""JSON file endpoints: the per-product quickref/details artifacts.

GET    /json-files  → list every stored artifact
PUT    /json-files  → replace one artifact with edited JSON
DELETE /json-files  → remove one artifact
POST   /json-files  → regenerate one or both artifacts for a product
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.deps import Services, get_services
from rcb.errors import GenerationFailure, InvalidContentFile, NotFound, SourceUnavailable
from rcb.schemas.api_schemas import (
    DeleteJSONFileRequest,
    JSONFile,
    PutJSONFileRequest,
    RegenerateRequest,
    RegenerateResponse,
    SuccessResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/json-files", response_model=list[JSONFile])
async def list_json_files(services: Services = Depends(get_services)):
    return [
        JSONFile(
            product_id=r.product_id,
            product_name=r.product_name,
            type=r.type,
            filename=r.filename,
            content=r.content,
            last_modified=r.last_modified,
            size=r.size,
        )
        for r in services.library.list()
    ]


@router.put("/json-files", response_model=SuccessResponse)
async def put_json_file(body: PutJSONFileRequest, services: Services = Depends(get_services)):
    try:
        services.library.put(body.product_id, body.type, body.content)
    except InvalidContentFile as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SuccessResponse(success=True)


@router.delete("/json-files", response_model=SuccessResponse)
async def delete_json_file(body: DeleteJSONFileRequest, services: Services = Depends(get_services)):
    try:
        services.library.delete(body.product_id, body.type)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SuccessResponse(success=True)


@router.post("/json-files", response_model=RegenerateResponse)
async def regenerate_json_files(body: RegenerateRequest, services: Services = Depends(get_services)):
    try:
        return await services.library.regenerate(
            services.source,
            services.generator,
            body.product_id,
            body.regenerate_type,
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SourceUnavailable as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch product: {e}")
    except GenerationFailure as e:
        logger.warning("Regeneration failed for product %s: %s", body.product_id, e)
        raise HTTPException(status_code=502, detail=f"Content generation failed: {e}")
