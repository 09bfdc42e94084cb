"""Job endpoints: CRUD, lifecycle commands, progress and the live update stream.

GET /jobs/stream
  → Server-Sent Events. One ``job_update`` event per job on connect, then one
    per committed change. Heartbeat comments while idle. With ``ids`` the stream
    ends once every named job is terminal (or gone).
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse

from backend.deps import Services, get_engine, get_services
from rcb.errors import InvalidTransition, NotFound, SourceUnavailable
from rcb.jobs.engine import JobEngine
from rcb.jobs.models import ProcessingJob
from rcb.schemas.api_schemas import CreateJobRequest, SuccessResponse, UpdateJobRequest

logger = logging.getLogger(__name__)
router = APIRouter()


def _sse(job: ProcessingJob) -> str:
    payload = {"type": "job_update", "job": job.to_wire()}
    return f"data: {json.dumps(payload)}\n\n"


async def job_events(
    request: Request,
    engine: JobEngine,
    job_ids: list[str],
    heartbeat: float,
) -> AsyncIterator[str]:
    # Subscribe before the initial snapshot so no commit falls between the two
    with engine.events.subscribe(job_ids) as sub:
        if job_ids:
            initial = [j for j in (engine.store.get(i) for i in job_ids) if j is not None]
        else:
            initial = engine.list()
        for job in initial:
            yield _sse(job)

        open_ids = {j.id for j in initial if not j.is_terminal}
        if job_ids and not open_ids:
            return

        while True:
            if await request.is_disconnected():
                return
            try:
                job = await asyncio.wait_for(sub.get(), timeout=heartbeat)
            except asyncio.TimeoutError:
                yield ": heartbeat\n\n"
                if job_ids:
                    open_ids = {i for i in open_ids if engine.store.get(i) is not None}
                    if not open_ids:
                        return
                continue
            yield _sse(job)
            if job_ids and job.is_terminal:
                open_ids.discard(job.id)
                if not open_ids:
                    return


@router.get("/jobs")
async def list_jobs(engine: JobEngine = Depends(get_engine)) -> list[dict[str, Any]]:
    return [job.to_wire() for job in engine.list()]


@router.post("/jobs", status_code=status.HTTP_201_CREATED)
async def create_job(body: CreateJobRequest, engine: JobEngine = Depends(get_engine)) -> dict[str, Any]:
    try:
        job = await engine.create(body.categories, body.batch_size, body.concurrent, body.config)
    except SourceUnavailable as e:
        logger.error("Job creation failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to create job: {e}")
    return job.to_wire()


# Declared before /jobs/{job_id} so "stream" is not taken for a job id
@router.get("/jobs/stream")
async def stream_jobs(
    request: Request,
    ids: Optional[str] = Query(default=None, description="Comma-separated job ids"),
    services: Services = Depends(get_services),
):
    job_ids = [i.strip() for i in (ids or "").split(",") if i.strip()]
    return StreamingResponse(
        job_events(request, services.engine, job_ids, services.settings.rcb_stream_heartbeat),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/jobs/{job_id}")
async def get_job(job_id: str, engine: JobEngine = Depends(get_engine)) -> dict[str, Any]:
    try:
        return engine.get(job_id).to_wire()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/jobs/{job_id}")
async def update_job(
    job_id: str, body: UpdateJobRequest, engine: JobEngine = Depends(get_engine)
) -> dict[str, Any]:
    try:
        job = await engine.set_status(job_id, body.status)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return job.to_wire()


@router.delete("/jobs/{job_id}", response_model=SuccessResponse)
async def delete_job(job_id: str, engine: JobEngine = Depends(get_engine)):
    try:
        await engine.delete(job_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SuccessResponse(success=True)


@router.get("/jobs/{job_id}/progress")
async def job_progress(job_id: str, engine: JobEngine = Depends(get_engine)) -> dict[str, Any]:
    """Counters plus the latest per-tick update (current product, time remaining)."""
    try:
        job = engine.get(job_id)
        update = engine.latest_progress(job_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        "jobId": job.id,
        "status": job.status.value,
        "progress": job.progress.to_wire(),
        "update": update.to_wire() if update else None,
    }


@router.get("/jobs/{job_id}/report")
async def job_report(job_id: str, engine: JobEngine = Depends(get_engine)) -> dict[str, Any]:
    try:
        return engine.report(job_id).to_wire()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
