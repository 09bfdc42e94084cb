"""FastAPI backend for the Riverpark content builder dashboard."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from backend.deps import Services, build_services
from rcb import __version__
from rcb.config import Settings, get_settings

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


class HealthResponse(BaseModel):
    status: str
    data_dir: str
    catalog: str
    generator: str
    active_jobs: int


def create_app(services: Services | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the API. Tests pass their own ``services``; otherwise they come from settings."""
    settings = settings or (services.settings if services else get_settings())
    services = services or build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await services.engine.shutdown()

    app = FastAPI(
        title="Riverpark Content Builder API",
        description="Bulk AI product content jobs for the Riverpark catalog.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = services

    # CORS
    cors_kw: dict = {
        "allow_origins": settings.cors_origin_list,
        "allow_credentials": True,
        "allow_methods": ["*"],
        "allow_headers": ["*"],
    }
    if settings.cors_origin_regex:
        cors_kw["allow_origin_regex"] = settings.cors_origin_regex
    logger.info("CORS configured for origins: %s", settings.cors_origin_list)
    app.add_middleware(CORSMiddleware, **cors_kw)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        return HealthResponse(
            status="ok",
            data_dir=str(settings.data_dir),
            catalog="bigcommerce" if settings.bigcommerce_configured else "demo",
            generator=settings.rcb_generator,
            active_jobs=sum(1 for j in services.engine.list() if services.engine.is_scheduled(j.id)),
        )

    from backend.routes import catalog, catalyst, jobs, json_files

    app.include_router(catalog.router, tags=["catalog"])
    app.include_router(jobs.router, tags=["jobs"])
    app.include_router(json_files.router, tags=["json-files"])
    app.include_router(catalyst.router, tags=["catalyst"])
    return app


app = create_app()
