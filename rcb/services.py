"""Wire the catalog, generator, publisher, stores and engine from settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rcb.catalog import ProductSource, build_product_source
from rcb.config import Settings
from rcb.content import ContentLibrary, build_content_store
from rcb.generate import ContentGenerator, build_generator
from rcb.jobs import JobEventBroker, build_job_store
from rcb.jobs.engine import JobEngine
from rcb.publish import CatalystPublisher, build_publisher

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    source: ProductSource
    generator: ContentGenerator
    publisher: CatalystPublisher
    library: ContentLibrary
    engine: JobEngine


def build_services(settings: Settings, **engine_overrides: float) -> Services:
    """Everything the API and CLI need. ``engine_overrides`` replace engine timings."""
    source = build_product_source(settings)
    generator = build_generator(settings)
    publisher = build_publisher(settings)
    library = ContentLibrary(build_content_store(settings))
    timings = {
        "tick_interval": settings.rcb_tick_interval,
        "start_delay": settings.rcb_start_delay,
        "source_timeout": settings.rcb_source_timeout,
        "generation_timeout": settings.rcb_generation_timeout,
        **engine_overrides,
    }
    engine = JobEngine(
        build_job_store(settings),
        source,
        generator,
        publisher,
        library=library,
        events=JobEventBroker(),
        max_retries=settings.rcb_max_retries,
        **timings,
    )
    logger.info(
        "Catalyst publisher: %s (%s)", settings.catalyst_url, settings.catalyst_deployment_method
    )
    return Services(
        settings=settings,
        source=source,
        generator=generator,
        publisher=publisher,
        library=library,
        engine=engine,
    )
