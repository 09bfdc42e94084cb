"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio

import httpx
import pytest
import pytest_asyncio

from rcb.catalog import CachingProductSource, DemoCatalog, InMemoryProductCache
from rcb.config import Settings
from rcb.content import ContentLibrary, InMemoryContentStore
from rcb.errors import DeploymentFailure, SourceUnavailable
from rcb.generate import TemplateContentGenerator
from rcb.jobs import InMemoryJobStore, JobEventBroker
from rcb.jobs.engine import JobEngine
from rcb.publish import CatalystPublisher
from rcb.schemas.catalog import Brand, Category, Product, ProductImage


def make_product(product_id: int, name: str | None = None, category: str = "Tetras") -> Product:
    name = name or f"Neon Tetra {product_id}"
    return Product(
        entity_id=product_id,
        product_id=product_id,
        name=name,
        price=4.99,
        categories=[category],
        description=f"{name} is a hardy schooling fish that brightens any planted community aquarium.",
        brand=Brand(name="AquaLife"),
        default_image=ProductImage(url=f"https://cdn.example.com/{product_id}.jpg", alt_text=name),
        path=f"/products/{product_id}",
    )


class FakeSource:
    """Product source over a fixed dict of category id -> products."""

    def __init__(self, by_category: dict[int, list[Product]] | None = None, error: Exception | None = None):
        self.by_category = by_category or {}
        self.error = error
        self.calls: list[int | None] = []

    async def get_categories(self) -> list[Category]:
        if self.error:
            raise self.error
        return [Category(id=cid, name=f"Category {cid}", product_count=len(ps)) for cid, ps in self.by_category.items()]

    async def get_products_by_category(self, category_id: int) -> list[Product]:
        self.calls.append(category_id)
        if self.error:
            raise self.error
        return list(self.by_category.get(category_id, []))

    async def get_all_products(self) -> list[Product]:
        self.calls.append(None)
        if self.error:
            raise self.error
        return [p for ps in self.by_category.values() for p in ps]

    async def get_product(self, product_id: int) -> Product | None:
        for ps in self.by_category.values():
            for p in ps:
                if p.product_id == product_id:
                    return p
        return None


class FakeGenerator:
    """Template generator with scripted failures and an optional gate.

    ``failures`` maps product id -> exception to raise. When ``gate`` is set,
    every call signals ``entered`` and then waits for the gate to open.
    """

    def __init__(self):
        self.inner = TemplateContentGenerator()
        self.failures: dict[int, Exception] = {}
        self.calls: list[int] = []
        self.gate: asyncio.Event | None = None
        self.entered = asyncio.Event()
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate(self, product, config):
        self.calls.append(product.product_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.entered.set()
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
            if product.product_id in self.failures:
                raise self.failures[product.product_id]
            return await self.inner.generate(product, config)
        finally:
            self.in_flight -= 1


class FakePublisher:
    def __init__(self):
        self.failures: set[int] = set()
        self.refusals: set[int] = set()
        self.published: list[int] = []

    async def publish(self, content, product) -> bool:
        if product.product_id in self.failures:
            raise DeploymentFailure(f"Catalyst rejected product {product.product_id}: HTTP 500")
        if product.product_id in self.refusals:
            return False
        self.published.append(product.product_id)
        return True


@pytest.fixture
def products():
    return [make_product(i) for i in range(1, 6)]


@pytest.fixture
def source(products):
    return FakeSource({4: products})


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def job_store():
    return InMemoryJobStore()


@pytest.fixture
def library():
    return ContentLibrary(InMemoryContentStore())


@pytest_asyncio.fixture
async def engine(job_store, source, generator, publisher, library):
    """Engine whose scheduler never fires on its own; tests drive ticks with ``advance``."""
    eng = JobEngine(
        job_store,
        source,
        generator,
        publisher,
        library=library,
        events=JobEventBroker(),
        tick_interval=0,
        start_delay=3600,
        source_timeout=1.0,
        generation_timeout=1.0,
    )
    yield eng
    await eng.shutdown()


@pytest.fixture
def failing_source():
    return FakeSource(error=SourceUnavailable("BigCommerce API error: 503"))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        rcb_data_dir=str(tmp_path / "data"),
        rcb_database_url=None,
        bigcommerce_store_hash=None,
        bigcommerce_access_token=None,
        rcb_generator="template",
        rcb_stream_heartbeat=0.05,
    )


def catalyst_transport(routes: dict[tuple[str, str], int], seen: list[httpx.Request] | None = None):
    """MockTransport answering ``(method, path) -> status``; anything else is 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        status = routes.get((request.method, request.url.path), 404)
        if request.url.path.startswith("/api/content/status/") and status == 200:
            return httpx.Response(200, json={"status": "deployed"})
        return httpx.Response(status, json={"ok": status < 400})

    return httpx.MockTransport(handler)


@pytest.fixture
def demo_source():
    return CachingProductSource(DemoCatalog(), InMemoryProductCache())


@pytest.fixture
def catalyst_publisher(tmp_path):
    transport = catalyst_transport({("POST", "/api/sync/content"): 200, ("GET", "/api/health"): 200})
    return CatalystPublisher(
        "https://catalyst.test",
        deployment_method="file-sync",
        output_dir=tmp_path / "json-files",
        transport=transport,
    )
