"""Tests for Catalyst publishing: strategy fallback, static files and failures."""

import json

import httpx
import pytest

from rcb.errors import DeploymentFailure
from rcb.generate import TemplateContentGenerator
from rcb.publish import CatalystPublisher, transform_for_catalyst
from rcb.schemas.content import ContentConfig
from tests.conftest import catalyst_transport, make_product


@pytest.fixture
def product():
    return make_product(4001, name="Neon Tetra", category="Tetras")


@pytest.fixture
def content(product):
    return TemplateContentGenerator().build(product, ContentConfig(template_type="tetra-schooling"))


def _publisher(routes, seen, tmp_path=None, method="file-sync", **kw):
    return CatalystPublisher(
        "https://catalyst.test/",
        deployment_method=method,
        output_dir=tmp_path,
        transport=catalyst_transport(routes, seen),
        **kw,
    )


@pytest.mark.asyncio
async def test_file_sync_posts_transformed_content(content, product):
    seen = []
    publisher = _publisher({("POST", "/api/sync/content"): 200}, seen)
    assert await publisher.publish(content, product) is True

    assert len(seen) == 1
    request = seen[0]
    assert request.headers["X-Content-Type"] == "ai-generated"
    body = json.loads(request.content)
    assert body["productId"] == 4001
    assert body["catalystContent"]["careGuide"]["tankSize"] == "20+ gallons"
    assert body["metadata"]["template"] == "tetra-schooling"


@pytest.mark.asyncio
async def test_webhook_falls_back_on_absent_endpoints(content, product):
    seen = []
    publisher = _publisher({("POST", "/api/sync/content"): 200}, seen, method="webhook")
    assert await publisher.publish(content, product) is True
    assert [(r.method, r.url.path) for r in seen] == [
        ("POST", "/api/content/ai-generated"),
        ("PUT", "/api/products/4001/ai-content"),
        ("POST", "/api/sync/content"),
    ]


@pytest.mark.asyncio
async def test_api_strategy_sends_full_content(content, product):
    seen = []
    publisher = _publisher({("PUT", "/api/products/4001/ai-content"): 200}, seen, method="api", api_key="secret")
    assert await publisher.publish(content, product) is True
    assert len(seen) == 1
    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert json.loads(seen[0].content) == content.to_wire()


@pytest.mark.asyncio
async def test_all_endpoints_absent_writes_static_files(content, product, tmp_path):
    seen = []
    publisher = _publisher({}, seen, tmp_path=tmp_path, method="webhook")
    assert await publisher.publish(content, product) is True

    assert len(seen) == 3
    names = sorted(p.name for p in tmp_path.iterdir())
    assert names == ["4001-ai-search.json", "4001-catalyst.json", "4001-species.json"]
    species = json.loads((tmp_path / "4001-species.json").read_text())
    assert species["type"] == "species"
    assert len(species["quickReference"]) == 10
    bundle = json.loads((tmp_path / "4001-catalyst.json").read_text())
    assert bundle["rawAIContent"] == content.to_wire()


@pytest.mark.asyncio
async def test_absent_endpoint_without_output_dir_fails(content, product):
    publisher = _publisher({}, [], tmp_path=None)
    with pytest.raises(DeploymentFailure):
        await publisher.publish(content, product)


@pytest.mark.asyncio
async def test_server_error_does_not_fall_back(content, product, tmp_path):
    seen = []
    publisher = _publisher({("POST", "/api/content/ai-generated"): 500}, seen, tmp_path=tmp_path, method="webhook")
    with pytest.raises(DeploymentFailure, match="HTTP 500"):
        await publisher.publish(content, product)
    assert len(seen) == 1
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_transport_error_is_deployment_failure(content, product):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    publisher = CatalystPublisher("https://catalyst.test", transport=httpx.MockTransport(handler))
    with pytest.raises(DeploymentFailure, match="unreachable"):
        await publisher.publish(content, product)


@pytest.mark.asyncio
async def test_publish_is_idempotent(content, product, tmp_path):
    publisher = _publisher({}, [], tmp_path=tmp_path)
    assert await publisher.publish(content, product) is True
    first = (tmp_path / "4001-ai-search.json").read_text()
    assert await publisher.publish(content, product) is True
    assert (tmp_path / "4001-ai-search.json").read_text() == first
    assert len(list(tmp_path.iterdir())) == 3


def test_unknown_deployment_method_rejected():
    with pytest.raises(ValueError):
        CatalystPublisher("https://catalyst.test", deployment_method="ftp")


@pytest.mark.asyncio
async def test_connection_test_and_deployment_status():
    up = _publisher({("GET", "/api/health"): 200, ("GET", "/api/content/status/7"): 200}, [])
    assert await up.test_connection() is True
    assert await up.get_deployment_status(7) == {"status": "deployed"}

    down = _publisher({("GET", "/api/health"): 503}, [])
    assert await down.test_connection() is False
    assert await down.get_deployment_status(7) is None


def test_transform_for_catalyst(content):
    payload = transform_for_catalyst(content)
    assert payload["seoKeywords"] == content.search_keywords
    assert payload["compatibility"]["compatibleSpecies"] == content.compatibility.compatible_with
    assert payload["frequentlyAsked"][0]["question"].startswith("What size tank")
    assert payload["enhancedDescription"].startswith("**Genus species**")
    assert "• Tank Size: 20+ gallons" in payload["enhancedDescription"]
