"""Tests for the per-product content artifacts."""

import json

import pytest

from rcb.generate import TemplateContentGenerator
from rcb.publish import DASHBOARD_LAYOUT, STOREFRONT_LAYOUT, ContentFileBuilder
from rcb.publish.files import quick_reference
from rcb.schemas.content import ContentConfig
from tests.conftest import make_product


@pytest.fixture
def product():
    return make_product(4001, name="Neon Tetra")


@pytest.fixture
def content(product):
    return TemplateContentGenerator().build(product, ContentConfig(template_type="tetra-schooling"))


def test_quick_reference_has_ten_lines(content):
    lines = quick_reference(content)
    assert len(lines) == 10
    assert lines[0] == "Tank Size: 20+ gallons"
    assert lines[-1] == "Family: Characidae"


def test_dashboard_layout(content, product):
    files = ContentFileBuilder(DASHBOARD_LAYOUT).build(content, product)
    assert list(files) == ["quickref", "details"]
    assert files["quickref"]["type"] == "quickref"
    assert files["quickref"]["commonName"] == "Neon Tetra"
    assert files["quickref"]["metadata"] == {"fishFamily": "community", "template": "tetra-schooling"}
    assert files["quickref"]["generatedAt"] == content.metadata.generated_at
    assert files["details"] == content.to_wire()


def test_storefront_layout_names(content, product):
    builder = ContentFileBuilder(STOREFRONT_LAYOUT)
    assert list(builder.build(content, product)) == ["species", "ai-search"]
    assert builder.filename(4001, "species") == "4001-species.json"


def test_summary_falls_back_to_product_name(content, product):
    info = content.basic_info.model_copy(update={"common_names": []})
    summary = ContentFileBuilder().build_summary(content.model_copy(update={"basic_info": info}), product)
    assert summary.common_name == "Neon Tetra"


def test_write_creates_both_files(content, product, tmp_path):
    out = tmp_path / "nested" / "json-files"
    paths = ContentFileBuilder().write(out, content, product)
    assert [p.name for p in paths] == ["4001-quickref.json", "4001-details.json"]
    details = json.loads(paths[1].read_text(encoding="utf-8"))
    assert details["careRequirements"]["temperatureRange"] == "72-78°F (22-26°C)"
