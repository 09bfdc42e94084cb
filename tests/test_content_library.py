"""Tests for the generated content library behind /json-files."""

import pytest

from rcb.content import ContentLibrary, InMemoryContentStore
from rcb.errors import GenerationFailure, InvalidContentFile, NotFound
from rcb.generate import TemplateContentGenerator
from rcb.schemas.content import ContentConfig
from tests.conftest import FakeGenerator, FakeSource, make_product


@pytest.fixture
def lib():
    return ContentLibrary(InMemoryContentStore())


@pytest.fixture
def catalog():
    return FakeSource({4: [make_product(1, name="Neon Tetra"), make_product(2, name="Ember Tetra")]})


def _strip_times(record):
    content = dict(record.content)
    content.pop("generatedAt", None)
    if "metadata" in content:
        content["metadata"] = {
            k: v for k, v in content["metadata"].items() if k not in ("generatedAt", "lastUpdated")
        }
    return content


def test_record_saves_both_artifacts(lib):
    product = make_product(1, name="Neon Tetra")
    content = TemplateContentGenerator().build(product, ContentConfig())
    saved = lib.record(content, product)

    assert [r.type for r in saved] == ["quickref", "details"]
    records = lib.list()
    assert [r.filename for r in records] == ["1-details.json", "1-quickref.json"]
    assert all(r.product_name == "Neon Tetra" for r in records)
    assert records[0].size > 0
    assert records[0].last_modified == content.metadata.generated_at


@pytest.mark.asyncio
async def test_regenerate_is_idempotent_apart_from_timestamps(lib, catalog):
    gen = TemplateContentGenerator()
    first = await lib.regenerate(catalog, gen, 1)
    before = {r.type: _strip_times(r) for r in lib.list()}
    second = await lib.regenerate(catalog, gen, 1)
    after = {r.type: _strip_times(r) for r in lib.list()}

    assert first == second
    assert second.product_name == "Neon Tetra"
    assert [(r.type, r.success) for r in second.results] == [("quickref", True), ("details", True)]
    assert before == after
    assert len(lib.list()) == 2


@pytest.mark.asyncio
async def test_regenerate_single_type(lib, catalog):
    result = await lib.regenerate(catalog, TemplateContentGenerator(), 2, "quickref")
    assert [r.type for r in result.results] == ["quickref"]
    assert [r.type for r in lib.list()] == ["quickref"]


@pytest.mark.asyncio
async def test_regenerate_unknown_product(lib, catalog):
    with pytest.raises(NotFound):
        await lib.regenerate(catalog, TemplateContentGenerator(), 999)


@pytest.mark.asyncio
async def test_regenerate_propagates_generation_failure(lib, catalog):
    gen = FakeGenerator()
    gen.failures[1] = GenerationFailure("model down")
    with pytest.raises(GenerationFailure):
        await lib.regenerate(catalog, gen, 1)
    assert lib.list() == []


def test_put_validates_required_fields(lib):
    with pytest.raises(InvalidContentFile, match="quickReference"):
        lib.put(1, "quickref", {"productId": 1, "type": "quickref"})
    with pytest.raises(InvalidContentFile, match="careRequirements"):
        lib.put(1, "details", {"productId": 1, "basicInfo": {"scientificName": "x"}})
    with pytest.raises(InvalidContentFile):
        lib.put(1, "species", {"productId": 1})


def test_put_refreshes_timestamp_and_keeps_name(lib):
    product = make_product(1, name="Neon Tetra")
    lib.record(TemplateContentGenerator().build(product, ContentConfig()), product)
    old = next(r for r in lib.list() if r.type == "quickref")

    edited = dict(old.content, quickReference=["Tank Size: 10 gallons"], generatedAt="2020-01-01T00:00:00")
    record = lib.put(1, "quickref", edited)

    assert record.product_name == "Neon Tetra"
    assert record.content["quickReference"] == ["Tank Size: 10 gallons"]
    assert record.content["generatedAt"] != "2020-01-01T00:00:00"
    assert record.validation is None


def test_put_details_for_new_product(lib):
    record = lib.put(5, "details", {"productId": 5, "basicInfo": {"a": 1}, "careRequirements": {"b": 2}})
    assert record.product_name == "Product 5"
    assert "generatedAt" in record.content["metadata"]
    assert lib.list()[0].filename == "5-details.json"


def test_delete(lib):
    lib.put(5, "quickref", {"productId": 5, "type": "quickref", "quickReference": ["x"]})
    lib.delete(5, "quickref")
    assert lib.list() == []
    with pytest.raises(NotFound):
        lib.delete(5, "quickref")
