"""CLI smoke tests against the demo catalog."""

import json

import pytest
from typer.testing import CliRunner

from rcb.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def demo_env(monkeypatch, tmp_path):
    monkeypatch.setenv("RCB_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("RCB_GENERATOR", "template")
    monkeypatch.setenv("CATALYST_URL", "http://127.0.0.1:9")
    monkeypatch.delenv("RCB_DATABASE_URL", raising=False)
    monkeypatch.delenv("BIGCOMMERCE_STORE_HASH", raising=False)
    monkeypatch.delenv("BIGCOMMERCE_ACCESS_TOKEN", raising=False)


def test_categories():
    result = runner.invoke(app, ["categories"])
    assert result.exit_code == 0, result.output
    assert "Lake Malawi Cichlids" in result.output
    assert "Rainbowfish" in result.output


def test_products_for_category():
    result = runner.invoke(app, ["products", "--category", "11"])
    assert result.exit_code == 0, result.output
    assert "18 products" in result.output


def test_generate_writes_files(tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["generate", "4001", "--template", "tetra-schooling", "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in out.iterdir()) == ["4001-details.json", "4001-quickref.json"]
    details = json.loads((out / "4001-details.json").read_text(encoding="utf-8"))
    assert details["metadata"]["template"] == "tetra-schooling"


def test_generate_storefront_names(tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["generate", "4001", "--storefront", "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in out.iterdir()) == ["4001-ai-search.json", "4001-species.json"]


def test_generate_unknown_product():
    result = runner.invoke(app, ["generate", "999999"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_generate_rejects_bad_config():
    result = runner.invoke(app, ["generate", "4001", "--template", "goldfish"])
    assert result.exit_code == 2


def test_run_job_records_deployment_failures():
    # Nothing listens on the storefront address, so every publish fails
    result = runner.invoke(app, ["run-job", "--category", "11", "--batch-size", "10"])
    assert result.exit_code == 0, result.output
    assert "completed" in result.output
    assert "18 failed" in result.output
