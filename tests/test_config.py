"""Tests for settings loading."""

from rcb.config import Settings


def test_defaults(monkeypatch):
    for var in ("RCB_GENERATOR", "CATALYST_DEPLOYMENT_METHOD", "RCB_TICK_INTERVAL", "BIGCOMMERCE_STORE_HASH"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None)
    assert s.rcb_generator == "template"
    assert s.catalyst_deployment_method == "file-sync"
    assert s.rcb_tick_interval == 3.0
    assert s.bigcommerce_configured is False


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("RCB_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("BIGCOMMERCE_STORE_HASH", "abc123")
    monkeypatch.setenv("BIGCOMMERCE_ACCESS_TOKEN", "token")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.test, https://b.test,")
    s = Settings(_env_file=None)
    assert s.data_dir == tmp_path.resolve()
    assert s.output_dir == tmp_path.resolve() / "json-files"
    assert s.bigcommerce_configured is True
    assert s.cors_origin_list == ["https://a.test", "https://b.test"]


def test_relative_data_dir_resolves_against_project_root():
    s = Settings(_env_file=None, rcb_data_dir="./data")
    assert s.data_dir.is_absolute()
    assert s.data_dir.name == "data"


def test_ensure_dirs(tmp_path):
    s = Settings(_env_file=None, rcb_data_dir=str(tmp_path / "d"))
    s.ensure_dirs()
    assert s.output_dir.is_dir()
