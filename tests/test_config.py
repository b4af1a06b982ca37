import pytest

from gdziestoja.config import DEFAULT_BASE_URL, load_settings


def test_load_settings_defaults(monkeypatch):
    for k in [
        "GDZIESTOJA_BASE_URL",
        "GDZIESTOJA_DELAY_VENUE",
        "GDZIESTOJA_DELAY_DISCOVERY_PAUSE",
        "GDZIESTOJA_HTTP_TIMEOUT",
    ]:
        monkeypatch.setenv(k, "")
    s = load_settings()
    assert s.base_url == DEFAULT_BASE_URL
    assert s.delays.home == 0
    assert s.delays.region == 1.0
    assert s.delays.city == 1.0
    assert s.delays.venue == 2.0
    assert s.delays.comment_page == 3.0
    assert s.delays.discovery_pause == 4.0
    assert "Mozilla/5.0" in s.user_agent


def test_load_settings_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("GDZIESTOJA_BASE_URL", "http://localhost:8000/")
    monkeypatch.setenv("GDZIESTOJA_DB_PATH", str(tmp_path / "x.sqlite"))
    monkeypatch.setenv("GDZIESTOJA_DELAY_COMMENT_PAGE", "0.5")
    monkeypatch.setenv("GDZIESTOJA_LOG_LEVEL", "debug")
    s = load_settings()
    assert s.base_url == "http://localhost:8000"
    assert s.db_path == str(tmp_path / "x.sqlite")
    assert s.delays.comment_page == 0.5
    assert s.log_level == "DEBUG"


def test_load_settings_rejects_non_numeric_delay(monkeypatch):
    monkeypatch.setenv("GDZIESTOJA_DELAY_REGION", "soon")
    with pytest.raises(RuntimeError) as ei:
        load_settings()
    assert "GDZIESTOJA_DELAY_REGION" in str(ei.value)
