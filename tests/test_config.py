"""Tests for reading per-site settings."""

import json

import pytest

from config import ConfigError, Settings, load_settings

SETTING_NAMES = [
    "DUPROPRIO_URL",
    "SUTTON_URL",
    "CENTRIS_URL",
    "CENTRIS_MIN_PRICE",
    "CENTRIS_MAX_PRICE",
    "CENTRIS_MAX_PAGES",
    "NAVIGATION_TIMEOUT_MS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in SETTING_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults_without_config_file(tmp_path):
    assert load_settings(tmp_path / "config.json") == Settings()


def test_load_settings_reads_nested_json_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "duproprio": {"url": "https://duproprio.test"},
        "centris": {"url": "https://centris.test", "minPrice": 200000, "maxPrice": "400000"},
    }), encoding="utf-8")

    settings = load_settings(path)

    assert settings.duproprio_url == "https://duproprio.test"
    assert settings.centris_url == "https://centris.test"
    assert settings.centris_min_price == 200000
    assert settings.centris_max_price == 400000
    assert settings.sutton_url == ""


def test_environment_overrides_json(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"centris": {"minPrice": 1}}), encoding="utf-8")
    monkeypatch.setenv("CENTRIS_MIN_PRICE", "250000")

    assert load_settings(path).centris_min_price == 250000


def test_invalid_number_raises_config_error(tmp_path, monkeypatch):
    monkeypatch.setenv("CENTRIS_MIN_PRICE", "200k")

    with pytest.raises(ConfigError, match="CENTRIS_MIN_PRICE"):
        load_settings(tmp_path / "config.json")


def test_broken_config_file_raises_config_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{centris:", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(path)
