# File: tests/test_config.py
from pathlib import Path

import pytest

import style_scraper.config as config_module
from style_scraper.config import Config
from style_scraper.exceptions import ConfigurationError
from style_scraper.layers.pipeline import ScrapePipeline
from style_scraper.models.fetch import FetchTier


def managed_config(monkeypatch, resolved) -> Config:
    monkeypatch.setattr(config_module, "managed_chromium_path", lambda: resolved)
    cfg = Config()
    cfg.SCRAPINGBEE_API_KEY = "test-key"
    cfg.BROWSER_EXECUTABLE_PATH = None
    cfg.BROWSER_MANAGED = True
    return cfg


def test_managed_browser_not_installed_is_missing(tmp_path, monkeypatch):
    cfg = managed_config(monkeypatch, str(tmp_path / "chrome-linux" / "chrome"))

    assert not cfg.is_browser_configured()
    assert cfg.missing_settings_for(FetchTier.HEADLESS_BROWSER) == ["BROWSER_EXECUTABLE_PATH"]
    assert cfg.missing_settings_for(FetchTier.JS_RENDER) == []


def test_managed_browser_unresolvable_is_missing(monkeypatch):
    cfg = managed_config(monkeypatch, None)
    assert not cfg.is_browser_configured()


def test_managed_browser_installed(tmp_path, monkeypatch):
    chrome = tmp_path / "chrome"
    chrome.write_text("")
    cfg = managed_config(monkeypatch, str(chrome))

    assert cfg.is_browser_configured()
    assert cfg.missing_settings_for(FetchTier.HEADLESS_BROWSER) == []


def test_explicit_executable_must_exist(tmp_path):
    cfg = Config()
    cfg.BROWSER_EXECUTABLE_PATH = str(tmp_path / "nope")
    assert not cfg.is_browser_configured()

    Path(cfg.BROWSER_EXECUTABLE_PATH).write_text("")
    assert cfg.is_browser_configured()


def test_unmanaged_without_executable_is_missing():
    cfg = Config()
    cfg.BROWSER_EXECUTABLE_PATH = None
    cfg.BROWSER_MANAGED = False
    assert not cfg.is_browser_configured()


def test_plain_budget_needs_nothing():
    cfg = Config()
    cfg.SCRAPINGBEE_API_KEY = None
    cfg.BROWSER_EXECUTABLE_PATH = None
    cfg.BROWSER_MANAGED = False
    assert cfg.missing_settings_for(FetchTier.PLAIN) == []


@pytest.mark.parametrize("value,expected", [
    ("headless_browser", FetchTier.HEADLESS_BROWSER),
    ("JS_RENDER", FetchTier.JS_RENDER),
    ("1", FetchTier.STATIC_RENDER),
])
def test_tier_budget_from_settings(settings, value, expected):
    settings.MAX_FETCH_TIER = value
    assert ScrapePipeline(settings=settings).max_tier() == expected


@pytest.mark.parametrize("value", ["bogus", "9", ""])
def test_unknown_tier_budget_is_a_configuration_error(settings, value):
    settings.MAX_FETCH_TIER = value

    with pytest.raises(ConfigurationError) as exc_info:
        ScrapePipeline(settings=settings).max_tier()

    assert exc_info.value.missing == ["MAX_FETCH_TIER"]
    assert "MAX_FETCH_TIER" in str(exc_info.value)
