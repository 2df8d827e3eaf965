# File: tests/conftest.py
import asyncio
from typing import Callable, List, Optional

import pytest

from style_scraper.config import Config
from style_scraper.layers.escalation import FetchEscalationController, FetchStrategy
from style_scraper.models.fetch import FetchedDocument, FetchTier
from style_scraper.utils.rate_limit import RateLimiter

PAGE_URL = "https://example.com/"


@pytest.fixture()
def settings(tmp_path) -> Config:
    """
    Config with every tier configured and no rate limiting.

    The browser binary is a placeholder file, so no test asks
    Playwright where its managed Chromium lives.
    """
    chromium = tmp_path / "chromium"
    chromium.write_text("")
    cfg = Config()
    cfg.SCRAPINGBEE_API_KEY = "test-key"
    cfg.BROWSER_EXECUTABLE_PATH = str(chromium)
    cfg.BROWSER_MANAGED = False
    cfg.MAX_FETCH_TIER = "headless_browser"
    cfg.FETCH_TIMEOUT = 2.0
    cfg.MIN_REQUEST_INTERVAL = 0.0
    cfg.PERMISSIVE_BUTTONS = False
    return cfg


@pytest.fixture()
def no_limit() -> RateLimiter:
    return RateLimiter(0.0)


class ScriptedFetch:
    """
    Fake strategy: returns a fixed FetchedDocument or raises, and
    records every call in a shared list.
    """

    def __init__(self, tier: FetchTier, calls: List[FetchTier], status: int = 200,
                 html: str = "<html><body><h1>Real page</h1></body></html>",
                 error: Optional[Exception] = None, delay: float = 0.0,
                 computed_styles: Optional[dict] = None):
        self.tier = tier
        self.calls = calls
        self.status = status
        self.html = html
        self.error = error
        self.delay = delay
        self.computed_styles = computed_styles

    async def __call__(self, url: str) -> FetchedDocument:
        self.calls.append(self.tier)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return FetchedDocument(
            url=url,
            status_code=self.status,
            html=self.html,
            computed_styles=self.computed_styles,
        )


@pytest.fixture()
def make_controller(no_limit) -> Callable[..., FetchEscalationController]:
    """
    Build a controller from (tier, ScriptedFetch kwargs) pairs.
    """
    def _make(calls: List[FetchTier], *specs, timeout: float = 2.0) -> FetchEscalationController:
        strategies = [
            FetchStrategy(tier, ScriptedFetch(tier, calls, **kwargs))
            for tier, kwargs in specs
        ]
        return FetchEscalationController(strategies, timeout=timeout, limiter=no_limit)

    return _make
