"""
Configuration management for the Style Token Scraper.
Handles environment variables and application settings.
"""
import os
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

load_dotenv()


def _resolve_managed_chromium() -> str:
    with sync_playwright() as p:
        return p.chromium.executable_path


@lru_cache(maxsize=1)
def managed_chromium_path() -> Optional[str]:
    """
    Executable of the Chromium build Playwright manages, or None.

    The path is resolved by Playwright even when the build was never
    downloaded, so callers still check that it exists.
    """
    # The sync API refuses to start on a thread running an event loop
    with ThreadPoolExecutor(max_workers=1) as pool:
        try:
            return pool.submit(_resolve_managed_chromium).result()
        except (PlaywrightError, OSError):
            return None


class Config:
    """Application configuration loaded from environment variables."""

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Remote rendering / proxy service (tiers 1-3)
    # Loaded from environment variables, NEVER hardcoded
    SCRAPINGBEE_API_KEY: Optional[str] = (
        os.getenv("SCRAPINGBEE_API_KEY") or os.getenv("VITE_SCRAPINGBEE_API_KEY")
    )
    SCRAPINGBEE_API_URL: str = os.getenv(
        "SCRAPINGBEE_API_URL", "https://app.scrapingbee.com/api/v1/"
    )

    # Headless browser tier
    BROWSER_EXECUTABLE_PATH: Optional[str] = os.getenv("BROWSER_EXECUTABLE_PATH")
    BROWSER_MANAGED: bool = os.getenv("BROWSER_MANAGED", "true").lower() == "true"
    BROWSER_BLOCKED_RESOURCES: List[str] = [
        r.strip()
        for r in os.getenv("BROWSER_BLOCKED_RESOURCES", "image,stylesheet,font,media").split(",")
        if r.strip()
    ]

    # Fetch policy
    FETCH_TIMEOUT: float = float(os.getenv("FETCH_TIMEOUT", "15"))
    MIN_REQUEST_INTERVAL: float = float(os.getenv("MIN_REQUEST_INTERVAL", "1.0"))
    MAX_FETCH_TIER: str = os.getenv("MAX_FETCH_TIER", "headless_browser")

    # Extraction
    PERMISSIVE_BUTTONS: bool = os.getenv("PERMISSIVE_BUTTONS", "false").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console

    def is_render_proxy_configured(self) -> bool:
        """Check if the rendering proxy credential is present."""
        return bool(self.SCRAPINGBEE_API_KEY)

    def is_browser_configured(self) -> bool:
        """
        Check if a browser binary is available for the headless tier.

        Either an explicit executable that exists on disk, or, when
        BROWSER_MANAGED is on, Playwright's managed Chromium installed
        via `playwright install chromium`.
        """
        if self.BROWSER_EXECUTABLE_PATH:
            return Path(self.BROWSER_EXECUTABLE_PATH).is_file()
        if not self.BROWSER_MANAGED:
            return False
        path = managed_chromium_path()
        return bool(path) and Path(path).is_file()

    def missing_settings_for(self, max_tier: int) -> list:
        """
        Return the settings missing for a capability budget.

        Tiers 1-3 need the proxy credential, tier 4 needs a browser.
        """
        missing = []
        if max_tier >= 1 and not self.is_render_proxy_configured():
            missing.append("SCRAPINGBEE_API_KEY")
        if max_tier >= 4 and not self.is_browser_configured():
            missing.append("BROWSER_EXECUTABLE_PATH")
        return missing


config = Config()
