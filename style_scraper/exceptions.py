"""
Error taxonomy for the Style Token Scraper.

Input and configuration errors are raised before any fetch happens.
FetchStrategyError is local to a single escalation tier; only
TerminalFetchError leaves the escalation controller.
"""
from typing import List, Optional


class StyleScraperError(Exception):
    """Base class for every error raised by this package."""


class InputError(StyleScraperError):
    """Missing or invalid target URL, or an unsupported request."""


class ConfigurationError(StyleScraperError):
    """A required setting is missing or invalid (credential, browser, tier budget)."""

    def __init__(self, missing: List[str], message: Optional[str] = None):
        self.missing = missing
        super().__init__(message or f"Missing configuration: {', '.join(missing)}")


class FetchStrategyError(StyleScraperError):
    """
    One fetch tier failed: network error, timeout, or transport failure.

    Raised by adapters so the controller never has to know about
    httpx or Playwright exception types.
    """

    def __init__(self, reason: str, status_code: Optional[int] = None):
        self.reason = reason
        self.status_code = status_code
        super().__init__(reason)


class TerminalFetchError(StyleScraperError):
    """Every allowed tier was tried and none produced a usable document."""

    def __init__(
        self,
        url: str,
        status_code: Optional[int],
        body_excerpt: str,
        attempts: Optional[list] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.body_excerpt = body_excerpt
        self.attempts = attempts or []
        super().__init__(
            f"All fetch tiers failed for {url} "
            f"(last status: {status_code if status_code is not None else 'none'})"
        )
