"""
Fetch request and attempt models for the escalation controller.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from style_scraper.utils.urls import is_http_url


class FetchTier(IntEnum):
    """Fetch strategies ordered by ascending cost."""
    PLAIN = 0
    STATIC_RENDER = 1
    PREMIUM_PROXY = 2
    JS_RENDER = 3
    HEADLESS_BROWSER = 4

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: Union[str, int, "FetchTier"]) -> "FetchTier":
        """Accept a tier, its ordinal, or its lowercase name."""
        if isinstance(value, FetchTier):
            return value
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown fetch tier: {value}")


class FetchRequest(BaseModel):
    """One scrape request: target page, brand hint, capability budget."""
    model_config = ConfigDict(frozen=True)

    url: str
    brand: Optional[str] = None
    max_tier: FetchTier = FetchTier.PLAIN

    @field_validator("url")
    @classmethod
    def _check_url(cls, v: str) -> str:
        v = (v or "").strip()
        if not is_http_url(v):
            raise ValueError("url must be an absolute http(s) URL")
        return v

    @field_validator("max_tier", mode="before")
    @classmethod
    def _parse_tier(cls, v):
        return FetchTier.parse(v)


@dataclass
class FetchedDocument:
    """Raw result of one strategy call, before challenge checks."""
    url: str
    status_code: int
    html: str
    computed_styles: Optional[Dict[str, Dict[str, str]]] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass
class FetchAttempt:
    """Outcome of one escalation tier."""
    tier: FetchTier
    elapsed: float
    status_code: Optional[int] = None
    document: Optional[str] = None
    computed_styles: Optional[Dict[str, Dict[str, str]]] = None
    failure_reason: Optional[str] = None
    challenge_detected: bool = False
    final_url: str = ""

    @property
    def succeeded(self) -> bool:
        return self.document is not None and self.failure_reason is None
