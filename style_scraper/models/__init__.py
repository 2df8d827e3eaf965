"""Models package initialization."""
from style_scraper.models.fetch import FetchAttempt, FetchedDocument, FetchRequest, FetchTier
from style_scraper.models.tokens import StyleTokenSet, fallback_tokens

__all__ = [
    "FetchAttempt",
    "FetchedDocument",
    "FetchRequest",
    "FetchTier",
    "StyleTokenSet",
    "fallback_tokens",
]
