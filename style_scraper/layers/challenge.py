"""
Bot-challenge detection for fetched markup.

Substring matching on known interstitial phrases. Best effort: a
clean result does not prove the page is real content.
"""
import re
from typing import Optional

# Phrases that identify an interstitial even inside a large document head
STRONG_SIGNATURES = [
    "checking your browser",
    "just a moment...",
    "attention required! | cloudflare",
    "please wait while we verify",
    "verify you are human",
    "are you a robot",
    "cdn-cgi/challenge-platform",
    "challenges.cloudflare.com",
    "px-captcha",
    "pardon our interruption",
    "your connection needs to be verified",
]

# Generic phrases, only trusted on pages with very little visible text
WEAK_SIGNATURES = [
    "captcha",
    "access denied",
    "unusual traffic",
    "enable javascript",
    "javascript is required",
    "please enable cookies",
    "ray id",
    "request unsuccessful",
    "bot detection",
]

SHORT_PAGE_CHARS = 800
HEAD_SCAN_CHARS = 5000

_SCRIPT_STYLE = re.compile(r"<(script|style)[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAGS = re.compile(r"<[^>]+>")
_SPACES = re.compile(r"\s+")


def visible_text(html: str) -> str:
    """Lowercased text content with scripts, styles and tags removed."""
    text = _SCRIPT_STYLE.sub(" ", html)
    text = _TAGS.sub(" ", text)
    return _SPACES.sub(" ", text).strip().lower()


def detect_challenge(html: Optional[str]) -> Optional[str]:
    """
    Return the matched challenge signature, or None for a normal page.
    """
    if not html:
        return None

    head = html[:HEAD_SCAN_CHARS].lower()
    for signature in STRONG_SIGNATURES:
        if signature in head:
            return signature

    text = visible_text(html)
    if len(text) < SHORT_PAGE_CHARS:
        for signature in WEAK_SIGNATURES:
            if signature in text:
                return signature
    return None
