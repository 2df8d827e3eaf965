"""
Logo disambiguation: pick one site logo out of several logo-like images.
"""
import re
from typing import List, Optional

from bs4 import Tag

from style_scraper.utils.logger import LayerLogger
from style_scraper.utils.urls import hostname_of, resolve_url

_LOGO_HINT = re.compile(r"logo|brand", re.IGNORECASE)


def is_logo_like(img: Tag) -> bool:
    """An image whose src, alt or class mentions logo/brand."""
    classes = img.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    for value in (img.get("src") or "", img.get("alt") or "", " ".join(classes)):
        if _LOGO_HINT.search(value):
            return True
    return False


class LogoDisambiguator:
    """
    Strict priority chain over logo candidates in document order:

    1. first candidate served from the page's own host
    2. first candidate whose raw reference contains the brand hint
    3. first candidate

    A later rule only runs when the earlier one matched nothing.
    """

    def __init__(self):
        self.logger = LayerLogger("logo_disambiguator")

    def choose(self, candidates: List[str], page_url: str, brand: Optional[str] = None) -> str:
        """
        Return the chosen absolute logo URL, or "" when there is none.

        Args:
            candidates: raw src values of logo-like images, document order
            page_url: URL of the scraped page
            brand: optional brand name used as a tie-breaker
        """
        resolved = []
        for raw in candidates:
            url = resolve_url(page_url, raw)
            # Embedded images are not useful as a logo reference
            if url:
                resolved.append((raw, url))

        if not resolved:
            return ""

        page_host = hostname_of(page_url)
        for raw, url in resolved:
            if page_host and hostname_of(url) == page_host:
                self._log_choice("same_host", url, len(resolved))
                return url

        if brand and brand.strip():
            needle = brand.strip().lower()
            for raw, url in resolved:
                if needle in raw.lower():
                    self._log_choice("brand_match", url, len(resolved))
                    return url

        url = resolved[0][1]
        self._log_choice("document_order", url, len(resolved))
        return url

    def _log_choice(self, rule: str, url: str, candidates: int):
        self.logger.log_decision(
            decision="logo_selected",
            reason=rule,
            url=url,
            candidates=candidates,
        )
