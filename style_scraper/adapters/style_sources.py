"""
Style sources: where the extraction engine reads an element's style from.

Two variants behind one interface:
- ComputedStyleSource: snapshot produced by a real browser, reflects
  the full cascade. Always preferred when available.
- DeclarationStyleSource: degraded fallback over static markup, built
  from ``<style>`` blocks and inline ``style`` attributes.
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional

import tinycss2
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from style_scraper.utils.css import color_from_background, extract_css_value
from style_scraper.utils.logger import LayerLogger

STYLE_INDEX_ATTR = "data-style-idx"

# Shorthand properties consulted when the longhand is not declared
_SHORTHANDS = {
    "background-color": "background",
    "background-image": "background",
    "gap": "grid-gap",
}


class StyleSource(ABC):
    """Read a single CSS property of an element."""

    name = "abstract"

    @abstractmethod
    def get(self, element: Tag, prop: str) -> str:
        """Return the property value, or "" when it cannot be read."""


def parse_rule_declarations(content) -> Dict[str, str]:
    """Lowercase property -> value for the body of one style rule."""
    result: Dict[str, str] = {}
    for decl in tinycss2.parse_declaration_list(
        content, skip_comments=True, skip_whitespace=True
    ):
        if decl.type != "declaration":
            continue
        value = tinycss2.serialize(decl.value).strip()
        if value:
            result[decl.lower_name] = value
    return result


class DeclarationStyleSource(StyleSource):
    """
    Style lookup for static markup.

    Rules from ``<style>`` blocks are applied in source order (later
    wins, no specificity), then the inline ``style`` attribute on top.
    At-rules such as ``@media`` are not evaluated and external
    stylesheets are invisible here.
    """

    name = "declaration"

    def __init__(self, soup: BeautifulSoup):
        self.logger = LayerLogger("style_source")
        self._sheet: Dict[int, Dict[str, str]] = {}
        self.soup = soup
        self._skipped_selectors = 0
        self._apply_style_blocks(soup)
        if self._skipped_selectors:
            self.logger.log_decision(
                decision="skip_selectors",
                reason="Selectors not supported by static matching",
                count=self._skipped_selectors,
            )

    def _apply_style_blocks(self, soup: BeautifulSoup):
        for style_tag in soup.find_all("style"):
            rules = tinycss2.parse_stylesheet(
                style_tag.get_text() or "", skip_comments=True, skip_whitespace=True
            )
            for rule in rules:
                if rule.type != "qualified-rule":
                    continue
                declarations = parse_rule_declarations(rule.content)
                if not declarations:
                    continue
                for selector in tinycss2.serialize(rule.prelude).split(","):
                    self._apply_rule(soup, selector.strip(), declarations)

    def _apply_rule(self, soup: BeautifulSoup, selector: str, declarations: Dict[str, str]):
        if not selector:
            return
        try:
            matched = soup.select(selector)
        except (SelectorSyntaxError, NotImplementedError, ValueError):
            self._skipped_selectors += 1
            return
        for element in matched:
            self._sheet.setdefault(id(element), {}).update(declarations)

    def _lookup(self, element: Tag, prop: str) -> str:
        inline = element.get("style")
        if inline:
            value = extract_css_value(inline, prop)
            if value:
                return value
        return self._sheet.get(id(element), {}).get(prop, "")

    def get(self, element: Tag, prop: str) -> str:
        value = self._lookup(element, prop)
        if value:
            return value
        shorthand = _SHORTHANDS.get(prop)
        if not shorthand:
            return ""
        value = self._lookup(element, shorthand)
        if prop == "background-color":
            return color_from_background(value)
        return value


class ComputedStyleSource(StyleSource):
    """
    Style lookup over a browser computed-style snapshot.

    ``styles`` maps the ``data-style-idx`` stamp of each element to its
    computed properties. Elements without a stamp (or missing from the
    snapshot) are read from the fallback source.
    """

    name = "computed"

    def __init__(self, styles: Dict[str, Dict[str, str]], fallback: Optional[StyleSource] = None):
        self.styles = styles
        self.fallback = fallback

    def get(self, element: Tag, prop: str) -> str:
        idx = element.get(STYLE_INDEX_ATTR)
        if idx is not None and idx in self.styles:
            return (self.styles[idx].get(prop) or "").strip()
        if self.fallback is not None:
            return self.fallback.get(element, prop)
        return ""


def build_style_source(
    soup: BeautifulSoup,
    computed_styles: Optional[Dict[str, Dict[str, str]]] = None,
) -> StyleSource:
    """Prefer computed styles; fall back to declaration scanning."""
    declared = DeclarationStyleSource(soup)
    if computed_styles:
        return ComputedStyleSource(computed_styles, fallback=declared)
    return declared
