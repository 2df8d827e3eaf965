"""Adapters package initialization."""
from style_scraper.adapters.http_fetcher import PlainHTTPFetcher
from style_scraper.adapters.render_proxy import RenderProxyFetcher
from style_scraper.adapters.browser import HeadlessBrowserFetcher
from style_scraper.adapters.style_sources import (
    ComputedStyleSource,
    DeclarationStyleSource,
    StyleSource,
    build_style_source,
)

__all__ = [
    "PlainHTTPFetcher",
    "RenderProxyFetcher",
    "HeadlessBrowserFetcher",
    "ComputedStyleSource",
    "DeclarationStyleSource",
    "StyleSource",
    "build_style_source",
]
