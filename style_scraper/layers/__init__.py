"""Layers package initialization."""
from style_scraper.layers.escalation import FetchEscalationController, FetchStrategy, build_strategies
from style_scraper.layers.extraction import StyleExtractionEngine
from style_scraper.layers.logo import LogoDisambiguator
from style_scraper.layers.pipeline import ScrapePipeline, build_request

__all__ = [
    "FetchEscalationController",
    "FetchStrategy",
    "build_strategies",
    "StyleExtractionEngine",
    "LogoDisambiguator",
    "ScrapePipeline",
    "build_request",
]
