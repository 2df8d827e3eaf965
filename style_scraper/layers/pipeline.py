"""
Scrape Pipeline for the Style Token Scraper.

Validates the request, checks configuration, runs fetch escalation
and hands the winning document to the extraction engine.
"""
import time
from typing import Optional, Tuple

from pydantic import ValidationError

from style_scraper.config import Config, config
from style_scraper.exceptions import ConfigurationError, InputError, TerminalFetchError
from style_scraper.layers.escalation import FetchEscalationController, build_strategies
from style_scraper.layers.extraction import StyleExtractionEngine
from style_scraper.models.fetch import FetchRequest, FetchTier
from style_scraper.models.tokens import StyleTokenSet, fallback_tokens
from style_scraper.utils.logger import LayerLogger


def build_request(
    url: Optional[str],
    brand: Optional[str] = None,
    max_tier=FetchTier.PLAIN,
) -> FetchRequest:
    """
    Validate raw inbound parameters into a FetchRequest.

    Raises:
        InputError: missing or non-http(s) URL, unknown tier
    """
    if not url or not url.strip():
        raise InputError("Missing URL parameter")
    try:
        return FetchRequest(url=url, brand=brand or None, max_tier=max_tier)
    except ValidationError as e:
        raise InputError(f"Invalid request: {e.errors()[0]['msg']}") from e


class ScrapePipeline:
    """
    One fetch-and-extract run per request.

    No state is shared between runs except the rate limiter inside
    the escalation controller.
    """

    def __init__(
        self,
        settings: Optional[Config] = None,
        controller: Optional[FetchEscalationController] = None,
        engine: Optional[StyleExtractionEngine] = None,
    ):
        self.settings = settings or config
        self.controller = controller
        self.engine = engine or StyleExtractionEngine(
            permissive_buttons=self.settings.PERMISSIVE_BUTTONS
        )
        self.logger = LayerLogger("scrape_pipeline")

    def _get_controller(self) -> FetchEscalationController:
        if self.controller is None:
            self.controller = FetchEscalationController(
                build_strategies(self.settings),
                timeout=self.settings.FETCH_TIMEOUT,
            )
        return self.controller

    def max_tier(self) -> FetchTier:
        """
        Capability budget from MAX_FETCH_TIER.

        Raises:
            ConfigurationError: the setting names no known tier
        """
        try:
            return FetchTier.parse(self.settings.MAX_FETCH_TIER)
        except ValueError as e:
            self.logger.log_error(str(e), error_type="configuration_error")
            raise ConfigurationError(
                ["MAX_FETCH_TIER"],
                f"Invalid MAX_FETCH_TIER: {self.settings.MAX_FETCH_TIER!r}",
            ) from e

    def check_configuration(self, request: FetchRequest):
        """Fail before any fetch when the budget needs missing settings."""
        missing = self.settings.missing_settings_for(request.max_tier)
        if missing:
            self.logger.log_error(
                f"Missing configuration: {', '.join(missing)}",
                error_type="configuration_error",
                url=request.url,
                max_tier=request.max_tier.label,
            )
            raise ConfigurationError(missing)

    async def scrape(self, request: FetchRequest) -> StyleTokenSet:
        """
        Fetch and extract tokens for one page.

        Raises:
            ConfigurationError: required settings missing, nothing fetched
            TerminalFetchError: every allowed tier failed
        """
        self.check_configuration(request)
        started = time.monotonic()
        self.logger.log_action("scrape", "started", url=request.url, brand=request.brand)

        try:
            attempt = await self._get_controller().fetch(request)
        except TerminalFetchError as e:
            self.logger.logger.warning(
                "scrape_completed",
                layer=self.logger.layer_name,
                url=request.url,
                success=False,
                status_code=e.status_code,
                duration_ms=int((time.monotonic() - started) * 1000),
            )
            raise

        tokens = self.engine.extract(
            attempt.document,
            attempt.final_url or request.url,
            computed_styles=attempt.computed_styles,
            brand=request.brand,
        )
        self.logger.logger.info(
            "scrape_completed",
            layer=self.logger.layer_name,
            url=request.url,
            success=True,
            tier=attempt.tier.label,
            assets_found=tokens.counts(),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return tokens

    async def scrape_or_fallback(self, request: FetchRequest) -> Tuple[StyleTokenSet, bool]:
        """
        Like scrape, but substitute the neutral fallback set on terminal failure.

        Returns:
            (tokens, used_fallback)
        """
        try:
            return await self.scrape(request), False
        except TerminalFetchError as e:
            self.logger.log_fallback(
                from_source="scraped_tokens",
                to_source="fallback_tokens",
                reason=str(e),
                url=request.url,
                body_excerpt=e.body_excerpt[:200],
            )
            return fallback_tokens(), True
