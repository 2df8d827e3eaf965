"""
Fetch Escalation Layer for the Style Token Scraper.

Tries fetch strategies from cheapest to most expensive and stops at
the first one that returns a usable document.
"""
import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import httpx

from style_scraper.adapters.browser import HeadlessBrowserFetcher
from style_scraper.adapters.http_fetcher import PlainHTTPFetcher
from style_scraper.adapters.render_proxy import RenderProxyFetcher
from style_scraper.config import Config
from style_scraper.exceptions import FetchStrategyError, TerminalFetchError
from style_scraper.layers.challenge import detect_challenge
from style_scraper.models.fetch import FetchAttempt, FetchedDocument, FetchRequest, FetchTier
from style_scraper.utils.logger import LayerLogger
from style_scraper.utils.rate_limit import RateLimiter, get_default_limiter

BODY_EXCERPT_CHARS = 500

FetchCallable = Callable[[str], Awaitable[FetchedDocument]]


@dataclass(frozen=True)
class FetchStrategy:
    """One escalation tier: its cost ordinal and how to fetch."""
    tier: FetchTier
    fetch: FetchCallable


def build_strategies(cfg: Config, client: Optional[httpx.AsyncClient] = None) -> List[FetchStrategy]:
    """
    Default escalation order.

    Proxy tiers are only built when the credential exists; the
    pipeline checks configuration against the request budget first.
    """
    timeout = cfg.FETCH_TIMEOUT
    strategies = [
        FetchStrategy(FetchTier.PLAIN, PlainHTTPFetcher(timeout=timeout, client=client).fetch),
    ]

    if cfg.SCRAPINGBEE_API_KEY:
        proxy_tiers = [
            (FetchTier.STATIC_RENDER, False, False),
            (FetchTier.PREMIUM_PROXY, False, True),
            (FetchTier.JS_RENDER, True, False),
        ]
        for tier, render_js, premium in proxy_tiers:
            fetcher = RenderProxyFetcher(
                api_key=cfg.SCRAPINGBEE_API_KEY,
                api_url=cfg.SCRAPINGBEE_API_URL,
                render_js=render_js,
                premium_proxy=premium,
                timeout=timeout,
                client=client,
            )
            strategies.append(FetchStrategy(tier, fetcher.fetch))

    browser = HeadlessBrowserFetcher(
        timeout=timeout,
        executable_path=cfg.BROWSER_EXECUTABLE_PATH,
        blocked_resources=cfg.BROWSER_BLOCKED_RESOURCES,
    )
    strategies.append(FetchStrategy(FetchTier.HEADLESS_BROWSER, browser.fetch))
    return strategies


class FetchEscalationController:
    """
    Sequential fetch escalation.

    Each tier runs only after the previous one has fully failed;
    tiers are never raced, since the expensive ones are billed per
    request. A tier fails on network error, timeout, non-2xx status,
    or a bot-challenge signature in the body.
    """

    def __init__(
        self,
        strategies: List[FetchStrategy],
        timeout: float = 15,
        limiter: Optional[RateLimiter] = None,
    ):
        self.strategies = strategies
        self.timeout = timeout
        self.limiter = limiter or get_default_limiter()
        self.logger = LayerLogger("fetch_escalation")

    def strategies_for(self, max_tier: FetchTier) -> List[FetchStrategy]:
        """Strategies allowed by a capability budget, in escalation order."""
        return [s for s in self.strategies if s.tier <= max_tier]

    async def fetch(self, request: FetchRequest) -> FetchAttempt:
        """
        Fetch the request URL, escalating on failure.

        Returns:
            The first successful FetchAttempt

        Raises:
            TerminalFetchError: when every allowed tier failed
        """
        url = request.url
        allowed = self.strategies_for(request.max_tier)
        self.logger.log_action(
            "escalation",
            "started",
            url=url,
            max_tier=request.max_tier.label,
            tiers=[s.tier.label for s in allowed],
        )

        attempts: List[FetchAttempt] = []
        for index, strategy in enumerate(allowed):
            attempt = await self._attempt(strategy, url)
            attempts.append(attempt)

            if attempt.succeeded:
                self.logger.log_decision(
                    decision=f"use_{strategy.tier.label}",
                    reason="First tier with a usable document",
                    url=url,
                    attempts=len(attempts),
                )
                return attempt

            if index + 1 < len(allowed):
                self.logger.log_fallback(
                    from_source=strategy.tier.label,
                    to_source=allowed[index + 1].tier.label,
                    reason=attempt.failure_reason,
                    url=url,
                )

        last = attempts[-1] if attempts else None
        excerpt = ""
        status_code = None
        if last is not None:
            status_code = last.status_code
            excerpt = (last.document or last.failure_reason or "")[:BODY_EXCERPT_CHARS]

        self.logger.log_error(
            "All fetch tiers exhausted",
            error_type="terminal_fetch_failure",
            url=url,
            status_code=status_code,
            attempts=len(attempts),
        )
        raise TerminalFetchError(url, status_code, excerpt, attempts)

    async def _attempt(self, strategy: FetchStrategy, url: str) -> FetchAttempt:
        """Run one tier and classify the outcome."""
        await self.limiter.wait()
        started = time.monotonic()
        try:
            result = await asyncio.wait_for(strategy.fetch(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            attempt = FetchAttempt(
                tier=strategy.tier,
                elapsed=time.monotonic() - started,
                failure_reason=f"timeout after {self.timeout}s",
            )
        except FetchStrategyError as e:
            attempt = FetchAttempt(
                tier=strategy.tier,
                elapsed=time.monotonic() - started,
                status_code=e.status_code,
                failure_reason=e.reason,
            )
        else:
            attempt = self._classify(strategy.tier, result, time.monotonic() - started)

        self.logger.log_tier_attempt(
            url=url,
            tier=strategy.tier.label,
            status_code=attempt.status_code,
            elapsed=attempt.elapsed,
            challenge_detected=attempt.challenge_detected,
            outcome="success" if attempt.succeeded else "failed",
            reason=attempt.failure_reason,
        )
        return attempt

    def _classify(self, tier: FetchTier, result: FetchedDocument, elapsed: float) -> FetchAttempt:
        attempt = FetchAttempt(
            tier=tier,
            elapsed=elapsed,
            status_code=result.status_code,
            document=result.html,
            computed_styles=result.computed_styles,
            final_url=result.url,
        )
        if not result.ok:
            attempt.failure_reason = f"status {result.status_code}"
            return attempt

        if not (result.html or "").strip():
            attempt.failure_reason = "empty body"
            return attempt

        signature = detect_challenge(result.html)
        if signature:
            attempt.challenge_detected = True
            attempt.failure_reason = f"bot challenge: {signature}"
        return attempt
