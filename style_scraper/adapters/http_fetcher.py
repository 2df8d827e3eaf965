"""
Plain HTTP fetch adapter - tier 0 of the escalation chain.
Fetches the page directly with browser-like headers.
"""
from typing import Optional

import httpx

from style_scraper.exceptions import FetchStrategyError
from style_scraper.models.fetch import FetchedDocument
from style_scraper.utils.logger import LayerLogger


BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


class PlainHTTPFetcher:
    """
    Direct page fetch.

    Cheapest tier: one GET against the target, redirects followed.
    Non-2xx responses are returned, not raised, so the controller
    can record the status before escalating.
    """

    def __init__(self, timeout: float = 15, client: Optional[httpx.AsyncClient] = None):
        self.timeout = timeout
        self.client = client
        self.logger = LayerLogger("http_fetcher")

    async def fetch(self, url: str) -> FetchedDocument:
        """
        Fetch raw markup for a URL.

        Raises:
            FetchStrategyError: on network failure or timeout
        """
        try:
            if self.client is not None:
                response = await self.client.get(url, headers=BROWSER_HEADERS)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url, headers=BROWSER_HEADERS)
        except httpx.TimeoutException as e:
            raise FetchStrategyError(f"timeout: {e}") from e
        except httpx.HTTPError as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type="http_error",
                url=url
            )
            raise FetchStrategyError(f"network error: {e}") from e

        return FetchedDocument(
            url=str(response.url),
            status_code=response.status_code,
            html=response.text,
        )
