"""
Remote rendering proxy adapter (ScrapingBee) - tiers 1 to 3.

One adapter class, configured per tier:
- static render: no JavaScript, standard proxy pool
- premium proxy: no JavaScript, residential proxy pool
- JS render: headless rendering on the provider side
"""
from typing import Optional

import httpx

from style_scraper.exceptions import FetchStrategyError
from style_scraper.models.fetch import FetchedDocument
from style_scraper.utils.logger import LayerLogger


class RenderProxyFetcher:
    """
    Fetch a page through the ScrapingBee HTTP API.

    The provider forwards the target's status code, so a blocked
    target shows up as a non-2xx response here as well.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://app.scrapingbee.com/api/v1/",
        render_js: bool = False,
        premium_proxy: bool = False,
        timeout: float = 15,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.render_js = render_js
        self.premium_proxy = premium_proxy
        self.timeout = timeout
        self.client = client
        self.logger = LayerLogger("render_proxy")

    def build_params(self, url: str) -> dict:
        """Query parameters for the provider API."""
        params = {
            "api_key": self.api_key,
            "url": url,
            "render_js": "true" if self.render_js else "false",
        }
        if self.premium_proxy:
            params["premium_proxy"] = "true"
        if self.render_js:
            # Keep provider-side rendering inside our own timeout
            params["timeout"] = str(int(self.timeout * 1000))
        return params

    async def fetch(self, url: str) -> FetchedDocument:
        """
        Fetch raw markup via the rendering proxy.

        Raises:
            FetchStrategyError: on network failure or timeout
        """
        params = self.build_params(url)
        self.logger.log_action(
            "render_proxy_fetch",
            "started",
            url=url,
            render_js=self.render_js,
            premium_proxy=self.premium_proxy,
        )
        try:
            if self.client is not None:
                response = await self.client.get(self.api_url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.api_url, params=params)
        except httpx.TimeoutException as e:
            raise FetchStrategyError(f"timeout: {e}") from e
        except httpx.HTTPError as e:
            # Never log params: they carry the API key
            self.logger.log_error(
                f"Render proxy request failed: {type(e).__name__}",
                error_type="http_error",
                url=url
            )
            raise FetchStrategyError(f"network error: {type(e).__name__}") from e

        return FetchedDocument(
            url=response.headers.get("Spb-Resolved-Url", url),
            status_code=response.status_code,
            html=response.text,
        )
