"""
Headless browser adapter (Playwright) - the most expensive tier.

Navigates with Chromium, stamps every element with a
``data-style-idx`` attribute and snapshots its computed style, so the
extraction engine can work on the serialized DOM outside the browser.
"""
from typing import Dict, Optional, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from style_scraper.adapters.http_fetcher import BROWSER_HEADERS
from style_scraper.adapters.style_sources import STYLE_INDEX_ATTR
from style_scraper.exceptions import FetchStrategyError
from style_scraper.models.fetch import FetchedDocument
from style_scraper.utils.logger import LayerLogger


# Properties the extraction engine reads
COMPUTED_PROPERTIES = [
    "color",
    "background-color",
    "background-image",
    "font-family",
    "font-size",
    "font-weight",
    "margin",
    "padding",
    "border-radius",
    "box-shadow",
    "max-width",
    "gap",
]

SNAPSHOT_SCRIPT = """
([attr, props]) => {
    const styles = {};
    const elements = document.querySelectorAll('body, body *');
    elements.forEach((el, i) => {
        const idx = String(i);
        el.setAttribute(attr, idx);
        const cs = window.getComputedStyle(el);
        const entry = {};
        for (const p of props) {
            const v = cs.getPropertyValue(p);
            if (v) entry[p] = v;
        }
        styles[idx] = entry;
    });
    return styles;
}
"""


class HeadlessBrowserFetcher:
    """
    Fetch a page with a real browser and capture computed styles.

    The browser process is owned by a single ``fetch`` call and is
    closed on every exit path.
    """

    def __init__(
        self,
        timeout: float = 15,
        executable_path: Optional[str] = None,
        blocked_resources: Sequence[str] = ("image", "stylesheet", "font", "media"),
    ):
        self.timeout = timeout
        self.executable_path = executable_path
        self.blocked_resources = {r.strip().lower() for r in blocked_resources if r and r.strip()}
        self.logger = LayerLogger("headless_browser")

    async def _route_handler(self, route):
        if route.request.resource_type in self.blocked_resources:
            await route.abort()
        else:
            await route.continue_()

    async def fetch(self, url: str) -> FetchedDocument:
        """
        Navigate to the URL and return the stamped DOM plus computed styles.

        Raises:
            FetchStrategyError: on navigation failure or timeout
        """
        timeout_ms = int(self.timeout * 1000)
        launch_args: Dict = {"headless": True}
        if self.executable_path:
            launch_args["executable_path"] = self.executable_path

        self.logger.log_action(
            "browser_navigation",
            "started",
            url=url,
            blocked_resources=sorted(self.blocked_resources),
        )
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(**launch_args)
                try:
                    context = await browser.new_context(
                        user_agent=BROWSER_HEADERS["User-Agent"],
                        viewport={"width": 1440, "height": 900},
                    )
                    page = await context.new_page()
                    await page.route("**/*", self._route_handler)
                    response = await page.goto(
                        url, wait_until="domcontentloaded", timeout=timeout_ms
                    )
                    status = response.status if response is not None else 200
                    computed = await page.evaluate(
                        SNAPSHOT_SCRIPT, [STYLE_INDEX_ATTR, COMPUTED_PROPERTIES]
                    )
                    html = await page.content()
                    final_url = page.url
                finally:
                    await browser.close()
        except PlaywrightTimeoutError as e:
            raise FetchStrategyError(f"timeout: {e}") from e
        except PlaywrightError as e:
            self.logger.log_error(
                f"Browser navigation failed: {str(e)}",
                error_type="browser_error",
                url=url
            )
            raise FetchStrategyError(f"browser error: {e}") from e

        self.logger.log_action(
            "browser_navigation",
            "completed",
            url=url,
            status_code=status,
            styled_elements=len(computed or {}),
        )
        return FetchedDocument(
            url=final_url,
            status_code=status,
            html=html,
            computed_styles=computed or {},
        )
