"""Fetch target pages as immutable snapshots."""

import logging
import time
from typing import Optional

import httpx
from playwright.async_api import Error as PlaywrightError

from .browser import BrowserPool
from .config import AuditConfig
from .errors import FetchError
from .models import DomFacts, PageSnapshot, Viewport

logger = logging.getLogger("site_audit")


# Evaluated inside the rendered page.
DOM_FACTS_SCRIPT = """
() => {
    const textElements = document.querySelectorAll('p, span, div, a, li');
    let smallText = 0;
    textElements.forEach(el => {
        const fontSize = parseInt(window.getComputedStyle(el).fontSize);
        if (fontSize < 12) smallText++;
    });

    const clickables = document.querySelectorAll(
        'a, button, input[type="submit"], input[type="button"]'
    );
    let tooClose = 0;
    for (let i = 0; i < clickables.length - 1; i++) {
        const a = clickables[i].getBoundingClientRect();
        const b = clickables[i + 1].getBoundingClientRect();
        if (Math.abs(a.bottom - b.top) < 8) tooClose++;
    }

    return {
        viewportMeta: !!document.querySelector('meta[name="viewport"]'),
        textElements: textElements.length,
        smallTextElements: smallText,
        clickablesTooClose: tooClose,
        scrollWidth: document.body ? document.body.scrollWidth : 0,
        viewportWidth: window.innerWidth,
    };
}
"""


def normalize_url(url: str) -> str:
    """Ensure URL has a scheme."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url


class PageFetcher:
    """Retrieves pages over plain HTTP or through a headless browser."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: AuditConfig,
        browser_pool: Optional[BrowserPool] = None,
    ):
        self.client = client
        self.config = config
        self.browser_pool = browser_pool

    async def fetch(
        self, url: str, viewport: Viewport, render: bool = False
    ) -> PageSnapshot:
        """Fetch ``url`` for one viewport.

        Args:
            url: Absolute URL to fetch
            viewport: Viewport profile to load the page with
            render: Drive a headless browser and collect DOM facts

        Returns:
            PageSnapshot of the response

        Raises:
            FetchError: On timeout, network failure or a non-2xx status
        """
        if render and self.browser_pool is not None:
            try:
                return await self._fetch_rendered(self.browser_pool, url, viewport)
            except PlaywrightError as e:
                logger.warning(
                    "Rendering unavailable for %s (%s), falling back to basic fetch",
                    url, e,
                )
        return await self._fetch_basic(url, viewport)

    async def _fetch_basic(self, url: str, viewport: Viewport) -> PageSnapshot:
        start = time.perf_counter()
        try:
            response = await self.client.get(
                url,
                headers=self.config.headers,
                timeout=self.config.timeout,
                follow_redirects=True,
            )
            response.raise_for_status()
        except httpx.TimeoutException:
            raise FetchError(url, f"Timeout after {self.config.timeout}s")
        except httpx.HTTPStatusError as e:
            raise FetchError(
                url, f"HTTP {e.response.status_code}", e.response.status_code
            )
        except httpx.RequestError as e:
            raise FetchError(url, f"Request failed: {e}")
        except httpx.InvalidURL as e:
            raise FetchError(url, f"Invalid URL: {e}")
        except httpx.HTTPError as e:
            raise FetchError(url, f"Request failed: {e}")

        load_time = time.perf_counter() - start
        logger.debug("Fetched %s (%s) in %.2fs", url, viewport.name, load_time)
        return PageSnapshot(
            url=url,
            final_url=str(response.url),
            viewport=viewport,
            status_code=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            html=response.text,
            load_time=load_time,
        )

    async def _fetch_rendered(
        self, pool: BrowserPool, url: str, viewport: Viewport
    ) -> PageSnapshot:
        async with pool.context(viewport, self.config.user_agent) as context:
            page = await context.new_page()
            page.set_default_navigation_timeout(self.config.timeout * 1000)
            logger.info("Loading %s (%s viewport)", url, viewport.name)
            start = time.perf_counter()
            response = await page.goto(url, wait_until="networkidle")
            load_time = time.perf_counter() - start

            if response is not None and not response.ok:
                raise FetchError(url, f"HTTP {response.status}", response.status)

            if self.config.wait_after_load:
                await page.wait_for_timeout(int(self.config.wait_after_load * 1000))

            facts = await page.evaluate(DOM_FACTS_SCRIPT)
            html = await page.content()
            return PageSnapshot(
                url=url,
                final_url=page.url,
                viewport=viewport,
                status_code=response.status if response is not None else 200,
                headers=dict(response.headers) if response is not None else {},
                html=html,
                load_time=load_time,
                dom_facts=DomFacts(
                    viewport_meta=bool(facts["viewportMeta"]),
                    text_elements=int(facts["textElements"]),
                    small_text_elements=int(facts["smallTextElements"]),
                    clickables_too_close=int(facts["clickablesTooClose"]),
                    scroll_width=int(facts["scrollWidth"]),
                    viewport_width=int(facts["viewportWidth"]),
                ),
            )

    async def probe(self, url: str) -> float:
        """Time a HEAD request to ``url`` in seconds."""
        start = time.perf_counter()
        try:
            await self.client.head(
                url,
                headers=self.config.headers,
                timeout=self.config.probe_timeout,
                follow_redirects=True,
            )
        except httpx.TimeoutException:
            raise FetchError(url, f"HEAD timeout after {self.config.probe_timeout}s")
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise FetchError(url, f"HEAD request failed: {e}")
        return time.perf_counter() - start
