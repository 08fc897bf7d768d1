"""Shared headless browser with per-audit isolated contexts."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Playwright,
    async_playwright,
)

from .models import MOBILE, Viewport

logger = logging.getLogger("site_audit")

LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class BrowserPool:
    """Lazily launched Chromium reused across sequential audits.

    The browser itself is shared, but every fetch gets its own browser
    context so browsing state never leaks between sites.
    A pool belongs to the event loop it was first used on.
    """

    def __init__(self, headless: bool = True):
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def _ensure_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None or not self._browser.is_connected():
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                logger.info("Launching headless browser")
                self._browser = await self._playwright.chromium.launch(
                    headless=self.headless, args=LAUNCH_ARGS
                )
        return self._browser

    @asynccontextmanager
    async def context(
        self, viewport: Viewport, user_agent: str
    ) -> AsyncIterator[BrowserContext]:
        """Acquire an isolated browsing context sized to ``viewport``."""
        browser = await self._ensure_browser()
        context = await browser.new_context(
            viewport={"width": viewport.width, "height": viewport.height},
            user_agent=user_agent,
            is_mobile=viewport == MOBILE,
        )
        try:
            yield context
        finally:
            await context.close()

    async def close(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

    async def __aenter__(self) -> "BrowserPool":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
