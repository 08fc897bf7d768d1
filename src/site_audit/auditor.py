"""Main auditor that fetches a site and runs all extractors."""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

import httpx

from .browser import BrowserPool
from .checks import AuditContext, Extractor, default_extractors
from .config import AuditConfig
from .errors import AuditFailed, FetchError
from .fetcher import PageFetcher, normalize_url
from .issues import classify
from .models import (
    DESKTOP,
    MOBILE,
    AuditResult,
    AuditTarget,
    ExtractorResult,
    PageSnapshot,
    RenderMode,
)
from .providers import (
    MobileFriendlinessProvider,
    PageSpeedProvider,
    get_mobile_friendliness_provider,
    get_page_speed_provider,
)
from .revenue import project
from .scoring import aggregate

logger = logging.getLogger("site_audit")

EXTRACTOR_NAMES = ("performance", "mobile", "seo", "local", "conversion", "technical")


class Auditor:
    """Runs complete audits.

    Collaborators not passed in are built from ``config`` for each run. A
    browser pool created here is reused across runs and released by
    ``close()``.
    """

    def __init__(
        self,
        config: Optional[AuditConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        browser_pool: Optional[BrowserPool] = None,
        fetcher: Optional[PageFetcher] = None,
        page_speed: Optional[PageSpeedProvider] = None,
        mobile_test: Optional[MobileFriendlinessProvider] = None,
        extractors: Optional[list[Extractor]] = None,
    ):
        self.config = config or AuditConfig()
        self.client = client
        self.fetcher = fetcher
        self.page_speed = page_speed
        self.mobile_test = mobile_test
        self.extractors = extractors or default_extractors()
        self._owns_pool = browser_pool is None and self.config.render
        self.browser_pool = browser_pool or (BrowserPool() if self.config.render else None)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.client is not None:
            yield self.client
            return
        async with httpx.AsyncClient(
            headers=self.config.headers, timeout=self.config.timeout
        ) as client:
            yield client

    async def _fetch_snapshots(
        self, fetcher: PageFetcher, url: str
    ) -> tuple[Optional[PageSnapshot], Optional[PageSnapshot]]:
        """Fetch desktop and mobile views concurrently.

        Raises:
            AuditFailed: If neither viewport could be fetched
        """
        outcomes = await asyncio.gather(
            fetcher.fetch(url, DESKTOP, render=self.config.render),
            fetcher.fetch(url, MOBILE, render=self.config.render),
            return_exceptions=True,
        )

        snapshots: list[Optional[PageSnapshot]] = []
        errors: list[FetchError] = []
        for viewport, outcome in zip((DESKTOP, MOBILE), outcomes):
            if isinstance(outcome, Exception) and not isinstance(outcome, FetchError):
                logger.error("Unexpected error fetching %s view of %s: %r", viewport.name, url, outcome)
                outcome = FetchError(url, str(outcome) or type(outcome).__name__)
            if isinstance(outcome, FetchError):
                logger.warning("Could not fetch %s view of %s: %s", viewport.name, url, outcome.reason)
                errors.append(outcome)
                snapshots.append(None)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                snapshots.append(outcome)

        desktop, mobile = snapshots
        if desktop is None and mobile is None:
            raise AuditFailed(url, errors[0].reason if errors else "no snapshot")
        return desktop, mobile

    async def _run_safely(self, extractor: Extractor, context: AuditContext) -> ExtractorResult:
        """Run one extractor, turning any failure into a degraded result."""
        try:
            return await extractor.extract(context)
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("%s analysis failed", extractor.name)
            return ExtractorResult(
                name=extractor.name, score=0, degraded=True, error=str(e) or type(e).__name__
            )

    async def run(self, url: str, business_category: str) -> AuditResult:
        """Run a complete audit on a URL.

        Args:
            url: The URL to audit, scheme optional
            business_category: Category used for keywords and revenue bases

        Returns:
            AuditResult with every extractor's result

        Raises:
            AuditFailed: If the page could not be fetched at all
        """
        target = AuditTarget(url=normalize_url(url), business_category=business_category)
        logger.info("Starting audit for %s", target.url)

        async with self._client() as client:
            fetcher = self.fetcher or PageFetcher(client, self.config, self.browser_pool)
            desktop, mobile = await self._fetch_snapshots(fetcher, target.url)

            context = AuditContext(
                target=target,
                config=self.config,
                client=client,
                fetcher=fetcher,
                page_speed=self.page_speed or get_page_speed_provider(self.config, client),
                mobile_test=self.mobile_test
                or get_mobile_friendliness_provider(self.config, client),
                desktop=desktop,
                mobile=mobile,
            )
            outcomes = await asyncio.gather(
                *(self._run_safely(extractor, context) for extractor in self.extractors)
            )

        results = {extractor.name: result for extractor, result in zip(self.extractors, outcomes)}
        for name in EXTRACTOR_NAMES:
            if name not in results:
                results[name] = ExtractorResult(
                    name=name, score=0, degraded=True, error="extractor not run"
                )
        rendered = any(s is not None and s.rendered for s in (desktop, mobile))

        result = AuditResult(
            target=target,
            timestamp=datetime.now(timezone.utc).isoformat(),
            performance=results["performance"],
            mobile=results["mobile"],
            seo=results["seo"],
            local=results["local"],
            conversion=results["conversion"],
            technical=results["technical"],
            issues=classify(results),
            health_score=aggregate(results),
            revenue_projection=project(results, business_category),
            render_mode=RenderMode.FULL if rendered else RenderMode.BASIC,
        )
        logger.info("Audit completed for %s (health score %d)", target.url, result.health_score)
        return result

    async def close(self) -> None:
        if self._owns_pool and self.browser_pool is not None:
            await self.browser_pool.close()

    async def __aenter__(self) -> "Auditor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def audit_url(
    url: str,
    business_category: str = "retail",
    config: Optional[AuditConfig] = None,
    timeout: Optional[float] = None,
    render: Optional[bool] = None,
) -> AuditResult:
    """Run a complete audit on a URL from synchronous code.

    Args:
        url: The URL to audit
        business_category: e.g. restaurant, home-services, healthcare
        config: Full configuration; built from the environment if omitted
        timeout: Page load timeout in seconds
        render: Use a headless browser for layout checks

    Returns:
        AuditResult with all extractor results

    Raises:
        AuditFailed: If the page could not be fetched at all
    """
    config = config or AuditConfig.from_env(timeout=timeout, render=render)

    async def _run() -> AuditResult:
        async with Auditor(config) as auditor:
            return await auditor.run(url, business_category)

    return asyncio.run(_run())
