"""Optional third-party providers for page-speed and mobile-friendliness data."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx

from .config import AuditConfig
from .errors import ProviderUnavailable

logger = logging.getLogger("site_audit")

PAGESPEED_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
MOBILE_FRIENDLY_URL = (
    "https://searchconsole.googleapis.com/v1/urlTestingTools/mobileFriendlyTest:run"
)

# Lighthouse values assumed when an individual audit is missing.
PAGESPEED_DEFAULTS = {
    "mobile": {"fcp": 3000.0, "lcp": 4000.0, "cls": 0.1, "fid": 100.0},
    "desktop": {"fcp": 2000.0, "lcp": 2500.0, "cls": 0.1, "fid": 100.0},
}


@dataclass(frozen=True)
class PageSpeedMetrics:
    """Core Web Vitals reported by a page-speed provider."""
    strategy: str
    fcp_ms: float
    lcp_ms: float
    cls: float
    fid_ms: float
    performance_score: Optional[float] = None  # 0-1

    @property
    def load_time(self) -> float:
        """Load-time proxy in seconds."""
        return max(self.fcp_ms, self.lcp_ms) / 1000

    def core_web_vitals(self) -> dict[str, float]:
        return {
            "fcp": round(self.fcp_ms),
            "lcp": round(self.lcp_ms),
            "cls": round(self.cls, 2),
            "fid": round(self.fid_ms),
        }


class MobileVerdict(Enum):
    """Mobile-friendliness verdict from an external test."""
    MOBILE_FRIENDLY = "MOBILE_FRIENDLY"
    NOT_MOBILE_FRIENDLY = "NOT_MOBILE_FRIENDLY"


class PageSpeedProvider(ABC):
    """Base class for page-speed providers."""

    name: str

    @abstractmethod
    async def get_page_speed(self, url: str, strategy: str) -> PageSpeedMetrics:
        """Return metrics for ``strategy`` (mobile or desktop).

        Raises:
            ProviderUnavailable: When no metrics can be produced
        """


class MobileFriendlinessProvider(ABC):
    """Base class for mobile-friendliness providers."""

    name: str

    @abstractmethod
    async def check(self, url: str) -> MobileVerdict:
        """Return the verdict for ``url``.

        Raises:
            ProviderUnavailable: When no verdict can be produced
        """


class BasicPageSpeedProvider(PageSpeedProvider):
    """Used when no page-speed API is configured; local timing applies."""

    name = "basic"

    async def get_page_speed(self, url: str, strategy: str) -> PageSpeedMetrics:
        raise ProviderUnavailable(self.name, "no page-speed API configured")


class BasicMobileFriendlinessProvider(MobileFriendlinessProvider):
    """Used when no mobile-friendliness API is configured."""

    name = "basic"

    async def check(self, url: str) -> MobileVerdict:
        raise ProviderUnavailable(self.name, "no mobile-friendliness API configured")


class GooglePageSpeedProvider(PageSpeedProvider):
    """Google PageSpeed Insights (Lighthouse) provider."""

    name = "Google PageSpeed"

    def __init__(self, api_key: str, client: httpx.AsyncClient, timeout: float = 30.0):
        self.api_key = api_key
        self.client = client
        self.timeout = timeout

    async def get_page_speed(self, url: str, strategy: str) -> PageSpeedMetrics:
        try:
            resp = await self.client.get(
                PAGESPEED_URL,
                params={
                    "url": url,
                    "key": self.api_key,
                    "strategy": strategy,
                    "category": "performance",
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("PageSpeed API unavailable for %s: %s", url, e)
            raise ProviderUnavailable(self.name, str(e))

        return parse_lighthouse(data, strategy, self.name)


def parse_lighthouse(data: dict[str, Any], strategy: str, provider: str = "pagespeed") -> PageSpeedMetrics:
    """Pull Core Web Vitals out of a PageSpeed Insights response."""
    lighthouse = data.get("lighthouseResult") or {}
    audits = lighthouse.get("audits")
    if not audits:
        raise ProviderUnavailable(provider, "response has no Lighthouse audits")

    defaults = PAGESPEED_DEFAULTS.get(strategy, PAGESPEED_DEFAULTS["mobile"])

    def numeric(audit_id: str, key: str) -> float:
        value = (audits.get(audit_id) or {}).get("numericValue")
        return float(value) if value is not None else defaults[key]

    score = ((lighthouse.get("categories") or {}).get("performance") or {}).get("score")
    return PageSpeedMetrics(
        strategy=strategy,
        fcp_ms=numeric("first-contentful-paint", "fcp"),
        lcp_ms=numeric("largest-contentful-paint", "lcp"),
        cls=numeric("cumulative-layout-shift", "cls"),
        fid_ms=numeric("max-potential-fid", "fid"),
        performance_score=float(score) if score is not None else None,
    )


class GoogleMobileFriendlinessProvider(MobileFriendlinessProvider):
    """Google Search Console Mobile-Friendly Test provider."""

    name = "Google Mobile-Friendly Test"

    def __init__(self, api_key: str, client: httpx.AsyncClient, timeout: float = 30.0):
        self.api_key = api_key
        self.client = client
        self.timeout = timeout

    async def check(self, url: str) -> MobileVerdict:
        try:
            resp = await self.client.post(
                MOBILE_FRIENDLY_URL,
                params={"key": self.api_key},
                json={"url": url, "requestScreenshot": False},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Mobile-Friendly Test API unavailable for %s: %s", url, e)
            raise ProviderUnavailable(self.name, str(e))

        verdict = data.get("mobileFriendliness")
        try:
            return MobileVerdict(verdict)
        except ValueError:
            raise ProviderUnavailable(self.name, f"inconclusive verdict {verdict!r}")


def get_page_speed_provider(config: AuditConfig, client: httpx.AsyncClient) -> PageSpeedProvider:
    """Pick the page-speed provider for this configuration."""
    if config.google_api_key:
        return GooglePageSpeedProvider(config.google_api_key, client, config.provider_timeout)
    return BasicPageSpeedProvider()


def get_mobile_friendliness_provider(
    config: AuditConfig, client: httpx.AsyncClient
) -> MobileFriendlinessProvider:
    """Pick the mobile-friendliness provider for this configuration."""
    if config.google_api_key:
        return GoogleMobileFriendlinessProvider(
            config.google_api_key, client, config.provider_timeout
        )
    return BasicMobileFriendlinessProvider()
