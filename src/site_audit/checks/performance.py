"""Page load performance for desktop and mobile."""

import asyncio
import logging
from typing import Any, Optional

from ..errors import ProviderUnavailable
from ..models import ExtractorResult, PageSnapshot
from ..providers import PageSpeedMetrics
from ..scoring import round_half_up, speed_score
from .base import AuditContext, Extractor

logger = logging.getLogger("site_audit")

# HEAD probes only time the server response; phones are assumed slower.
MOBILE_PROBE_FACTOR = 1.5

SLOW_MOBILE_SECONDS = 5
VERY_SLOW_MOBILE_SECONDS = 8


def measure_strategy(
    metrics: Optional[PageSpeedMetrics],
    snapshot: Optional[PageSnapshot],
    probe_time: Optional[float],
    probe_factor: float = 1.0,
) -> dict[str, Any]:
    """Pick the best available timing source for one strategy.

    Provider metrics win over local snapshot timing, which wins over a
    HEAD probe.
    """
    if metrics is not None:
        load_time = metrics.load_time
        if metrics.performance_score is not None:
            score = round_half_up(metrics.performance_score * 100)
        else:
            score = speed_score(load_time)
        source = "pagespeed"
    elif snapshot is not None:
        load_time = snapshot.load_time
        score = speed_score(load_time)
        source = "local"
    elif probe_time is not None:
        load_time = probe_time * probe_factor
        score = speed_score(load_time)
        source = "probe"
    else:
        raise ValueError("no timing source available")

    return {"load_time": load_time, "score": score, "source": source}


def build_performance_result(
    desktop: dict[str, Any],
    mobile: dict[str, Any],
    core_web_vitals: Optional[dict[str, float]] = None,
) -> ExtractorResult:
    mobile_load = mobile["load_time"]
    data: dict[str, Any] = {"desktop": desktop, "mobile": mobile}
    if core_web_vitals:
        data["core_web_vitals"] = core_web_vitals
    return ExtractorResult(
        name="performance",
        score=mobile["score"],
        data=data,
        issues={
            "slow_mobile": mobile_load > SLOW_MOBILE_SECONDS,
            "very_slow_mobile": mobile_load > VERY_SLOW_MOBILE_SECONDS,
        },
        degraded="probe" in (desktop["source"], mobile["source"]),
    )


class PerformanceExtractor(Extractor):
    name = "performance"
    supports_rendered_mode = True

    async def _page_speed(
        self, context: AuditContext, strategy: str
    ) -> Optional[PageSpeedMetrics]:
        try:
            return await context.page_speed.get_page_speed(context.target.url, strategy)
        except ProviderUnavailable as e:
            logger.debug("Using local timing for %s: %s", strategy, e)
            return None

    async def extract(self, context: AuditContext) -> ExtractorResult:
        logger.info("Analyzing performance")
        mobile_metrics, desktop_metrics = await asyncio.gather(
            self._page_speed(context, "mobile"),
            self._page_speed(context, "desktop"),
        )

        probe_time = None
        needs_probe = (mobile_metrics is None and context.mobile is None) or (
            desktop_metrics is None and context.desktop is None
        )
        if needs_probe:
            probe_time = await context.fetcher.probe(context.target.url)

        mobile = measure_strategy(
            mobile_metrics, context.mobile, probe_time, MOBILE_PROBE_FACTOR
        )
        desktop = measure_strategy(desktop_metrics, context.desktop, probe_time)
        vitals = mobile_metrics.core_web_vitals() if mobile_metrics else None
        return build_performance_result(desktop, mobile, vitals)
