"""Mobile usability from rendered layout facts or an external verdict."""

import logging
from typing import Optional

from ..errors import ProviderUnavailable
from ..models import DomFacts, ExtractorResult
from ..providers import MobileVerdict
from ..scoring import clamp_score
from .base import AuditContext, Extractor
from .seo import analyze_seo

logger = logging.getLogger("site_audit")

SMALL_TEXT_RATIO = 0.1
BASIC_FRIENDLY_THRESHOLD = 70

NO_ISSUES = {
    "viewport_not_set": False,
    "text_too_small": False,
    "click_targets_too_close": False,
    "content_wider_than_screen": False,
}


def detect_mobile_issues(facts: DomFacts) -> dict[str, bool]:
    return {
        "viewport_not_set": not facts.viewport_meta,
        "text_too_small": facts.small_text_elements > facts.text_elements * SMALL_TEXT_RATIO,
        "click_targets_too_close": facts.clickables_too_close > 0,
        "content_wider_than_screen": facts.scroll_width > facts.viewport_width,
    }


def calculate_mobile_score(issues: dict[str, bool]) -> int:
    score = 100
    if issues["text_too_small"]:
        score -= 30
    if issues["click_targets_too_close"]:
        score -= 25
    if issues["viewport_not_set"]:
        score -= 25
    if issues["content_wider_than_screen"]:
        score -= 20
    return clamp_score(score)


def verdict_result(verdict: MobileVerdict) -> ExtractorResult:
    friendly = verdict is MobileVerdict.MOBILE_FRIENDLY
    return ExtractorResult(
        name="mobile",
        score=90 if friendly else 30,
        data={"friendly": friendly, "source": "google", "verdict": verdict.value},
        issues=dict(NO_ISSUES),
    )


def rendered_result(facts: DomFacts) -> ExtractorResult:
    issues = detect_mobile_issues(facts)
    return ExtractorResult(
        name="mobile",
        score=calculate_mobile_score(issues),
        data={
            "friendly": not any(issues.values()),
            "source": "rendered",
            "text_elements": facts.text_elements,
            "small_text_elements": facts.small_text_elements,
            "scroll_width": facts.scroll_width,
            "viewport_width": facts.viewport_width,
        },
        issues=issues,
    )


def basic_result(html: str, url: str = "") -> ExtractorResult:
    """Coarse fallback when neither rendering nor a verdict is available."""
    seo_score = analyze_seo(html, url).score
    score = 80 if seo_score > BASIC_FRIENDLY_THRESHOLD else 60
    return ExtractorResult(
        name="mobile",
        score=score,
        data={
            "friendly": score > BASIC_FRIENDLY_THRESHOLD,
            "source": "basic",
            "seo_proxy_score": seo_score,
        },
        issues=dict(NO_ISSUES),
        degraded=True,
    )


class MobileExtractor(Extractor):
    name = "mobile"
    supports_rendered_mode = True

    async def _verdict(self, context: AuditContext) -> Optional[MobileVerdict]:
        try:
            return await context.mobile_test.check(context.target.url)
        except ProviderUnavailable as e:
            logger.debug("No mobile-friendliness verdict: %s", e)
            return None

    async def extract(self, context: AuditContext) -> ExtractorResult:
        logger.info("Analyzing mobile usability")
        verdict = await self._verdict(context)
        if verdict is not None:
            return verdict_result(verdict)

        snapshot = context.mobile or context.primary
        if snapshot.dom_facts is not None:
            return rendered_result(snapshot.dom_facts)
        return basic_result(snapshot.html, snapshot.final_url)
