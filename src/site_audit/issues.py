"""Classify extractor findings into severity-tiered issues."""

from typing import Mapping, Optional

from .models import ExtractorResult, Issue, IssueReport, Severity


def available(results: Mapping[str, ExtractorResult], name: str) -> Optional[ExtractorResult]:
    """Return the named result if it produced a usable score."""
    result = results.get(name)
    if result is None or not result.available:
        return None
    return result


def mobile_load_time(results: Mapping[str, ExtractorResult]) -> Optional[float]:
    performance = available(results, "performance")
    if performance is None:
        return None
    return performance.data.get("mobile", {}).get("load_time")


def phone_visible(results: Mapping[str, ExtractorResult]) -> bool:
    conversion = available(results, "conversion")
    return bool(conversion and conversion.data.get("phone_visible"))


def contact_form_present(results: Mapping[str, ExtractorResult]) -> bool:
    conversion = available(results, "conversion")
    return bool(conversion and conversion.data.get("contact_form_present"))


def classify(results: Mapping[str, ExtractorResult]) -> IssueReport:
    """Apply the fixed threshold rules in order.

    Each rule adds at most one issue. Rules reading a score or timing skip
    extractors that errored; a failed conversion check counts as no phone
    and no contact form.
    """
    critical: list[Issue] = []
    high: list[Issue] = []
    medium: list[Issue] = []

    load_time = mobile_load_time(results)
    mobile = available(results, "mobile")
    seo = available(results, "seo")
    local = available(results, "local")

    # Critical: immediate revenue impact
    if load_time is not None and load_time > 8:
        critical.append(Issue(
            title="Extremely Slow Mobile Loading",
            severity=Severity.CRITICAL,
            impact="High",
            description=(
                f"Your website takes {load_time:.1f} seconds to load on mobile. "
                "Most users abandon sites that take longer than 3 seconds."
            ),
            solution="Optimize images, enable compression, and improve server response time",
        ))

    if not phone_visible(results):
        critical.append(Issue(
            title="Phone Number Not Visible",
            severity=Severity.CRITICAL,
            impact="High",
            description="Customers cannot easily find your phone number to call you.",
            solution=(
                "Add a prominent phone number in the header and footer "
                "with click-to-call functionality"
            ),
        ))

    if mobile is not None and mobile.score < 40:
        critical.append(Issue(
            title="Mobile Website Unusable",
            severity=Severity.CRITICAL,
            impact="High",
            description="Your website is difficult or impossible to use on mobile devices.",
            solution="Implement responsive design and fix mobile usability issues",
        ))

    # High
    if seo is not None and (
        seo.issues.get("missing_title") or seo.issues.get("missing_meta_description")
    ):
        high.append(Issue(
            title="Missing SEO Basics",
            severity=Severity.HIGH,
            impact="Medium",
            description=(
                "Your pages are missing essential SEO elements that help Google "
                "understand your business."
            ),
            solution="Add proper page titles and meta descriptions to all pages",
        ))

    if load_time is not None and 5 < load_time <= 8:
        high.append(Issue(
            title="Slow Mobile Loading",
            severity=Severity.HIGH,
            impact="Medium",
            description=(
                f"Your mobile loading time of {load_time:.1f} seconds is slower "
                "than 87% of websites."
            ),
            solution="Optimize images and enable caching to improve load times",
        ))

    if local is not None and local.score < 50:
        high.append(Issue(
            title="Poor Local SEO Setup",
            severity=Severity.HIGH,
            impact="Medium",
            description="Local customers may have trouble finding you in Google searches.",
            solution="Optimize for local search and claim your Google My Business listing",
        ))

    # Medium
    if not contact_form_present(results):
        medium.append(Issue(
            title="No Contact Form",
            severity=Severity.MEDIUM,
            impact="Low",
            description="Visitors have limited ways to contact you beyond phone calls.",
            solution="Add a contact form to capture more leads",
        ))

    missing_alt = seo.issues.get("missing_alt_tags", 0) if seo is not None else 0
    if missing_alt > 0:
        medium.append(Issue(
            title="Missing Image Alt Tags",
            severity=Severity.MEDIUM,
            impact="Low",
            description=f"{missing_alt} images are missing alt tags, hurting SEO.",
            solution="Add descriptive alt tags to all images",
        ))

    return IssueReport(critical=tuple(critical), high=tuple(high), medium=tuple(medium))
