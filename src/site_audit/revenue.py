"""Estimate the monthly revenue opportunity from fixing detected issues."""

from typing import Mapping

from .issues import available, contact_form_present, mobile_load_time, phone_visible
from .models import ExtractorResult, RevenueProjection
from .scoring import round_half_up


# Monthly USD (min, max) by business category
BASE_PROJECTIONS = {
    "restaurant": (2000, 5000),
    "home-services": (3000, 8000),
    "healthcare": (5000, 15000),
    "automotive": (2500, 6000),
    "retail": (1500, 4000),
    "professional-services": (3000, 10000),
}
DEFAULT_CATEGORY = "retail"

# Categories whose customers mostly search locally
LOCATION_DEPENDENT = {"restaurant", "home-services", "healthcare", "automotive"}


def base_projection(business_category: str) -> tuple[int, int]:
    return BASE_PROJECTIONS.get(business_category, BASE_PROJECTIONS[DEFAULT_CATEGORY])


def opportunity_tenths(results: Mapping[str, ExtractorResult], business_category: str) -> int:
    """Multiplier in tenths, starting at 10 (1.0).

    Findings add to the multiplier rather than compounding. A mobile load
    over 8s satisfies both load-time rules.
    """
    tenths = 10

    load_time = mobile_load_time(results)
    if load_time is not None and load_time > 5:
        tenths += 3
    if load_time is not None and load_time > 8:
        tenths += 5

    mobile = available(results, "mobile")
    if mobile is not None and mobile.score < 50:
        tenths += 4

    seo = available(results, "seo")
    if seo is not None and seo.score < 60:
        tenths += 3

    if not phone_visible(results):
        tenths += 4
    if not contact_form_present(results):
        tenths += 2

    if business_category in LOCATION_DEPENDENT:
        local = available(results, "local")
        if local is not None and local.score < 50:
            tenths += 5

    return tenths


def project(results: Mapping[str, ExtractorResult], business_category: str) -> RevenueProjection:
    """Scale the category's base range by the accumulated multiplier."""
    base_min, base_max = base_projection(business_category)
    tenths = opportunity_tenths(results, business_category)
    return RevenueProjection(
        min=round_half_up(base_min * tenths / 10),
        max=round_half_up(base_max * tenths / 10),
        multiplier=tenths / 10,
    )
