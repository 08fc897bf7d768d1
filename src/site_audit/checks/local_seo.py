"""Local search signals: NAP contact details, local keywords, schema markup."""

import re
from typing import Any, Optional

from ..models import ExtractorResult
from .base import EMAIL_RE, PHONE_RE, AuditContext, Extractor, parse_html, visible_text


ADDRESS_RE = re.compile(
    r"\d+\s+[a-z\s]+(?:street|st|avenue|ave|road|rd|lane|ln|drive|dr|court|ct|blvd|boulevard)\b",
    re.I,
)

LOCAL_KEYWORDS = {
    "restaurant": ["restaurant", "dining", "menu", "reservations", "local food"],
    "home-services": ["local", "service area", "residential", "commercial", "licensed"],
    "healthcare": ["local", "patients", "appointments", "office hours"],
    "retail": ["store", "shop", "location", "hours", "local"],
    "automotive": ["auto", "car", "vehicle", "service", "repair", "local"],
}
DEFAULT_CATEGORY = "retail"


def keywords_for(business_category: str) -> list[str]:
    return LOCAL_KEYWORDS.get(business_category, LOCAL_KEYWORDS[DEFAULT_CATEGORY])


def _first_match(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(0) if match else None


def extract_local_data(html: str, business_category: str) -> dict[str, Any]:
    soup = parse_html(html)
    text = visible_text(html).lower()
    return {
        "business_category": business_category,
        "contact_info": {
            "phone": _first_match(PHONE_RE, text),
            "address": _first_match(ADDRESS_RE, text),
            "email": _first_match(EMAIL_RE, text),
        },
        "local_keywords": [k for k in keywords_for(business_category) if k in text],
        "structured_data": bool(soup.find_all("script", type="application/ld+json")),
    }


def calculate_local_score(data: dict[str, Any]) -> int:
    contact = data["contact_info"]
    return (
        (25 if contact["phone"] else 0)
        + (25 if contact["address"] else 0)
        + (15 if contact["email"] else 0)
        + (20 if data["local_keywords"] else 0)
        + (15 if data["structured_data"] else 0)
    )


def local_recommendations(data: dict[str, Any]) -> list[str]:
    recommendations = []
    if not data["contact_info"]["phone"]:
        recommendations.append("Add your phone number prominently on every page")
    if not data["contact_info"]["address"]:
        recommendations.append("Display your business address clearly on your website")
    if len(data["local_keywords"]) < 3:
        recommendations.append("Include more local keywords relevant to your business")
    if not data["structured_data"]:
        recommendations.append("Add structured data markup for better local search visibility")
    return recommendations


def analyze_local_seo(html: str, business_category: str) -> ExtractorResult:
    data = extract_local_data(html, business_category)
    contact = data["contact_info"]
    return ExtractorResult(
        name="local",
        score=calculate_local_score(data),
        data=data,
        issues={
            "missing_phone": contact["phone"] is None,
            "missing_address": contact["address"] is None,
            "missing_email": contact["email"] is None,
            "no_local_keywords": not data["local_keywords"],
            "no_structured_data": not data["structured_data"],
        },
        recommendations=tuple(local_recommendations(data)),
    )


class LocalSEOExtractor(Extractor):
    name = "local"

    async def extract(self, context: AuditContext) -> ExtractorResult:
        return analyze_local_seo(context.primary.html, context.target.business_category)
