"""Conversion elements: phone numbers, forms, calls to action, social proof."""

from typing import Any

from ..models import ExtractorResult
from .base import PHONE_RE, AuditContext, Extractor, parse_html, visible_text


CTA_KEYWORDS = ["call", "contact", "quote", "book", "schedule", "order", "buy", "get started"]

SOCIAL_PROOF_KEYWORDS = {
    "testimonials": ["testimonial", "review", "customer says", "client feedback"],
    "reviews": ["star", "rating", "review", "google reviews"],
    "awards": ["award", "certified", "licensed", "accredited", "winner"],
}

CATEGORY_CTAS = {
    "restaurant": 'Add "Make Reservation" and "Order Online" buttons',
    "home-services": 'Add "Get Free Quote" and "Schedule Service" buttons',
    "healthcare": 'Add "Book Appointment" and "Contact Us" buttons',
    "automotive": 'Add "Schedule Service" and "Get Quote" buttons',
}

# Points per element present.
CONVERSION_WEIGHTS = {
    "phone": 30,
    "contact_form": 25,
    "cta": 20,
    "contact_links": 15,
    "social_proof": 10,
}


def extract_conversion_data(html: str) -> dict[str, Any]:
    soup = parse_html(html)
    text = visible_text(html)
    lowered = text.lower()

    cta_buttons = 0
    for el in soup.select('button, a, input[type="submit"]'):
        label = el.get_text(" ", strip=True) or el.get("value", "")
        if any(keyword in label.lower() for keyword in CTA_KEYWORDS):
            cta_buttons += 1

    social_proof = {
        kind: sum(1 for keyword in keywords if keyword in lowered)
        for kind, keywords in SOCIAL_PROOF_KEYWORDS.items()
    }

    return {
        "phone_numbers": PHONE_RE.findall(text),
        "contact_forms": len(soup.find_all("form")),
        "cta_buttons": cta_buttons,
        "contact_links": len(soup.select('a[href^="tel:"], a[href^="mailto:"]')),
        "social_proof": social_proof,
    }


def calculate_conversion_score(data: dict[str, Any]) -> int:
    present = {
        "phone": bool(data["phone_numbers"]),
        "contact_form": data["contact_forms"] > 0,
        "cta": data["cta_buttons"] > 0,
        "contact_links": data["contact_links"] > 0,
        "social_proof": any(count > 0 for count in data["social_proof"].values()),
    }
    return sum(CONVERSION_WEIGHTS[key] for key, found in present.items() if found)


def conversion_recommendations(data: dict[str, Any], business_category: str) -> list[str]:
    recommendations = []
    if not data["phone_numbers"]:
        recommendations.append("Add a prominent phone number with click-to-call functionality")
    if data["contact_forms"] == 0:
        recommendations.append("Add a contact form to capture leads who prefer not to call")
    if data["cta_buttons"] < 3:
        recommendations.append("Add more clear call-to-action buttons throughout your site")
    if business_category in CATEGORY_CTAS:
        recommendations.append(CATEGORY_CTAS[business_category])
    if all(count == 0 for count in data["social_proof"].values()):
        recommendations.append("Add customer testimonials and reviews to build trust")
    return recommendations


def analyze_conversion(html: str, business_category: str) -> ExtractorResult:
    """Score how easily a visitor can become a lead."""
    data = extract_conversion_data(html)
    phone_visible = bool(data["phone_numbers"])
    contact_form_present = data["contact_forms"] > 0
    data["phone_visible"] = phone_visible
    data["contact_form_present"] = contact_form_present
    return ExtractorResult(
        name="conversion",
        score=calculate_conversion_score(data),
        data=data,
        issues={
            "phone_not_visible": not phone_visible,
            "no_contact_form": not contact_form_present,
            "no_cta": data["cta_buttons"] == 0,
        },
        recommendations=tuple(conversion_recommendations(data, business_category)),
    )


class ConversionExtractor(Extractor):
    name = "conversion"

    async def extract(self, context: AuditContext) -> ExtractorResult:
        return analyze_conversion(context.primary.html, context.target.business_category)
