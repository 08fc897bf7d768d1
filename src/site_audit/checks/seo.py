"""On-page SEO signals: title, meta description, headings and alt text."""

from typing import Any
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from ..models import ExtractorResult
from ..scoring import clamp_score
from .base import AuditContext, Extractor, parse_html


TITLE_MIN = 30
TITLE_MAX = 60
META_DESCRIPTION_MIN = 120
META_DESCRIPTION_MAX = 160


def extract_seo_data(soup: BeautifulSoup, url: str) -> dict[str, Any]:
    """Collect the raw SEO facts from a parsed page."""
    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    desc_tag = soup.find("meta", attrs={"name": "description"})
    description = (desc_tag.get("content") or "").strip() if desc_tag else ""

    images = []
    for img in soup.find_all("img"):
        alt = (img.get("alt") or "").strip()
        images.append({"src": img.get("src", ""), "alt": alt, "has_alt": bool(alt)})

    host = urlparse(url).netloc
    internal = external = 0
    for link in soup.find_all("a", href=True):
        href = urljoin(url, link["href"])
        parsed = urlparse(href)
        if parsed.scheme not in ("http", "https"):
            continue
        if parsed.netloc == host:
            internal += 1
        else:
            external += 1

    return {
        "title": title,
        "meta_description": description,
        "h1_tags": [h.get_text(strip=True) for h in soup.find_all("h1")],
        "h2_tags": [h.get_text(strip=True) for h in soup.find_all("h2")],
        "images": images,
        "links": {"internal": internal, "external": external},
    }


def detect_seo_issues(data: dict[str, Any]) -> dict[str, Any]:
    title = data["title"]
    description = data["meta_description"]
    h1_count = len(data["h1_tags"])
    return {
        "missing_title": not title,
        "title_too_short": len(title) < TITLE_MIN,
        "title_too_long": len(title) > TITLE_MAX,
        "missing_meta_description": not description,
        "meta_description_too_short": len(description) < META_DESCRIPTION_MIN,
        "meta_description_too_long": len(description) > META_DESCRIPTION_MAX,
        "no_h1": h1_count == 0,
        "multiple_h1": h1_count > 1,
        "missing_alt_tags": sum(1 for img in data["images"] if not img["has_alt"]),
        "total_images": len(data["images"]),
    }


def calculate_seo_score(issues: dict[str, Any]) -> int:
    score = 100.0
    if issues["missing_title"]:
        score -= 25
    if issues["title_too_short"] or issues["title_too_long"]:
        score -= 15
    if issues["missing_meta_description"]:
        score -= 20
    if issues["meta_description_too_short"] or issues["meta_description_too_long"]:
        score -= 10
    if issues["no_h1"]:
        score -= 20
    if issues["multiple_h1"]:
        score -= 15
    if issues["missing_alt_tags"] > 0 and issues["total_images"] > 0:
        score -= min(20, issues["missing_alt_tags"] / issues["total_images"] * 20)
    return clamp_score(score)


def analyze_seo(html: str, url: str = "") -> ExtractorResult:
    """Score the on-page SEO basics of an HTML document."""
    data = extract_seo_data(parse_html(html), url)
    issues = detect_seo_issues(data)
    return ExtractorResult(
        name="seo",
        score=calculate_seo_score(issues),
        data=data,
        issues=issues,
    )


class SEOExtractor(Extractor):
    name = "seo"

    async def extract(self, context: AuditContext) -> ExtractorResult:
        snapshot = context.primary
        return analyze_seo(snapshot.html, snapshot.final_url)
