"""Technical hygiene: HTTPS, canonical, compression, crawl files, analytics."""

import logging
import re
from typing import Any
from urllib.parse import urljoin, urlparse

import httpx

from ..models import ExtractorResult, PageSnapshot
from .base import AuditContext, Extractor, parse_html

logger = logging.getLogger("site_audit")

GOOGLE_ANALYTICS_RE = re.compile(r"gtag\(|ga\(|GoogleAnalytics|UA-")
TAG_MANAGER_RE = re.compile(r"googletagmanager|GTM-")
FACEBOOK_PIXEL_RE = re.compile(r"fbq\(")


def extract_technical_data(snapshot: PageSnapshot) -> dict[str, Any]:
    soup = parse_html(snapshot.html)
    canonical = soup.find("link", rel="canonical")
    return {
        "ssl": urlparse(snapshot.final_url).scheme == "https",
        "status_code": snapshot.status_code,
        "canonical": bool(canonical and canonical.get("href")),
        "gzip": snapshot.headers.get("content-encoding", "").lower() == "gzip",
        "robots": False,
        "sitemap": False,
        "analytics": {
            "google_analytics": bool(GOOGLE_ANALYTICS_RE.search(snapshot.html)),
            "google_tag_manager": bool(TAG_MANAGER_RE.search(snapshot.html)),
            "facebook_pixel": bool(FACEBOOK_PIXEL_RE.search(snapshot.html)),
        },
    }


def calculate_technical_score(data: dict[str, Any]) -> int:
    score = 0
    if data["ssl"]:
        score += 25
    if data["canonical"]:
        score += 15
    if data["sitemap"]:
        score += 20
    if data["robots"]:
        score += 15
    if data["gzip"]:
        score += 10
    if data["analytics"]["google_analytics"]:
        score += 15
    return score


async def check_crawl_files(
    client: httpx.AsyncClient, final_url: str, timeout: float
) -> tuple[bool, bool]:
    """Return (robots.txt found, sitemap found)."""
    parsed = urlparse(final_url)
    root_url = f"{parsed.scheme}://{parsed.netloc}"
    robots = sitemap = False

    try:
        robots_resp = await client.get(
            urljoin(root_url, "/robots.txt"), timeout=timeout, follow_redirects=True
        )
        if robots_resp.status_code == 200:
            robots = True
            if "sitemap:" in robots_resp.text.lower():
                sitemap = True
    except httpx.RequestError as e:
        logger.debug("Could not check robots.txt for %s: %s", root_url, e)

    if not sitemap:
        try:
            sitemap_resp = await client.get(
                urljoin(root_url, "/sitemap.xml"), timeout=timeout, follow_redirects=True
            )
            sitemap = sitemap_resp.status_code == 200
        except httpx.RequestError as e:
            logger.debug("Could not check sitemap.xml for %s: %s", root_url, e)

    return robots, sitemap


class TechnicalExtractor(Extractor):
    name = "technical"

    async def extract(self, context: AuditContext) -> ExtractorResult:
        logger.info("Analyzing technical setup")
        snapshot = context.primary
        data = extract_technical_data(snapshot)
        data["robots"], data["sitemap"] = await check_crawl_files(
            context.client, snapshot.final_url, context.config.probe_timeout
        )
        return ExtractorResult(
            name="technical",
            score=calculate_technical_score(data),
            data=data,
            issues={
                "no_https": not data["ssl"],
                "no_canonical": not data["canonical"],
                "no_sitemap": not data["sitemap"],
                "no_robots": not data["robots"],
                "no_compression": not data["gzip"],
                "no_analytics": not (
                    data["analytics"]["google_analytics"]
                    or data["analytics"]["google_tag_manager"]
                ),
            },
        )
