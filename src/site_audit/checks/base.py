"""Shared context and base class for signal extractors."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from ..config import AuditConfig
from ..errors import ExtractorDegraded
from ..fetcher import PageFetcher
from ..models import AuditTarget, ExtractorResult, PageSnapshot
from ..providers import MobileFriendlinessProvider, PageSpeedProvider


# North American numbering plan, e.g. (555) 123-4567, 555.123.4567
PHONE_RE = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

NON_VISIBLE_TAGS = ["script", "style", "noscript", "template"]


@dataclass(frozen=True)
class AuditContext:
    """Everything an extractor may read during one audit run."""
    target: AuditTarget
    config: AuditConfig
    client: httpx.AsyncClient
    fetcher: PageFetcher
    page_speed: PageSpeedProvider
    mobile_test: MobileFriendlinessProvider
    desktop: Optional[PageSnapshot] = None
    mobile: Optional[PageSnapshot] = None

    @property
    def primary(self) -> PageSnapshot:
        """Snapshot used by text-based extractors, desktop first."""
        snapshot = self.desktop or self.mobile
        if snapshot is None:
            raise ExtractorDegraded("context", "no page snapshot available")
        return snapshot


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def visible_text(html: str) -> str:
    """Approximate the rendered text of a page."""
    soup = parse_html(html)
    for tag in soup.find_all(NON_VISIBLE_TAGS):
        tag.decompose()
    root = soup.body or soup
    return root.get_text(" ", strip=True)


class Extractor(ABC):
    """A single signal extractor producing one sub-score.

    Extractors only read the shared context; they never see each other's
    results, so they can run concurrently in any order.
    """

    name: str
    supports_rendered_mode: bool = False

    @abstractmethod
    async def extract(self, context: AuditContext) -> ExtractorResult:
        """Analyze the context and return this extractor's result."""
