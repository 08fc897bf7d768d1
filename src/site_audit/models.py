"""Data models for website audit results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Severity(Enum):
    """Severity tier for classified issues."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


class RenderMode(Enum):
    """How much of the page the fetcher sees."""
    BASIC = "basic"  # raw HTML and headers
    FULL = "full"    # headless browser with DOM facts


@dataclass(frozen=True)
class Viewport:
    """Browser viewport profile used for a fetch."""
    name: str
    width: int
    height: int


DESKTOP = Viewport("desktop", 1366, 768)
MOBILE = Viewport("mobile", 375, 667)


@dataclass(frozen=True)
class AuditTarget:
    """The site being audited."""
    url: str
    business_category: str


@dataclass(frozen=True)
class DomFacts:
    """Layout facts computed inside a rendered page."""
    viewport_meta: bool
    text_elements: int
    small_text_elements: int  # computed font size under 12px
    clickables_too_close: int  # adjacent pairs under 8px apart
    scroll_width: int
    viewport_width: int


@dataclass(frozen=True)
class PageSnapshot:
    """A single fetch of the target page for one viewport."""
    url: str
    final_url: str  # After redirects
    viewport: Viewport
    status_code: int
    headers: dict[str, str]
    html: str
    load_time: float  # seconds
    dom_facts: Optional[DomFacts] = None

    @property
    def rendered(self) -> bool:
        return self.dom_facts is not None


@dataclass(frozen=True)
class ExtractorResult:
    """Sub-score and findings produced by one extractor."""
    name: str
    score: int  # 0-100
    data: dict[str, Any] = field(default_factory=dict)
    issues: dict[str, Any] = field(default_factory=dict)
    recommendations: tuple[str, ...] = ()
    degraded: bool = False
    error: Optional[str] = None

    @property
    def available(self) -> bool:
        """Whether the score may take part in aggregation."""
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "data": self.data,
            "issues": self.issues,
            "recommendations": list(self.recommendations),
            "degraded": self.degraded,
            "error": self.error,
        }


@dataclass(frozen=True)
class Issue:
    """A single classified finding."""
    title: str
    severity: Severity
    impact: str
    description: str
    solution: str

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "impact": self.impact,
            "description": self.description,
            "solution": self.solution,
        }


@dataclass(frozen=True)
class IssueReport:
    """Issues grouped by severity tier, in generation order."""
    critical: tuple[Issue, ...] = ()
    high: tuple[Issue, ...] = ()
    medium: tuple[Issue, ...] = ()

    @property
    def total(self) -> int:
        return len(self.critical) + len(self.high) + len(self.medium)

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        return {
            "critical": [i.to_dict() for i in self.critical],
            "high": [i.to_dict() for i in self.high],
            "medium": [i.to_dict() for i in self.medium],
        }


@dataclass(frozen=True)
class RevenueProjection:
    """Estimated monthly revenue opportunity in USD."""
    min: int
    max: int
    multiplier: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return {"min": self.min, "max": self.max, "multiplier": self.multiplier}


@dataclass(frozen=True)
class AuditResult:
    """Complete audit result for a URL."""
    target: AuditTarget
    timestamp: str
    performance: ExtractorResult
    mobile: ExtractorResult
    seo: ExtractorResult
    local: ExtractorResult
    conversion: ExtractorResult
    technical: ExtractorResult
    issues: IssueReport
    health_score: int
    revenue_projection: RevenueProjection
    render_mode: RenderMode = RenderMode.BASIC

    @property
    def extractor_results(self) -> dict[str, ExtractorResult]:
        return {
            "performance": self.performance,
            "mobile": self.mobile,
            "seo": self.seo,
            "local": self.local,
            "conversion": self.conversion,
            "technical": self.technical,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize for storage, report and email collaborators."""
        output: dict[str, Any] = {
            "url": self.target.url,
            "business_category": self.target.business_category,
            "timestamp": self.timestamp,
            "render_mode": self.render_mode.value,
        }
        for name, result in self.extractor_results.items():
            output[name] = result.to_dict()
        output["issues"] = self.issues.to_dict()
        output["health_score"] = self.health_score
        output["revenue_projection"] = self.revenue_projection.to_dict()
        return output
