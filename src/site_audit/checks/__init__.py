"""Signal extractors for website audits."""

from .base import AuditContext, Extractor
from .conversion import ConversionExtractor, analyze_conversion
from .local_seo import LocalSEOExtractor, analyze_local_seo
from .mobile import MobileExtractor
from .performance import PerformanceExtractor
from .seo import SEOExtractor, analyze_seo
from .technical import TechnicalExtractor


def default_extractors() -> list[Extractor]:
    """One instance of every extractor, in result order."""
    return [
        PerformanceExtractor(),
        MobileExtractor(),
        SEOExtractor(),
        LocalSEOExtractor(),
        ConversionExtractor(),
        TechnicalExtractor(),
    ]


__all__ = [
    "AuditContext",
    "Extractor",
    "ConversionExtractor",
    "LocalSEOExtractor",
    "MobileExtractor",
    "PerformanceExtractor",
    "SEOExtractor",
    "TechnicalExtractor",
    "analyze_conversion",
    "analyze_local_seo",
    "analyze_seo",
    "default_extractors",
]
