"""Exceptions raised while auditing a site."""


class AuditError(Exception):
    """Base class for audit errors."""


class FetchError(AuditError):
    """A page could not be fetched (network failure, timeout, non-2xx)."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"{url}: {reason}")


class ProviderUnavailable(AuditError):
    """An optional third-party provider is not configured or failed."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider} unavailable: {reason}")


class ExtractorDegraded(AuditError):
    """An extractor could only produce a fallback result."""

    def __init__(self, extractor: str, reason: str):
        self.extractor = extractor
        self.reason = reason
        super().__init__(f"{extractor} degraded: {reason}")


class AuditFailed(AuditError):
    """No usable page snapshot could be obtained for the target."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Audit failed for {url}: {reason}")
