"""Configuration objects and constants for the auditor."""

import os
from dataclasses import dataclass
from typing import Optional

from . import __version__


DEFAULT_USER_AGENT = (
    f"Mozilla/5.0 (compatible; SiteAudit/{__version__}; "
    "+https://github.com/site-audit/site-audit)"
)

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AuditConfig:
    """Settings that control fetching, rendering and optional providers."""

    timeout: float = 30.0
    probe_timeout: float = 10.0
    provider_timeout: float = 30.0
    render: bool = False
    wait_after_load: float = 0.0
    google_api_key: Optional[str] = None
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, **overrides) -> "AuditConfig":
        """Build a config from environment variables, then apply overrides."""
        config = cls(
            timeout=float(os.getenv("SITE_AUDIT_TIMEOUT", "30")),
            render=_env_flag("SITE_AUDIT_RENDER"),
            google_api_key=os.getenv("GOOGLE_PAGESPEED_API_KEY") or None,
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)
        return config

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, **DEFAULT_HEADERS}
