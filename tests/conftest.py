import asyncio

import httpx
import pytest

from site_audit.checks.base import AuditContext
from site_audit.config import AuditConfig
from site_audit.errors import ProviderUnavailable
from site_audit.models import DESKTOP, MOBILE, AuditTarget, ExtractorResult, PageSnapshot

SITE_URL = "https://acme.example/"

GOOD_TITLE = "Acme Plumbing and Drain Service, Austin Texas"
GOOD_DESCRIPTION = (
    "Acme Plumbing offers licensed residential and commercial plumbing repair, "
    "drain cleaning and water heater installation across greater Austin"
)

GOOD_PAGE = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <title>{GOOD_TITLE}</title>
  <meta name="description" content="{GOOD_DESCRIPTION}">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="canonical" href="https://acme.example/">
  <script type="application/ld+json">{{"@type": "Plumber", "name": "Acme Plumbing"}}</script>
  <script>gtag('config', 'G-123');</script>
</head>
<body>
  <header>
    <a href="tel:5125550147">Call (512) 555-0147</a>
    <a href="/services">Services</a>
  </header>
  <h1>Licensed Local Plumbers</h1>
  <h2>Residential and commercial service area</h2>
  <img src="/van.jpg" alt="Acme service van">
  <img src="/team.jpg" alt="Our plumbers">
  <p>Visit us at 1200 Main Street or email info@acmeplumbing.com.</p>
  <section class="testimonials"><p>Read a testimonial from our customers.</p></section>
  <form action="/contact" method="post">
    <input name="email">
    <button type="submit">Get a Free Quote</button>
  </form>
  <a href="https://facebook.com/acme">Follow us</a>
</body>
</html>
"""

BAD_PAGE = """<!DOCTYPE html>
<html>
<head></head>
<body>
  <div>Welcome</div>
  <img src="/a.jpg">
  <img src="/b.jpg">
</body>
</html>
"""


def run(coro):
    return asyncio.run(coro)


def make_snapshot(
    html=GOOD_PAGE,
    viewport=DESKTOP,
    load_time=1.0,
    dom_facts=None,
    headers=None,
    url=SITE_URL,
    status_code=200,
):
    return PageSnapshot(
        url=url,
        final_url=url,
        viewport=viewport,
        status_code=status_code,
        headers=headers or {"content-type": "text/html"},
        html=html,
        load_time=load_time,
        dom_facts=dom_facts,
    )


def make_result(name, score, data=None, issues=None, error=None):
    return ExtractorResult(name=name, score=score, data=data or {}, issues=issues or {}, error=error)


def healthy_results(**overrides):
    """Extractor results for a site that triggers no issue rules."""
    results = {
        "performance": make_result(
            "performance", 90, data={"mobile": {"load_time": 2.5}, "desktop": {"load_time": 1.0}}
        ),
        "mobile": make_result("mobile", 80),
        "seo": make_result(
            "seo", 100,
            issues={"missing_title": False, "missing_meta_description": False, "missing_alt_tags": 0},
        ),
        "local": make_result("local", 80),
        "conversion": make_result(
            "conversion", 100, data={"phone_visible": True, "contact_form_present": True}
        ),
        "technical": make_result("technical", 100),
    }
    results.update(overrides)
    return results


def slow(load_time):
    return make_result("performance", 0, data={"mobile": {"load_time": load_time}})


class FakeFetcher:
    """Serves prepared snapshots (or errors) per viewport name."""

    def __init__(self, desktop=None, mobile=None, probe_time=1.0):
        self.outcomes = {DESKTOP.name: desktop, MOBILE.name: mobile}
        self.probe_time = probe_time
        self.fetches = []
        self.probes = 0

    async def fetch(self, url, viewport, render=False):
        self.fetches.append((url, viewport.name, render))
        outcome = self.outcomes[viewport.name]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def probe(self, url):
        self.probes += 1
        if isinstance(self.probe_time, Exception):
            raise self.probe_time
        return self.probe_time


class FakePageSpeed:
    name = "fake pagespeed"

    def __init__(self, metrics=None):
        self.metrics = metrics or {}
        self.calls = []

    async def get_page_speed(self, url, strategy):
        self.calls.append(strategy)
        if strategy not in self.metrics:
            raise ProviderUnavailable(self.name, "no data")
        return self.metrics[strategy]


class FakeMobileTest:
    name = "fake mobile test"

    def __init__(self, verdict=None):
        self.verdict = verdict

    async def check(self, url):
        if self.verdict is None:
            raise ProviderUnavailable(self.name, "no verdict")
        return self.verdict


def make_context(
    config,
    desktop=None,
    mobile=None,
    category="retail",
    client=None,
    fetcher=None,
    page_speed=None,
    mobile_test=None,
):
    snapshot = desktop or mobile
    return AuditContext(
        target=AuditTarget(url=snapshot.url if snapshot else SITE_URL, business_category=category),
        config=config,
        client=client,
        fetcher=fetcher or FakeFetcher(desktop=desktop, mobile=mobile),
        page_speed=page_speed or FakePageSpeed(),
        mobile_test=mobile_test or FakeMobileTest(),
        desktop=desktop,
        mobile=mobile,
    )


def not_found_transport():
    """Transport that answers 404 to every request."""
    return httpx.MockTransport(lambda request: httpx.Response(404, text="not found"))


@pytest.fixture
def config():
    return AuditConfig(timeout=5.0, probe_timeout=1.0)
