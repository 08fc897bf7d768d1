import httpx
import pytest
from playwright.async_api import Error as PlaywrightError

from site_audit.browser import BrowserPool
from site_audit.errors import FetchError
from site_audit.fetcher import PageFetcher
from site_audit.models import DESKTOP, MOBILE

from conftest import GOOD_PAGE, SITE_URL, run

DOM_FACTS = {
    "viewportMeta": True,
    "textElements": 40,
    "smallTextElements": 2,
    "clickablesTooClose": 0,
    "scrollWidth": 375,
    "viewportWidth": 375,
}


class FakeResponse:
    def __init__(self, status=200):
        self.status = status
        self.ok = 200 <= status < 300
        self.headers = {"content-type": "text/html"}


class FakePage:
    def __init__(self, response=None, goto_error=None):
        self.response = response or FakeResponse()
        self.goto_error = goto_error
        self.url = SITE_URL

    def set_default_navigation_timeout(self, timeout):
        self.timeout = timeout

    async def goto(self, url, wait_until=None):
        if self.goto_error is not None:
            raise self.goto_error
        return self.response

    async def wait_for_timeout(self, timeout):
        pass

    async def evaluate(self, script):
        return DOM_FACTS

    async def content(self):
        return GOOD_PAGE


class FakeContext:
    def __init__(self, page):
        self.page = page
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.contexts = []

    async def new_context(self, **kwargs):
        context = FakeContext(self.page)
        context.options = kwargs
        self.contexts.append(context)
        return context


def fake_pool(page=None, launch_error=None):
    pool = BrowserPool()
    browser = FakeBrowser(page or FakePage())

    async def ensure_browser():
        if launch_error is not None:
            raise launch_error
        return browser

    pool._ensure_browser = ensure_browser
    return pool, browser


async def rendered_fetch(config, pool, viewport=MOBILE):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text=GOOD_PAGE))
    async with httpx.AsyncClient(transport=transport) as client:
        return await PageFetcher(client, config, pool).fetch(SITE_URL, viewport, render=True)


def test_context_is_sized_and_released_on_error():
    pool, browser = fake_pool()

    async def use_and_fail():
        async with pool.context(MOBILE, "SiteAudit/test"):
            raise RuntimeError("navigation crashed")

    with pytest.raises(RuntimeError):
        run(use_and_fail())

    context = browser.contexts[0]
    assert context.closed
    assert context.options["viewport"] == {"width": 375, "height": 667}
    assert context.options["is_mobile"]
    assert context.options["user_agent"] == "SiteAudit/test"


def test_rendered_fetch_collects_dom_facts(config):
    pool, browser = fake_pool()
    snapshot = run(rendered_fetch(config, pool))

    assert snapshot.rendered
    assert snapshot.dom_facts.text_elements == 40
    assert snapshot.dom_facts.small_text_elements == 2
    assert snapshot.dom_facts.viewport_meta
    assert snapshot.status_code == 200
    assert browser.contexts[0].closed


def test_rendered_non_2xx_is_a_fetch_error(config):
    pool, browser = fake_pool(FakePage(response=FakeResponse(503)))

    with pytest.raises(FetchError) as exc:
        run(rendered_fetch(config, pool))

    assert exc.value.status_code == 503
    assert browser.contexts[0].closed


def test_navigation_failure_falls_back_to_basic_fetch(config):
    pool, browser = fake_pool(FakePage(goto_error=PlaywrightError("net::ERR_ABORTED")))
    snapshot = run(rendered_fetch(config, pool, viewport=DESKTOP))

    assert not snapshot.rendered
    assert snapshot.html == GOOD_PAGE
    assert snapshot.viewport is DESKTOP
    assert browser.contexts[0].closed


def test_launch_failure_falls_back_to_basic_fetch(config):
    pool, browser = fake_pool(launch_error=PlaywrightError("Executable doesn't exist"))
    snapshot = run(rendered_fetch(config, pool))

    assert snapshot.dom_facts is None
    assert browser.contexts == []


def test_close_without_launch():
    run(BrowserPool().close())
