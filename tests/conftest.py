# tests/conftest.py
"""
Shared fixtures: in-memory fakes standing in for Playwright pages, locators,
contexts and the browser manager, plus an in-memory SQLite store.

A fake node maps selector strings to lists of child elements, which is all
the extractor and adapters ever ask of a Page or Locator.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from techjobs.config.settings import settings
from techjobs.core.models import CanonicalJob, Source
from techjobs.store.sql import SqlJobStore


class FakeElement:
    def __init__(self, text="", attrs=None, children=None, broken=()):
        self.text = text
        self.attrs = attrs or {}
        self.children = children or {}
        self.broken = set(broken)

    def locator(self, selector):
        if selector in self.broken:
            raise RuntimeError(f"malformed selector: {selector}")
        return FakeLocator(self.children.get(selector, []))

    async def text_content(self):
        return self.text

    async def get_attribute(self, name):
        return self.attrs.get(name)


class FakeLocator:
    def __init__(self, elements):
        self.elements = list(elements)

    async def count(self):
        return len(self.elements)

    @property
    def first(self):
        return self.elements[0]

    async def all(self):
        return list(self.elements)

    async def evaluate_all(self, script):
        # Fake elements are never nested, so every match is innermost.
        return [True for _ in self.elements]


class FakePage(FakeElement):
    def __init__(self, children=None, html="<html></html>", goto_error=None):
        super().__init__(children=children)
        self.html = html
        self.goto_error = goto_error
        self.visited = []
        self.screenshots = []
        self.closed = False

    async def goto(self, url, **kwargs):
        self.visited.append(url)
        if self.goto_error is not None:
            raise self.goto_error

    async def wait_for_selector(self, selector, timeout=None):
        if not any(self.children.get(part.strip()) for part in selector.split(", ")):
            raise asyncio.TimeoutError(f"Timeout {timeout}ms waiting for {selector}")

    async def content(self):
        return self.html

    async def screenshot(self, path=None, full_page=False):
        self.screenshots.append(path)

    async def close(self):
        self.closed = True


class FakeDetailPage(FakePage):
    def __init__(self, details, failing):
        super().__init__()
        self.details = details
        self.failing = failing

    async def goto(self, url, **kwargs):
        self.visited.append(url)
        if url in self.failing:
            raise asyncio.TimeoutError(f"Timeout navigating to {url}")
        self.children = self.details.get(url, {})


class FakeContext:
    """First new_page() is the search page; later ones open job detail pages."""

    def __init__(self, search_page, details=None, failing=()):
        self.search_page = search_page
        self.details = details or {}
        self.failing = set(failing)
        self.detail_pages = []
        self.closed = False

    async def new_page(self):
        if not self.search_page.visited:
            return self.search_page
        page = FakeDetailPage(self.details, self.failing)
        self.detail_pages.append(page)
        return page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, context=None, error=None):
        self.context = context
        self.error = error
        self.closed = False

    async def new_context(self):
        if self.error is not None:
            raise self.error
        return self.context

    async def close(self):
        self.closed = True


def listing(title=None, company=None, location=None, href=None, selectors=None, **extra):
    """
    Build a fake listing element. `selectors` names which selector each field
    lives under, e.g. {"title": ".job-result-title", ...}.
    """
    selectors = selectors or {}
    children = {}
    if title is not None:
        children[selectors["title"]] = [FakeElement(text=title)]
    if company is not None:
        children[selectors["company"]] = [FakeElement(text=company)]
    if location is not None:
        children[selectors["location"]] = [FakeElement(text=location)]
    if href is not None:
        children[selectors["link"]] = [FakeElement(attrs={"href": href})]
    for selector, elements in extra.get("children", {}).items():
        children[selector] = elements
    return FakeElement(children=children, attrs=extra.get("attrs"))


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch, tmp_path):
    # No politeness delays or retries in tests, and screenshots stay in tmp.
    monkeypatch.setattr(settings, "REQUEST_DELAY", 0)
    monkeypatch.setattr(settings, "DEBUG_DIR", tmp_path / "debug")


@pytest.fixture
def store():
    s = SqlJobStore("sqlite:///:memory:")
    s.connect()
    yield s
    s.close()


@pytest.fixture
def make_job():
    def _make(url="https://example.com/jobs/1", title="Software Intern", **overrides):
        fields = dict(
            title=title,
            company="Acme",
            location="London",
            url=url,
            description="Build things",
            posted_date=datetime(2024, 5, 1, tzinfo=timezone.utc),
            source=Source.GRADCRACKER,
        )
        fields.update(overrides)
        return CanonicalJob(**fields)

    return _make
