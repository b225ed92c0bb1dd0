"""
Test configuration and fixtures for the accessibility scan engine.

No test here starts a real browser: the renderer is replaced by
``FakeRenderer``, which serves static markup as snapshots.
"""

import os
import threading
from contextlib import contextmanager
from typing import Dict, List, Optional, Tuple, Union

os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from a11y_audit.features.scan.services.rendering.snapshot import Snapshot


CLEAN_PAGE = """
<html lang="en">
  <head><title>Home</title></head>
  <body>
    <h1>Welcome</h1>
    <p>Plain text content.</p>
  </body>
</html>
"""


def page_with_links(hrefs: List[str], title: str = "Home") -> str:
    anchors = "\n".join(f'<a href="{href}">Link {i}</a>' for i, href in enumerate(hrefs))
    return f"""
<html lang="en">
  <head><title>{title}</title></head>
  <body>
    <h1>{title}</h1>
    <nav>{anchors}</nav>
  </body>
</html>
"""


class FakeRenderer:
    """
    Stand-in for PageRenderer.

    ``pages`` maps a URL to markup, or to an exception raised on render.
    Unknown URLs get ``default``.
    ``redirects`` maps a requested URL to the URL the snapshot reports.
    """

    def __init__(
        self,
        pages: Optional[Dict[str, Union[str, Exception]]] = None,
        default: Union[str, Exception] = CLEAN_PAGE,
        styles: Optional[Dict[str, Dict[str, str]]] = None,
        redirects: Optional[Dict[str, str]] = None,
    ):
        self.pages = pages or {}
        self.redirects = redirects or {}
        self.default = default
        self.styles = styles
        self.calls: List[Tuple[str, Optional[float]]] = []
        self._lock = threading.Lock()

    @property
    def urls(self) -> List[str]:
        return [url for url, _ in self.calls]

    @contextmanager
    def render(self, url: str, timeout: Optional[float] = None):
        with self._lock:
            self.calls.append((url, timeout))
        page = self.pages.get(url, self.default)
        if isinstance(page, Exception):
            raise page
        yield Snapshot(page, self.redirects.get(url, url), styles=self.styles)


class SlowRenderer(FakeRenderer):
    """FakeRenderer that blocks renders of ``slow_url`` until ``release`` is set."""

    def __init__(self, slow_url: str, **kwargs):
        super().__init__(**kwargs)
        self.slow_url = slow_url
        self.release = threading.Event()

    @contextmanager
    def render(self, url: str, timeout: Optional[float] = None):
        if url == self.slow_url:
            self.release.wait(5)
        with super().render(url, timeout) as snapshot:
            yield snapshot


def make_snapshot(body: str, styles=None, url: str = "https://example.com/", head: str = "<title>Test</title>", lang: str = ' lang="en"') -> Snapshot:
    html = f"<html{lang}><head>{head}</head><body>{body}</body></html>"
    return Snapshot.from_html(html, url, styles=styles)


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def renderer_factory():
    return FakeRenderer


@pytest.fixture
def snapshot_factory():
    return make_snapshot


@pytest.fixture
def links_page():
    return page_with_links


@pytest.fixture
def clean_page():
    return CLEAN_PAGE


@pytest.fixture
def slow_renderer_factory():
    return SlowRenderer
