"""
Tests for the bounded multi-page crawl.
"""
import time

from a11y_audit.features.scan.services.orchestration.crawl import CrawlOrchestrator
from a11y_audit.features.scan.services.scan.page_scanner import PageScanner
from a11y_audit.platform.config import settings
from a11y_audit.platform.exceptions import BrowserLaunchError, RenderFailure, RenderTimeout

BASE = "https://example.com/"

TEN_LINKS = [f"/page-{i}" for i in range(10)]


def crawler_for(renderer, **kwargs) -> CrawlOrchestrator:
    return CrawlOrchestrator(scanner=PageScanner(renderer=renderer), **kwargs)


class TestCrawl:
    def test_respects_page_budget(self, renderer_factory, links_page):
        renderer = renderer_factory(pages={BASE: links_page(TEN_LINKS)})

        outcome = crawler_for(renderer).crawl(BASE, max_pages=5)

        assert outcome.pages_scanned == [BASE] + [f"https://example.com/page-{i}" for i in range(4)]
        assert len(renderer.calls) == 5
        assert outcome.errors == {}
        assert outcome.budget_exhausted is not None
        assert outcome.budget_exhausted.discovered == 10

    def test_base_page_rendered_once_with_crawl_timeout(self, renderer_factory, links_page):
        renderer = renderer_factory(pages={BASE: links_page(["/a"])})

        crawler_for(renderer).crawl(BASE, max_pages=3)

        assert renderer.calls[0] == (BASE, settings.CRAWL_PAGE_TIMEOUT)
        assert renderer.urls.count(BASE) == 1
        assert ("https://example.com/a", settings.PAGE_TIMEOUT) in renderer.calls

    def test_fewer_links_than_budget(self, renderer_factory, links_page):
        renderer = renderer_factory(pages={BASE: links_page(["/a", "/b"])})

        outcome = crawler_for(renderer).crawl(BASE, max_pages=5)

        assert len(outcome.page_results) == 3
        assert outcome.budget_exhausted is None

    def test_links_to_base_page_are_skipped(self, renderer_factory, links_page):
        renderer = renderer_factory(pages={BASE: links_page(["/", "#top", "https://example.com", "/a"])})

        outcome = crawler_for(renderer).crawl(BASE, max_pages=5)

        assert outcome.pages_scanned == [BASE, "https://example.com/a"]

    def test_failing_page_does_not_stop_crawl(self, renderer_factory, links_page):
        failure = RenderFailure("https://example.com/page-1", "net::ERR_CONNECTION_RESET")
        renderer = renderer_factory(pages={
            BASE: links_page(TEN_LINKS[:3]),
            "https://example.com/page-1": failure,
        })

        outcome = crawler_for(renderer).crawl(BASE, max_pages=4)

        assert len(outcome.page_results) == 4
        assert list(outcome.errors) == ["https://example.com/page-1"]
        failed = outcome.page_results[2]
        assert failed.score == 0
        assert failed.violations[0].id == "scan-error"
        assert outcome.all_failed is False

    def test_failing_base_page(self, renderer_factory):
        renderer = renderer_factory(pages={BASE: RenderTimeout(BASE, "Page load timeout after 30 seconds")})

        outcome = crawler_for(renderer).crawl(BASE, max_pages=5)

        assert outcome.pages_scanned == [BASE]
        assert outcome.all_failed is True

    def test_single_page_delegates_to_scanner(self, renderer_factory, links_page):
        renderer = renderer_factory(pages={BASE: links_page(TEN_LINKS)})

        outcome = crawler_for(renderer).crawl(BASE, max_pages=1)

        assert renderer.calls == [(BASE, settings.PAGE_TIMEOUT)]
        assert outcome.pages_scanned == [BASE]

    def test_launch_error_in_worker_becomes_error_page(self, renderer_factory, links_page):
        renderer = renderer_factory(pages={
            BASE: links_page(["/a", "/b"]),
            "https://example.com/a": BrowserLaunchError("https://example.com/a", "chrome crashed"),
        })

        outcome = crawler_for(renderer).crawl(BASE, max_pages=3)

        assert len(outcome.page_results) == 3
        assert "https://example.com/a" in outcome.errors

    def test_crawl_deadline(self, slow_renderer_factory, links_page):
        slow_url = "https://example.com/page-1"
        renderer = slow_renderer_factory(slow_url, pages={BASE: links_page(TEN_LINKS[:3])})

        started = time.monotonic()
        try:
            outcome = crawler_for(renderer, max_workers=3, deadline=0.3).crawl(BASE, max_pages=4)
        finally:
            renderer.release.set()
        elapsed = time.monotonic() - started

        assert elapsed < 3
        assert len(outcome.page_results) == 4
        assert isinstance(outcome.errors[slow_url], RenderTimeout)
        assert outcome.page_results[2].url == slow_url
        assert outcome.page_results[2].score == 0

    def test_links_followed_after_cross_host_redirect(self, renderer_factory, links_page):
        requested = "http://example.com/"
        renderer = renderer_factory(
            pages={requested: links_page(["/", "/a", "/b", "https://www.example.com/c"])},
            redirects={requested: "https://www.example.com/"},
        )

        outcome = crawler_for(renderer).crawl(requested, max_pages=4)

        assert outcome.pages_scanned == [
            requested,
            "https://www.example.com/a",
            "https://www.example.com/b",
            "https://www.example.com/c",
        ]
        assert outcome.errors == {}

    def test_page_timeouts_fit_inside_crawl_deadline(self, renderer_factory, links_page):
        renderer = renderer_factory(pages={BASE: links_page(["/a", "/b"])})

        crawler_for(renderer, deadline=2).crawl(BASE, max_pages=3)

        assert len(renderer.calls) == 3
        for _url, timeout in renderer.calls:
            assert 0 < timeout <= 2

    def test_page_not_started_before_deadline_is_not_rendered(self, renderer_factory):
        renderer = renderer_factory()
        crawler = crawler_for(renderer)

        result, error = crawler._scan_within_deadline("https://example.com/late", time.monotonic() - 1)

        assert renderer.calls == []
        assert isinstance(error, RenderTimeout)
        assert result.score == 0
        assert result.violations[0].id == "scan-error"
