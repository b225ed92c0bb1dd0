import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

from a11y_audit.features.scan.schemas.violation import PageResult
from a11y_audit.features.scan.services.discovery.link_discovery import discover_links, page_key
from a11y_audit.features.scan.services.scan.page_scanner import PageScanner, error_page_result
from a11y_audit.platform.config import settings
from a11y_audit.platform.exceptions import (
    BrowserLaunchError,
    CrawlBudgetExhausted,
    RenderError,
    RenderTimeout,
)

logger = logging.getLogger(__name__)


@dataclass
class CrawlOutcome:
    page_results: List[PageResult] = field(default_factory=list)
    errors: Dict[str, RenderError] = field(default_factory=dict)
    budget_exhausted: Optional[CrawlBudgetExhausted] = None

    @property
    def pages_scanned(self) -> List[str]:
        return [page.url for page in self.page_results]

    @property
    def all_failed(self) -> bool:
        return bool(self.page_results) and len(self.errors) == len(self.page_results)


class CrawlOrchestrator:
    """
    Scans a base URL plus up to ``max_pages - 1`` same-host pages linked from it.

    Pages beyond the base are scanned on a small thread pool; each worker
    renders in its own browser. Results keep discovery order whatever order
    the workers finish in.
    """

    def __init__(
        self,
        scanner: Optional[PageScanner] = None,
        max_workers: Optional[int] = None,
        deadline: Optional[float] = None,
    ):
        self.scanner = scanner or PageScanner()
        self.max_workers = max(1, max_workers or settings.MAX_WORKERS)
        self.deadline = deadline or settings.CRAWL_DEADLINE

    def crawl(self, base_url: str, max_pages: int) -> CrawlOutcome:
        outcome = CrawlOutcome()

        if max_pages <= 1:
            result, error = self.scanner.scan(base_url)
            self._record(outcome, base_url, result, error)
            return outcome

        crawl_deadline = time.monotonic() + self.deadline
        links, final_url = self._scan_base_page(base_url, outcome, crawl_deadline)

        base_keys = {page_key(base_url), page_key(final_url)}
        candidates = [link for link in links if page_key(link) not in base_keys]
        budget = max_pages - 1
        if len(candidates) > budget:
            outcome.budget_exhausted = CrawlBudgetExhausted(max_pages, len(candidates))
            logger.info(str(outcome.budget_exhausted))

        pages_to_scan = candidates[:budget]
        logger.info(f"Found {len(candidates)} links, scanning {len(pages_to_scan) + 1} pages from {base_url}")
        self._scan_pages(pages_to_scan, outcome, crawl_deadline)
        return outcome

    def _scan_base_page(
        self, base_url: str, outcome: CrawlOutcome, crawl_deadline: float
    ) -> Tuple[List[str], str]:
        """
        Scan the base page and discover links from the same render.

        Links are matched against the host the page ended up on after
        redirects. Returns the links and that final URL.
        """
        logger.info(f"Scanning page: {base_url}")
        timeout = min(settings.CRAWL_PAGE_TIMEOUT, crawl_deadline - time.monotonic())
        try:
            with self.scanner.renderer.render(base_url, timeout) as snapshot:
                result = self.scanner.scan_snapshot(snapshot, base_url)
                final_url = snapshot.url or base_url
                links = discover_links(snapshot, urlparse(final_url).hostname or "")
        except BrowserLaunchError:
            raise
        except RenderError as e:
            logger.warning(f"Error scanning base page {base_url}: {e}")
            self._record(outcome, base_url, error_page_result(base_url, e), e)
            return [], base_url

        if final_url != base_url:
            logger.info(f"{base_url} redirected to {final_url}")
        self._record(outcome, base_url, result, None)
        return links, final_url

    def _scan_pages(self, urls: List[str], outcome: CrawlOutcome, crawl_deadline: float) -> None:
        if not urls:
            return

        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(urls)))
        try:
            futures = {url: executor.submit(self._scan_within_deadline, url, crawl_deadline) for url in urls}
            remaining = max(0.0, crawl_deadline - time.monotonic())
            wait(list(futures.values()), timeout=remaining)

            for url in urls:
                future = futures[url]
                if not future.done():
                    future.cancel()
                    error = RenderTimeout(url, "Crawl deadline exceeded before page finished")
                    logger.warning(str(error))
                    self._record(outcome, url, error_page_result(url, error), error)
                    continue

                try:
                    result, error = future.result()
                except BrowserLaunchError as e:
                    logger.error(f"Browser unavailable while scanning {url}: {e}")
                    result, error = error_page_result(url, e), e
                self._record(outcome, url, result, error)
        finally:
            # Running renders time out by the crawl deadline at the latest and
            # quit their browser on exit; queued ones are dropped.
            executor.shutdown(wait=False, cancel_futures=True)

    def _scan_within_deadline(self, url: str, crawl_deadline: float) -> Tuple[PageResult, Optional[RenderError]]:
        """Scan one page with a timeout that ends no later than the crawl deadline."""
        remaining = crawl_deadline - time.monotonic()
        if remaining <= 0:
            error = RenderTimeout(url, "Crawl deadline exceeded before page started")
            return error_page_result(url, error), error
        return self.scanner.scan(url, min(settings.PAGE_TIMEOUT, remaining))

    @staticmethod
    def _record(outcome: CrawlOutcome, url: str, result: PageResult, error: Optional[RenderError]) -> None:
        outcome.page_results.append(result)
        if error is not None:
            outcome.errors[url] = error

