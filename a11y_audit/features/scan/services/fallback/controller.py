import logging
from enum import Enum
from typing import Optional

from a11y_audit.features.scan.schemas.violation import ScanResult
from a11y_audit.features.scan.services.fallback.simulated import SimulatedScanGenerator
from a11y_audit.features.scan.services.orchestration.crawl import CrawlOrchestrator, CrawlOutcome
from a11y_audit.features.scan.services.scan.page_scanner import PageScanner
from a11y_audit.features.scan.services.utils.aggregator import aggregate, single_page_result
from a11y_audit.platform.exceptions import BrowserLaunchError

logger = logging.getLogger(__name__)


class ScanMode(str, Enum):
    primary = "primary"
    degraded = "degraded"


class ScanController:
    """
    Runs the real scan pipeline and falls back to simulated results.

    Every call starts in ``primary`` mode. It switches to ``degraded`` when the
    browser cannot be launched, when every attempted page failed to render,
    when every check was inconclusive on every rendered page, or on any
    unexpected error. ``scan`` never raises.
    """

    def __init__(
        self,
        crawler: Optional[CrawlOrchestrator] = None,
        simulator: Optional[SimulatedScanGenerator] = None,
    ):
        self.crawler = crawler or CrawlOrchestrator()
        self.simulator = simulator or SimulatedScanGenerator(self.crawler.scanner.total_checks)

    def scan(self, url: str, is_multi_page: bool = False, max_pages: int = 1) -> ScanResult:
        multi_page = is_multi_page and max_pages > 1
        mode = ScanMode.primary
        logger.info(f"Running scanner on URL: {url} (Multi-page: {multi_page}, Pages: {max_pages})")

        try:
            outcome = self.crawler.crawl(url, max_pages if multi_page else 1)
            reason = self._degradation_reason(outcome)
            if reason is None:
                logger.info(f"Scan of {url} finished in {mode.value} mode")
                if multi_page:
                    return aggregate(outcome.page_results)
                return single_page_result(outcome.page_results[0])
        except BrowserLaunchError as e:
            reason = f"browser unavailable: {e}"
        except Exception as e:
            logger.exception(f"Scan pipeline failed for {url}")
            reason = f"unexpected error: {e}"

        mode = ScanMode.degraded
        logger.warning(f"Falling back to simulated scanner for {url} ({reason})")
        result = self.simulator.scan_result(url, multi_page, max_pages)
        logger.info(f"Scan of {url} finished in {mode.value} mode")
        return result

    def _degradation_reason(self, outcome: CrawlOutcome) -> Optional[str]:
        if not outcome.page_results:
            return "no pages were scanned"
        if outcome.all_failed:
            return f"all {len(outcome.page_results)} pages failed to render"

        total_checks = self.crawler.scanner.total_checks
        rendered = [page for page in outcome.page_results if page.url not in outcome.errors]
        if rendered and all(len(page.inconclusive_checks) >= total_checks for page in rendered):
            return "every check was inconclusive"
        return None


def scan_website(url: str, is_multi_page: bool = False, max_pages: int = 1) -> ScanResult:
    """
    Audit ``url`` and return a ScanResult.

    The URL must already be validated as a public http(s) address. Rendering
    problems never raise; they show up as error pages or a degraded result.
    """
    return ScanController().scan(url, is_multi_page=is_multi_page, max_pages=max_pages)
