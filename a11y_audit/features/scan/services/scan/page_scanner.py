import logging
from typing import Optional, Tuple

from a11y_audit.features.scan.schemas.violation import Impact, PageResult, Principle, Violation
from a11y_audit.features.scan.services.checks.registry import CheckRegistry, default_registry
from a11y_audit.features.scan.services.rendering.page_renderer import PageRenderer
from a11y_audit.features.scan.services.rendering.snapshot import Snapshot
from a11y_audit.features.scan.services.scan.scoring import calculate_passed_checks, calculate_score
from a11y_audit.platform.config import settings
from a11y_audit.platform.exceptions import BrowserLaunchError, RenderError

logger = logging.getLogger(__name__)

SCAN_ERROR_ID = "scan-error"


def error_page_result(url: str, error: Exception) -> PageResult:
    """Page result for a page that could not be scanned. Never reads as clean."""
    return PageResult(
        url=url,
        score=0,
        passed_checks=0,
        violations=[
            Violation(
                id=SCAN_ERROR_ID,
                description=f"Error scanning page: {error}",
                impact=Impact.critical,
                count=1,
                wcag_level="N/A",
                principle=Principle.not_applicable,
            )
        ],
    )


class PageScanner:
    """Renders one page and runs the check registry against it."""

    def __init__(
        self,
        renderer: Optional[PageRenderer] = None,
        registry: Optional[CheckRegistry] = None,
    ):
        self.renderer = renderer or PageRenderer()
        self.registry = registry or default_registry()

    @property
    def total_checks(self) -> int:
        return len(self.registry)

    def scan_snapshot(self, snapshot: Snapshot, url: Optional[str] = None) -> PageResult:
        run = self.registry.run(snapshot)
        violations = [v for v in run.violations if v.count > 0]
        return PageResult(
            url=url or snapshot.url,
            score=calculate_score(violations, self.total_checks),
            passed_checks=calculate_passed_checks(
                self.total_checks, len(violations), len(run.inconclusive)
            ),
            violations=violations,
            inconclusive_checks=run.inconclusive_ids,
        )

    def scan(self, url: str, timeout: Optional[float] = None) -> Tuple[PageResult, Optional[RenderError]]:
        """
        Scan a single page.

        Returns the page result and, when rendering failed, the render error
        so the caller can log it or decide to degrade. A browser that cannot
        be launched at all is not page specific and is re-raised.
        """
        logger.info(f"Scanning page: {url}")
        try:
            with self.renderer.render(url, timeout or settings.PAGE_TIMEOUT) as snapshot:
                result = self.scan_snapshot(snapshot, url)
        except BrowserLaunchError:
            raise
        except RenderError as e:
            logger.warning(f"Error scanning {url}: {e}")
            return error_page_result(url, e), e

        logger.info(f"Scanned {url}: score {result.score}, {result.issue_count} issues")
        return result, None
