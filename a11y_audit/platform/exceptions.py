"""
Error taxonomy for the scan engine.

RenderTimeout / RenderFailure come out of the page renderer. They are
recovered into a synthetic error page by the page scanner and, when they are
systemic, into a degraded result by the scan controller. Nothing here ever
reaches the caller of ``scan_website``.
"""
from typing import Optional


class ScanEngineError(Exception):
    """Base class for every error raised inside the scan engine."""


class RenderError(ScanEngineError):
    """A page could not be rendered into a snapshot."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"{message} ({url})")


class RenderTimeout(RenderError):
    """Navigation or readiness wait exceeded its deadline."""


class RenderFailure(RenderError):
    """Browser process or navigation error other than a timeout."""


class BrowserLaunchError(RenderFailure):
    """The browser process could not be started at all."""


class CheckExecutionError(ScanEngineError):
    """A check could not complete against a snapshot; the check is inconclusive."""

    def __init__(self, check_id: str, cause: Optional[BaseException] = None):
        self.check_id = check_id
        self.cause = cause
        super().__init__(f"Check '{check_id}' failed: {cause}")


class CrawlBudgetExhausted(ScanEngineError):
    """
    Informational notice: the crawl stopped at max_pages with links left over.

    Never raised; the crawl orchestrator attaches it to its outcome and logs it.
    """

    def __init__(self, max_pages: int, discovered: int):
        self.max_pages = max_pages
        self.discovered = discovered
        super().__init__(
            f"Crawl budget of {max_pages} pages reached; {discovered} links were discovered"
        )
