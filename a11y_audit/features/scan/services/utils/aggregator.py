from typing import Dict, List, Sequence

from a11y_audit.features.scan.schemas.violation import PageResult, ScanResult, Violation
from a11y_audit.features.scan.services.scan.scoring import round_half_up


def merge_violations(page_results: Sequence[PageResult]) -> List[Violation]:
    """
    Merge violations across pages by id.

    The first occurrence of an id is kept (copied) and later occurrences only
    add their count. Order is first appearance.
    """
    merged: Dict[str, Violation] = {}
    for page in page_results:
        for violation in page.violations:
            existing = merged.get(violation.id)
            if existing is None:
                merged[violation.id] = violation.model_copy()
            else:
                merged[violation.id] = existing.model_copy(
                    update={"count": existing.count + violation.count}
                )
    return list(merged.values())


def aggregate(page_results: Sequence[PageResult], degraded: bool = False) -> ScanResult:
    """
    Combine per-page results into one site-level ScanResult.

    The overall score is the rounded mean of page scores; passed checks are
    summed across pages.
    """
    if not page_results:
        raise ValueError("Cannot aggregate an empty list of page results")

    page_results = list(page_results)
    return ScanResult(
        score=round_half_up(sum(page.score for page in page_results) / len(page_results)),
        passed_checks=sum(page.passed_checks for page in page_results),
        violations=merge_violations(page_results),
        is_multi_page=len(page_results) > 1,
        pages_scanned=[page.url for page in page_results],
        page_results=page_results,
        degraded=degraded,
    )


def single_page_result(page: PageResult, degraded: bool = False) -> ScanResult:
    return ScanResult(
        score=page.score,
        passed_checks=page.passed_checks,
        violations=list(page.violations),
        is_multi_page=False,
        pages_scanned=[page.url],
        page_results=[page],
        degraded=degraded,
    )
