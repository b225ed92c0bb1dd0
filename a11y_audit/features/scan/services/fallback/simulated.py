"""
Heuristic results for when no real browser run is possible.

Output is deterministic per URL and conspicuously marked: ids start with
``simulated-``, descriptions with ``[Simulated]`` and the ScanResult has
``degraded=True``.
"""
import hashlib
import random
from typing import List
from urllib.parse import urljoin

from a11y_audit.features.scan.schemas.violation import Impact, PageResult, Principle, ScanResult, Violation
from a11y_audit.features.scan.services.scan.scoring import calculate_passed_checks, calculate_score
from a11y_audit.features.scan.services.utils.aggregator import aggregate, single_page_result

SIMULATED_PREFIX = "simulated-"

# (id, description, impact, wcag level, principle, count range)
CATALOGUE = (
    ("image-alt", "Images Without Alt Text", Impact.critical, "1.1.1 (Level A)", Principle.perceivable, (1, 4)),
    ("label", "Form Elements Do Not Have Labels", Impact.critical, "3.3.2 (Level A)", Principle.understandable, (1, 3)),
    ("heading-order", "Improper Heading Structure", Impact.moderate, "1.3.1 (Level A)", Principle.perceivable, (1, 3)),
    ("color-contrast", "Insufficient Color Contrast", Impact.serious, "1.4.3 (Level AA)", Principle.perceivable, (2, 6)),
    ("keyboard", "Elements Not Keyboard Accessible", Impact.serious, "2.1.1 (Level A)", Principle.operable, (1, 3)),
    ("html-lang", "Missing Document Language", Impact.serious, "3.1.1 (Level A)", Principle.understandable, (1, 1)),
    ("document-title", "Missing Document Title", Impact.serious, "2.4.2 (Level A)", Principle.operable, (1, 1)),
    ("aria-hidden-focus", "ARIA Hidden Element Contains Focusable Element", Impact.serious, "4.1.2 (Level A)", Principle.robust, (1, 2)),
)

SIMULATED_PATHS = (
    "/about", "/contact", "/services", "/products", "/blog",
    "/faq", "/pricing", "/team", "/privacy", "/terms",
)

RECOMMENDATION = (
    "Estimated without rendering the page. Re-run the scan once the site is "
    "reachable to confirm this finding."
)


def _seed(url: str) -> int:
    return int(hashlib.sha256(url.encode("utf-8")).hexdigest()[:16], 16)


class SimulatedScanGenerator:
    def __init__(self, total_checks: int = len(CATALOGUE)):
        self.total_checks = total_checks

    def page_result(self, url: str) -> PageResult:
        rng = random.Random(_seed(url))
        picked = sorted(rng.sample(range(len(CATALOGUE)), k=rng.randint(3, 5)))

        violations: List[Violation] = []
        for index in picked:
            check_id, description, impact, wcag_level, principle, (low, high) = CATALOGUE[index]
            violations.append(Violation(
                id=f"{SIMULATED_PREFIX}{check_id}",
                description=f"[Simulated] {description}",
                impact=impact,
                count=rng.randint(low, high),
                wcag_level=wcag_level,
                principle=principle,
                recommendation=RECOMMENDATION,
            ))

        return PageResult(
            url=url,
            score=calculate_score(violations, self.total_checks),
            passed_checks=calculate_passed_checks(self.total_checks, len(violations)),
            violations=violations,
        )

    def scan_result(self, url: str, is_multi_page: bool = False, max_pages: int = 1) -> ScanResult:
        if not is_multi_page or max_pages <= 1:
            return single_page_result(self.page_result(url), degraded=True)

        pages = [url] + [urljoin(url, path) for path in SIMULATED_PATHS[:max_pages - 1]]
        return aggregate([self.page_result(page) for page in pages], degraded=True)
