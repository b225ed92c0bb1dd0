import math
from typing import Iterable

from a11y_audit.features.scan.schemas.violation import Violation


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_score(violations: Iterable[Violation], total_checks: int) -> int:
    """
    Severity-weighted page score in [0, 100].

    Each violation costs ``count * weight * (100 / (total_checks * 10))``
    where weight is 4/3/2/1 for critical/serious/moderate/minor.
    """
    if total_checks <= 0:
        raise ValueError("total_checks must be positive")

    penalty_unit = 100 / (total_checks * 10)
    score = 100.0
    for violation in violations:
        score -= violation.count * violation.impact.weight * penalty_unit

    return max(0, min(100, round_half_up(score)))


def calculate_passed_checks(total_checks: int, failed_checks: int, inconclusive_checks: int = 0) -> int:
    return max(0, total_checks - failed_checks - inconclusive_checks)
