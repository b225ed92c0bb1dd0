from a11y_audit.features.scan.schemas.violation import (
    Impact,
    Principle,
    Violation,
    PageResult,
    ScanResult,
)

__all__ = [
    "Impact",
    "Principle",
    "Violation",
    "PageResult",
    "ScanResult",
]
