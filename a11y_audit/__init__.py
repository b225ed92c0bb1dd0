from a11y_audit.features.scan.schemas.violation import PageResult, ScanResult, Violation
from a11y_audit.features.scan.services.fallback.controller import scan_website

__all__ = ["PageResult", "ScanResult", "Violation", "scan_website"]
