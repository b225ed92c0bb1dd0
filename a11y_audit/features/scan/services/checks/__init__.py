from a11y_audit.features.scan.services.checks.registry import (
    Check,
    CheckRegistry,
    CheckRun,
    DEFAULT_CHECKS,
    default_registry,
)

__all__ = [
    "Check",
    "CheckRegistry",
    "CheckRun",
    "DEFAULT_CHECKS",
    "default_registry",
]
