import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence

from a11y_audit.features.scan.schemas.violation import Violation
from a11y_audit.features.scan.services.checks import rules
from a11y_audit.features.scan.services.rendering.snapshot import Snapshot
from a11y_audit.platform.exceptions import CheckExecutionError

logger = logging.getLogger(__name__)

CheckFunction = Callable[[Snapshot], Optional[Violation]]


@dataclass(frozen=True)
class Check:
    id: str
    name: str
    run: CheckFunction


@dataclass
class CheckRun:
    """Outcome of running every registered check against one snapshot."""
    violations: List[Violation] = field(default_factory=list)
    inconclusive: List[CheckExecutionError] = field(default_factory=list)

    @property
    def inconclusive_ids(self) -> List[str]:
        return [error.check_id for error in self.inconclusive]


class CheckRegistry:
    """
    Ordered, fixed set of checks.

    The order only makes iteration deterministic; it has no effect on the score.
    """

    def __init__(self, checks: Sequence[Check]):
        ids = [check.id for check in checks]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate check ids in registry: {ids}")
        self._checks = tuple(checks)

    def __len__(self) -> int:
        return len(self._checks)

    def __iter__(self) -> Iterator[Check]:
        return iter(self._checks)

    @property
    def ids(self) -> List[str]:
        return [check.id for check in self._checks]

    def run(self, snapshot: Snapshot) -> CheckRun:
        """
        Run every check in order.

        A check that raises is recorded as inconclusive and does not stop the
        others. Violations with a zero count are dropped.
        """
        result = CheckRun()
        for check in self._checks:
            try:
                violation = check.run(snapshot)
            except Exception as e:
                error = CheckExecutionError(check.id, e)
                logger.warning(f"{error} on {snapshot.url}")
                result.inconclusive.append(error)
                continue

            if violation is not None and violation.count > 0:
                result.violations.append(violation)
        return result


DEFAULT_CHECKS = (
    Check("image-alt", "Images without alternative text", rules.check_image_alt),
    Check("label", "Form controls without labels", rules.check_form_labels),
    Check("heading-order", "Heading order", rules.check_heading_order),
    Check("color-contrast", "Color contrast", rules.check_color_contrast),
    Check("keyboard", "Keyboard reachability", rules.check_keyboard_access),
    Check("html-lang", "Document language", rules.check_document_language),
    Check("document-title", "Document title", rules.check_document_title),
    Check("aria-hidden-focus", "Focusable content hidden from assistive technology", rules.check_aria_hidden_focus),
)


def default_registry() -> CheckRegistry:
    return CheckRegistry(DEFAULT_CHECKS)
