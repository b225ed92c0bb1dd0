from a11y_audit.features.scan.services.rendering.page_renderer import PageRenderer
from a11y_audit.features.scan.services.rendering.snapshot import Snapshot

__all__ = ["PageRenderer", "Snapshot"]
