from a11y_audit.features.scan.services.fallback.controller import ScanController, ScanMode, scan_website
from a11y_audit.features.scan.services.fallback.simulated import SimulatedScanGenerator

__all__ = ["ScanController", "ScanMode", "SimulatedScanGenerator", "scan_website"]
