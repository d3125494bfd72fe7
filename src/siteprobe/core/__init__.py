"""Core scanning engine components."""

from siteprobe.core.errors import FetchError, InputError, ProbeError, ScanError
from siteprobe.core.result import (
    Issue,
    ProbeOutcome,
    Risk,
    ScanReport,
    ScanRequest,
    ScanStatus,
    ScanType,
    sort_by_risk,
)
from siteprobe.core.scanner import ScanConfig, Scanner

__all__ = [
    "FetchError",
    "InputError",
    "Issue",
    "ProbeError",
    "ProbeOutcome",
    "Risk",
    "ScanConfig",
    "ScanError",
    "ScanReport",
    "ScanRequest",
    "ScanStatus",
    "ScanType",
    "Scanner",
    "sort_by_risk",
]
