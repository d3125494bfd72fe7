"""SiteProbe - single-page web security probe.

Fetches one URL and reports missing security headers, insecure links and,
on a full scan, reflected XSS and SQL injection indicators.
"""

__version__ = "0.1.0"
__author__ = "SiteProbe Team"

from siteprobe.core.result import Issue, Risk, ScanReport, ScanRequest
from siteprobe.core.scanner import ScanConfig, Scanner

__all__ = ["Issue", "Risk", "ScanConfig", "ScanReport", "ScanRequest", "Scanner"]
