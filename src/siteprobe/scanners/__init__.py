"""Passive checks and active probes."""

from siteprobe.scanners.headers import check_security_headers, find_missing_header
from siteprobe.scanners.links import check_insecure_links
from siteprobe.scanners.sql_injection import SQLInjectionScanner
from siteprobe.scanners.xss import XSSScanner

__all__ = [
    "SQLInjectionScanner",
    "XSSScanner",
    "check_insecure_links",
    "check_security_headers",
    "find_missing_header",
]
