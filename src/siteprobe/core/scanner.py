"""Main scan orchestration engine."""

import logging
from urllib.parse import urlparse

import aiohttp
from pydantic import BaseModel, Field

from siteprobe import __version__
from siteprobe.core.errors import FetchError, InputError
from siteprobe.core.result import Issue, ProbeOutcome, Risk, ScanReport, ScanRequest, ScanType
from siteprobe.http import AiohttpAdapter, HTTPClientProtocol, SimpleResponse
from siteprobe.scanners.headers import check_security_headers, normalize_headers
from siteprobe.scanners.links import check_insecure_links
from siteprobe.scanners.sql_injection import SQLInjectionScanner
from siteprobe.scanners.xss import XSSScanner

logger = logging.getLogger(__name__)


class ScanConfig(BaseModel):
    """Configuration for a security scan."""

    fetch_timeout: float = Field(default=10.0, gt=0, le=120)
    probe_timeout: float = Field(default=5.0, gt=0, le=120)
    insecure_domains: list[str] = Field(default_factory=lambda: ["testphp.vulnweb.com"])
    user_agent: str = f"SiteProbe/{__version__}"


class Scanner:
    """Runs the fixed checklist against one URL per ``scan`` call.

    Use as an async context manager. When no client is injected, an
    aiohttp session is opened on entry and closed on exit.
    """

    def __init__(
        self, config: ScanConfig | None = None, client: HTTPClientProtocol | None = None
    ) -> None:
        self.config = config or ScanConfig()
        self._client = client
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "Scanner":
        if self._client is None:
            self._session = aiohttp.ClientSession(headers={"User-Agent": self.config.user_agent})
            self._client = AiohttpAdapter(self._session)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._session:
            await self._session.close()
            self._session = None
            self._client = None

    async def scan(self, request: ScanRequest) -> ScanReport:
        """Execute the checklist for one scan request.

        Returns:
            ScanReport with every issue found, in check order

        Raises:
            InputError: If the request carries no URL
            FetchError: If the target page cannot be fetched
            RuntimeError: If scanner not initialized with context manager
        """
        if not request.url:
            raise InputError("URL is required.")
        if self._client is None:
            raise RuntimeError("Scanner must be used as async context manager")

        url = request.url
        logger.info("Starting %s scan for %s", request.scan_type.value, url)

        response = await self._fetch(url)
        headers = normalize_headers(response.headers)

        issues: list[Issue] = []
        issues.extend(self._check_transport(url))
        issues.extend(check_security_headers(headers))
        issues.extend(check_insecure_links(response.body, url))

        probes: list[ProbeOutcome] = []
        if request.scan_type == ScanType.FULL:
            probes.append(
                await XSSScanner(client=self._client, timeout=self.config.probe_timeout).probe(url)
            )
            probes.append(
                await SQLInjectionScanner(
                    client=self._client, timeout=self.config.probe_timeout
                ).probe(url)
            )
            for outcome in probes:
                if outcome.inconclusive:
                    logger.info("%s probe was inconclusive for %s", outcome.probe, url)
                issues.extend(outcome.issues)

        report = ScanReport.from_issues(url, request.scan_type, issues, probes)
        logger.info("Scan of %s completed. Found %d issues", url, len(issues))
        return report

    async def _fetch(self, url: str) -> SimpleResponse:
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            raise FetchError(f"Invalid URL: {url}")

        try:
            response = await self._client.get(
                url, timeout=aiohttp.ClientTimeout(total=self.config.fetch_timeout)
            )
        except Exception as e:
            detail = str(e) or type(e).__name__
            logger.warning("Failed to fetch %s: %s", url, detail)
            raise FetchError(detail) from e

        if not response.ok:
            logger.warning("Fetching %s returned status %d", url, response.status)
            raise FetchError(f"Request failed with status code {response.status}")
        return response

    def _check_transport(self, url: str) -> list[Issue]:
        """Protocol and host blacklist checks."""
        issues: list[Issue] = []
        if url.startswith("http://"):
            issues.append(Issue(message="Using insecure HTTP protocol.", risk=Risk.HIGH))

        hostname = (urlparse(url).hostname or "").lower()
        if hostname in {domain.lower() for domain in self.config.insecure_domains}:
            issues.append(Issue(message="Domain is listed as insecure.", risk=Risk.HIGH))
        return issues
