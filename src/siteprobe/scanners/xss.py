"""Reflected Cross-Site Scripting (XSS) prober.

Injects a fixed script payload into each query parameter, one parameter at a
time, and reports a parameter when the payload comes back verbatim in the
response body. It accepts an HTTP client implementing ``HTTPClientProtocol``
so unit tests can inject a mock client.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

import aiohttp
from pydantic import BaseModel

from siteprobe.core.errors import ProbeError
from siteprobe.core.result import Issue, ProbeOutcome, Risk
from siteprobe.http import resolve_client
from siteprobe.scanners.injection import inject_parameter, query_parameter_names

if TYPE_CHECKING:
    from siteprobe.http import HTTPClientProtocol

logger = logging.getLogger(__name__)


class XSSTestCase(BaseModel):
    url: str
    parameter: str
    test_url: str
    synthetic: bool = False
    response_code: int | None = None
    reflected: bool = False


class XSSScanner:
    """Reflected XSS prober.

    Any failure (transport error, timeout, non-2xx status) makes the whole
    probe inconclusive and it reports nothing.
    """

    PAYLOAD: ClassVar[str] = "<script>alert(1)</script>"
    SYNTHETIC_PARAMETER: ClassVar[str] = "xss_test"

    def __init__(self, client: HTTPClientProtocol | None = None, timeout: float = 5.0) -> None:
        self.client = client
        self.timeout = timeout

    async def probe(self, url: str, session: aiohttp.ClientSession | None = None) -> ProbeOutcome:
        outcome = ProbeOutcome(probe="xss")

        try:
            client = resolve_client(self.client, session)
            cases = self._build_cases(url)
            issues: list[Issue] = []
            for case in cases:
                outcome.attempts += 1
                await self._run_case(client, case)
                if case.reflected:
                    issues.append(self._issue_for(case))
        except Exception as e:
            logger.debug("XSS probe of %s inconclusive: %s", url, e)
            outcome.failures += 1
            outcome.inconclusive = True
            return outcome

        outcome.issues = issues
        return outcome

    def _build_cases(self, url: str) -> list[XSSTestCase]:
        names = query_parameter_names(url)
        if not names:
            return [
                XSSTestCase(
                    url=url,
                    parameter=self.SYNTHETIC_PARAMETER,
                    test_url=inject_parameter(url, self.SYNTHETIC_PARAMETER, self.PAYLOAD),
                    synthetic=True,
                )
            ]
        return [
            XSSTestCase(url=url, parameter=name, test_url=inject_parameter(url, name, self.PAYLOAD))
            for name in names
        ]

    async def _run_case(self, client: HTTPClientProtocol, case: XSSTestCase) -> None:
        resp = await client.get(case.test_url, timeout=aiohttp.ClientTimeout(total=self.timeout))
        case.response_code = resp.status
        if not resp.ok:
            raise ProbeError(f"Request failed with status code {resp.status}")
        case.reflected = self.PAYLOAD in resp.body
        if case.reflected:
            logger.debug(
                "Payload reflected in %s (HTTP %d)", case.parameter, case.response_code
            )

    @staticmethod
    def _issue_for(case: XSSTestCase) -> Issue:
        if case.synthetic:
            return Issue(message="Reflected XSS vulnerability detected.", risk=Risk.HIGH)
        return Issue(
            message=f"Reflected XSS detected in parameter: {case.parameter}",
            risk=Risk.HIGH,
        )
