"""Error-based SQL injection prober with Pydantic validation."""

import logging
from typing import ClassVar

import aiohttp
from pydantic import BaseModel, Field, field_validator

from siteprobe.core.errors import ProbeError
from siteprobe.core.result import Issue, ProbeOutcome, Risk
from siteprobe.http import HTTPClientProtocol, resolve_client
from siteprobe.scanners.injection import inject_parameter, query_parameter_names

logger = logging.getLogger(__name__)


class SQLInjectionPayload(BaseModel):
    """Pydantic model for SQL injection test payloads."""

    payload: str = Field(..., min_length=1, description="SQL injection test string")
    description: str = Field(..., description="What this payload tests for")

    @field_validator("payload")
    @classmethod
    def validate_payload(cls, v: str) -> str:
        """Ensure payload is not empty or whitespace only."""
        if not v.strip():
            raise ValueError("Payload cannot be empty or whitespace")
        return v


class SQLInjectionTestCase(BaseModel):
    """Pydantic model for a single parameter/payload request."""

    url: str
    parameter: str = Field(..., min_length=1)
    test_payload: SQLInjectionPayload
    test_url: str
    response_code: int | None = None
    matched_errors: list[str] = Field(default_factory=list)


class SQLInjectionScanner:
    """Prober for SQL injection via database error messages in the response."""

    PAYLOADS: ClassVar[list[SQLInjectionPayload]] = [
        SQLInjectionPayload(payload="'", description="Unbalanced single quote"),
        SQLInjectionPayload(payload='"', description="Unbalanced double quote"),
        SQLInjectionPayload(payload="' OR '1'='1", description="Single-quoted tautology"),
        SQLInjectionPayload(payload='" OR "1"="1', description="Double-quoted tautology"),
    ]

    # Matched against the lowercased response body.
    ERROR_SIGNATURES: ClassVar[list[str]] = [
        "you have an error in your sql syntax",
        "warning: mysql",
        "unclosed quotation mark after the character string",
        "quoted string not properly terminated",
        "syntax error",
    ]

    SYNTHETIC_PARAMETER: ClassVar[str] = "sqli_test"

    def __init__(self, client: HTTPClientProtocol | None = None, timeout: float = 5.0) -> None:
        self.client = client
        self.timeout = timeout

    async def probe(self, url: str, session: aiohttp.ClientSession | None = None) -> ProbeOutcome:
        """Test every parameter of ``url`` with every payload.

        Args:
            url: Target URL; its query string provides the parameters
            session: aiohttp session used when no client was injected

        Returns:
            ProbeOutcome with one issue per matched error signature
        """
        outcome = ProbeOutcome(probe="sql_injection")

        try:
            client = resolve_client(self.client, session)
        except ProbeError as e:
            logger.debug("SQL injection probe of %s inconclusive: %s", url, e)
            outcome.failures += 1
            outcome.inconclusive = True
            return outcome

        parameters = query_parameter_names(url) or [self.SYNTHETIC_PARAMETER]

        for parameter in parameters:
            for payload_model in self.PAYLOADS:
                test_case = SQLInjectionTestCase(
                    url=url,
                    parameter=parameter,
                    test_payload=payload_model,
                    test_url=inject_parameter(url, parameter, payload_model.payload),
                )
                outcome.attempts += 1
                try:
                    await self._test_parameter(client, test_case)
                except Exception as e:
                    outcome.failures += 1
                    logger.debug(
                        "SQL injection request failed for %s with %r: %s",
                        parameter,
                        payload_model.payload,
                        e,
                    )
                    continue

                outcome.issues.extend(self._issue_for(test_case) for _ in test_case.matched_errors)

        outcome.inconclusive = outcome.attempts > 0 and outcome.failures == outcome.attempts
        return outcome

    async def _test_parameter(
        self, client: HTTPClientProtocol, test_case: SQLInjectionTestCase
    ) -> None:
        """Send one injected request and record matching error signatures.

        Any status code is accepted; error pages are exactly what this probe
        looks for.
        """
        resp = await client.get(
            test_case.test_url, timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        test_case.response_code = resp.status

        body_lower = resp.body.lower()
        test_case.matched_errors = [sig for sig in self.ERROR_SIGNATURES if sig in body_lower]
        if test_case.matched_errors:
            logger.debug(
                "SQL error signatures %s for %s (HTTP %d)",
                test_case.matched_errors,
                test_case.parameter,
                test_case.response_code,
            )

    @staticmethod
    def _issue_for(test_case: SQLInjectionTestCase) -> Issue:
        return Issue(
            message=(
                f"Possible SQL Injection detected in parameter: {test_case.parameter} "
                f"with payload: {test_case.test_payload.payload}"
            ),
            risk=Risk.HIGH,
        )
