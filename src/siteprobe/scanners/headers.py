"""Security header checklist."""

from collections.abc import Iterable, Mapping
import logging
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from siteprobe.core.result import Issue, Risk

logger = logging.getLogger(__name__)

MISSING_HEADER_PREFIX = "Missing security header: "


class SecurityHeader(BaseModel):
    """A header every response is expected to carry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Lowercased header name")
    risk_if_missing: Risk


# Order matters: issues are reported in table order.
REQUIRED_HEADERS: tuple[SecurityHeader, ...] = (
    SecurityHeader(name="content-security-policy", risk_if_missing=Risk.HIGH),
    SecurityHeader(name="strict-transport-security", risk_if_missing=Risk.HIGH),
    SecurityHeader(name="x-frame-options", risk_if_missing=Risk.MEDIUM),
    SecurityHeader(name="x-content-type-options", risk_if_missing=Risk.MEDIUM),
    SecurityHeader(name="referrer-policy", risk_if_missing=Risk.LOW),
    SecurityHeader(name="permissions-policy", risk_if_missing=Risk.LOW),
)


def normalize_headers(headers: Mapping[str, str]) -> Mapping[str, str]:
    """Build the read-only header map keyed by lowercased header name."""
    return MappingProxyType({name.lower(): value for name, value in headers.items()})


def check_security_headers(headers: Mapping[str, str]) -> list[Issue]:
    """Report every required header that is absent or empty.

    Args:
        headers: Header map produced by ``normalize_headers``

    Returns:
        One issue per missing header, in checklist order
    """
    issues: list[Issue] = []
    for header in REQUIRED_HEADERS:
        if not headers.get(header.name):
            issues.append(
                Issue(message=f"{MISSING_HEADER_PREFIX}{header.name}", risk=header.risk_if_missing)
            )

    logger.debug("%d of %d security headers missing", len(issues), len(REQUIRED_HEADERS))
    return issues


def find_missing_header(issues: Iterable[Issue], header_name: str) -> Issue | None:
    """Find the missing-header issue reported for ``header_name``, ignoring case."""
    wanted = header_name.strip().lower()
    for issue in issues:
        if not issue.message.startswith(MISSING_HEADER_PREFIX):
            continue
        if issue.message[len(MISSING_HEADER_PREFIX) :].lower() == wanted:
            return issue
    return None
