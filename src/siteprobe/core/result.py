"""Data models for scan requests, issues and reports."""

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

NO_ISSUES_MESSAGE = "No vulnerabilities found."


class Risk(str, Enum):
    """Issue risk levels, ordered none < low < medium < high."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]


_RISK_RANK = {Risk.NONE: 0, Risk.LOW: 1, Risk.MEDIUM: 2, Risk.HIGH: 3}


class ScanType(str, Enum):
    QUICK = "quick"
    FULL = "full"


class ScanStatus(str, Enum):
    SAFE = "Safe"
    VULNERABLE = "Vulnerable"


class Issue(BaseModel):
    """A single finding produced by one checker."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(..., min_length=1, description="Human-readable finding")
    risk: Risk = Field(..., description="Risk level")


class ProbeOutcome(BaseModel):
    """Result of one active probe (XSS or SQL injection).

    ``inconclusive`` means the probe could not be carried out; its issue list
    is then always empty.
    """

    probe: str
    issues: list[Issue] = Field(default_factory=list)
    attempts: int = Field(default=0, ge=0)
    failures: int = Field(default=0, ge=0)
    inconclusive: bool = False


class ScanRequest(BaseModel):
    """Incoming scan request. ``scanType`` is the wire name of ``scan_type``."""

    model_config = ConfigDict(populate_by_name=True)

    url: str | None = None
    scan_type: ScanType = Field(default=ScanType.QUICK, alias="scanType")


class ScanReport(BaseModel):
    """Complete report for a single scanned URL."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    status: ScanStatus
    scan_type: ScanType = Field(..., alias="scanType")
    issues: list[Issue] = Field(default_factory=list)
    probes: list[ProbeOutcome] = Field(default_factory=list, exclude=True)

    @classmethod
    def from_issues(
        cls,
        url: str,
        scan_type: ScanType,
        issues: list[Issue],
        probes: list[ProbeOutcome] | None = None,
    ) -> "ScanReport":
        """Aggregate issues into a report.

        Status is derived before the placeholder issue is substituted for an
        empty list.
        """
        status = ScanStatus.VULNERABLE if issues else ScanStatus.SAFE
        return cls(
            url=url,
            status=status,
            scan_type=scan_type,
            issues=list(issues) or [Issue(message=NO_ISSUES_MESSAGE, risk=Risk.NONE)],
            probes=probes or [],
        )

    def to_wire(self) -> dict:
        """JSON-ready mapping using the wire field names."""
        return self.model_dump(mode="json", by_alias=True)

    def get_by_risk(self, risk: Risk) -> list[Issue]:
        return [issue for issue in self.issues if issue.risk == risk]

    def summary(self) -> dict[str, int]:
        """Issue count per risk level, highest first."""
        risks = sorted(Risk, key=lambda r: r.rank, reverse=True)
        return {risk.value: len(self.get_by_risk(risk)) for risk in risks}


def sort_by_risk(issues: Iterable[Issue]) -> list[Issue]:
    """Return a new list ordered high -> medium -> low -> none.

    The sort is stable, so issues of equal risk keep their report order.
    """
    return sorted(issues, key=lambda issue: issue.risk.rank, reverse=True)
