"""Detection of plain-HTTP links in page markup."""

import logging
import re

from siteprobe.core.result import Issue, Risk

logger = logging.getLogger(__name__)

INSECURE_LINK_PATTERN = re.compile(r"""href=["'](http://[^"']+)["']""", re.IGNORECASE)


def check_insecure_links(html: str, base_url: str | None = None) -> list[Issue]:
    """Flag every ``href`` pointing at an ``http://`` target.

    Each occurrence is reported, duplicates included. ``base_url`` is only
    used for logging.
    """
    issues = [
        Issue(message=f"Page contains insecure link: {match.group(1)}", risk=Risk.MEDIUM)
        for match in INSECURE_LINK_PATTERN.finditer(html or "")
    ]
    if issues:
        logger.debug("Found %d insecure links on %s", len(issues), base_url or "page")
    return issues
