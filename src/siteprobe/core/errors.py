"""Exceptions raised while scanning a URL."""


class ScanError(Exception):
    """Base class for scan failures."""


class InputError(ScanError):
    """The scan request itself is unusable (e.g. no URL)."""


class FetchError(ScanError):
    """The target page could not be fetched; the scan is aborted."""


class ProbeError(ScanError):
    """A single probe request gave no usable answer.

    Never escapes a probe: it is recorded on the ProbeOutcome instead.
    """
