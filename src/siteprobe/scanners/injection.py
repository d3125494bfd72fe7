"""Query-string helpers shared by the payload probers."""

from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse


def query_parameter_names(url: str) -> list[str]:
    """Distinct query parameter names in order of first appearance."""
    pairs = parse_qsl(urlparse(url).query, keep_blank_values=True)
    return list(dict.fromkeys(name for name, _ in pairs))


def inject_parameter(url: str, parameter: str, payload: str) -> str:
    """Build a new URL where ``parameter`` carries ``payload``.

    Other parameters keep their original values. A parameter that is not
    present yet is appended. The input URL is never modified, so every probe
    attempt starts from the original query string.
    """
    parsed = urlparse(url)
    pairs = parse_qsl(parsed.query, keep_blank_values=True)

    if any(name == parameter for name, _ in pairs):
        test_pairs = [(name, payload if name == parameter else value) for name, value in pairs]
    else:
        test_pairs = [*pairs, (parameter, payload)]

    return urlunparse(
        (
            parsed.scheme,
            parsed.netloc,
            parsed.path,
            parsed.params,
            urlencode(test_pairs),
            parsed.fragment,
        )
    )
