"""Tests for the reflected XSS prober."""

from urllib.parse import parse_qs, urlparse

import aiohttp
import pytest

from siteprobe.core.result import Risk
from siteprobe.http import MockClient, SimpleResponse
from siteprobe.scanners.xss import XSSScanner


@pytest.mark.asyncio
async def test_xss_detected_in_existing_parameter(echo_client_factory):
    """An echoing target yields one high-risk issue naming the parameter."""
    client = echo_client_factory("https://example.com/search")
    scanner = XSSScanner(client=client)

    outcome = await scanner.probe("https://example.com/search?q=1")

    assert outcome.inconclusive is False
    assert len(outcome.issues) == 1
    assert outcome.issues[0].message == "Reflected XSS detected in parameter: q"
    assert outcome.issues[0].risk == Risk.HIGH


@pytest.mark.asyncio
async def test_xss_without_parameters_uses_synthetic_parameter(echo_client_factory):
    client = echo_client_factory("https://example.com/")
    scanner = XSSScanner(client=client)

    outcome = await scanner.probe("https://example.com/")

    assert [i.message for i in outcome.issues] == ["Reflected XSS vulnerability detected."]
    assert outcome.issues[0].risk == Risk.HIGH
    injected = parse_qs(urlparse(client.requested[0]).query)
    assert injected == {"xss_test": [XSSScanner.PAYLOAD]}


@pytest.mark.asyncio
async def test_each_request_mutates_only_one_parameter(echo_client_factory):
    """Parameters are tested in URL order, each on a fresh copy of the query."""
    client = echo_client_factory("https://example.com/search")
    scanner = XSSScanner(client=client)

    outcome = await scanner.probe("https://example.com/search?a=1&b=2")

    assert [i.message for i in outcome.issues] == [
        "Reflected XSS detected in parameter: a",
        "Reflected XSS detected in parameter: b",
    ]
    first, second = (parse_qs(urlparse(u).query) for u in client.requested)
    assert first == {"a": [XSSScanner.PAYLOAD], "b": ["2"]}
    assert second == {"a": ["1"], "b": [XSSScanner.PAYLOAD]}


@pytest.mark.asyncio
async def test_escaped_output_is_safe():
    safe_html = "<html><body>Safe content &lt;script&gt;alert(1)&lt;/script&gt;</body></html>"
    client = MockClient(
        {"https://example.com/search": SimpleResponse(status=200, headers={}, body=safe_html)}
    )
    scanner = XSSScanner(client=client)

    outcome = await scanner.probe("https://example.com/search?q=test")

    assert outcome.issues == []
    assert outcome.inconclusive is False
    assert outcome.attempts == 1


@pytest.mark.asyncio
async def test_network_error_makes_probe_inconclusive():
    client = MockClient({"https://down.example.com": aiohttp.ClientConnectionError("refused")})
    scanner = XSSScanner(client=client)

    outcome = await scanner.probe("https://down.example.com/?q=1")

    assert outcome.issues == []
    assert outcome.inconclusive is True


@pytest.mark.asyncio
async def test_error_status_makes_probe_inconclusive(echo_client_factory):
    """A failing request discards findings from earlier parameters too."""

    def flaky(url: str) -> SimpleResponse:
        if "b=" in url and "b=2" not in url:
            return SimpleResponse(status=500, headers={}, body="")
        return SimpleResponse(status=200, headers={}, body=XSSScanner.PAYLOAD)

    scanner = XSSScanner(client=MockClient({"https://example.com/": flaky}))

    outcome = await scanner.probe("https://example.com/?a=1&b=2")

    assert outcome.issues == []
    assert outcome.inconclusive is True


@pytest.mark.asyncio
async def test_missing_client_and_session_is_inconclusive():
    outcome = await XSSScanner().probe("https://example.com/?q=1")

    assert outcome.inconclusive is True
    assert outcome.failures == 1
    assert outcome.issues == []


@pytest.mark.asyncio
async def test_reflection_is_logged_with_status(echo_client_factory, caplog):
    scanner = XSSScanner(client=echo_client_factory("https://example.com/search"))

    with caplog.at_level("DEBUG", logger="siteprobe.scanners.xss"):
        await scanner.probe("https://example.com/search?q=1")

    assert "Payload reflected in q (HTTP 200)" in caplog.text
