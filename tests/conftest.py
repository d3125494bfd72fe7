"""Test configuration and fixtures for SiteProbe."""

from urllib.parse import parse_qsl, urlparse

import pytest

from siteprobe.http import MockClient, SimpleResponse

ALL_SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=()",
}


@pytest.fixture
def secure_headers() -> dict[str, str]:
    """Response headers carrying every required security header."""
    return dict(ALL_SECURITY_HEADERS)


@pytest.fixture
def sample_html():
    """Sample HTML page with one insecure and one secure link."""
    return """
    <!DOCTYPE html>
    <html>
    <head><title>Test Page</title></head>
    <body>
        <a href="http://insecure.example.com/page">Insecure</a>
        <a href="https://secure.example.com/page">Secure</a>
        <a href="/relative">Relative</a>
    </body>
    </html>
    """


@pytest.fixture
def vulnerable_sql_response():
    """Sample response indicating SQL injection vulnerability."""
    return """
    <html>
    <body>
        <h1>Database Error</h1>
        <p>You have an error in your SQL syntax near '1'='1'</p>
    </body>
    </html>
    """


def echo_response(url: str) -> SimpleResponse:
    """Target that reflects every query parameter value unescaped."""
    values = [value for _, value in parse_qsl(urlparse(url).query, keep_blank_values=True)]
    body = "<html><body>Search results for: " + " ".join(values) + "</body></html>"
    return SimpleResponse(status=200, headers={}, body=body)


@pytest.fixture
def echo_client_factory():
    """Return a factory for a MockClient whose target echoes query values."""

    def _factory(prefix: str) -> MockClient:
        return MockClient({prefix: echo_response})

    return _factory


@pytest.fixture
def simple_response_factory():
    """Return a factory to create SimpleResponse easily in tests."""

    def _factory(status: int = 200, headers: dict | None = None, body: str = ""):
        return SimpleResponse(status=status, headers=headers or {}, body=body)

    return _factory
