"""Tests for the HTTP API."""

import aiohttp
from aiohttp import test_utils
import pytest

from siteprobe.http import MockClient, SimpleResponse
from siteprobe.server import ServerConfig, create_app


def _client(mock: MockClient) -> test_utils.TestClient:
    return test_utils.TestClient(test_utils.TestServer(create_app(client=mock)))


@pytest.mark.asyncio
async def test_quick_scan_report():
    mock = MockClient(
        {"http://example.com": SimpleResponse(status=200, headers={}, body="<html></html>")}
    )

    async with _client(mock) as client:
        resp = await client.post("/scan", json={"url": "http://example.com", "scanType": "quick"})
        data = await resp.json()

    assert resp.status == 200
    assert data["url"] == "http://example.com"
    assert data["status"] == "Vulnerable"
    assert data["scanType"] == "quick"
    assert data["issues"][0] == {"message": "Using insecure HTTP protocol.", "risk": "high"}
    assert len(data["issues"]) == 7
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


@pytest.mark.asyncio
async def test_missing_url_returns_400():
    async with _client(MockClient()) as client:
        resp = await client.post("/scan", json={"scanType": "quick"})
        data = await resp.json()

    assert resp.status == 400
    assert data == {"error": "URL is required."}


@pytest.mark.asyncio
async def test_malformed_body_returns_400():
    async with _client(MockClient()) as client:
        resp = await client.post(
            "/scan", data="not json", headers={"Content-Type": "application/json"}
        )
        data = await resp.json()

    assert resp.status == 400
    assert data == {"error": "URL is required."}


@pytest.mark.asyncio
async def test_unknown_scan_type_returns_400():
    async with _client(MockClient()) as client:
        resp = await client.post("/scan", json={"url": "https://example.com", "scanType": "deep"})
        data = await resp.json()

    assert resp.status == 400
    assert data["error"].startswith("Invalid scan request:")


@pytest.mark.asyncio
async def test_unreachable_target_returns_500():
    mock = MockClient({"https://down.example.com": aiohttp.ClientConnectionError("refused")})

    async with _client(mock) as client:
        resp = await client.post("/scan", json={"url": "https://down.example.com/"})
        data = await resp.json()

    assert resp.status == 500
    assert data["error"].startswith("Failed to scan the URL.")
    assert "refused" in data["error"]


@pytest.mark.asyncio
async def test_preflight_allows_any_origin():
    async with _client(MockClient()) as client:
        resp = await client.options(
            "/scan",
            headers={
                "Origin": "http://localhost:8080",
                "Access-Control-Request-Method": "POST",
            },
        )

    assert resp.status == 204
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert "POST" in resp.headers["Access-Control-Allow-Methods"]


def test_server_config_defaults():
    config = ServerConfig()

    assert config.port == 3001
    assert config.host == "0.0.0.0"
