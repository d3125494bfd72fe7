"""Small HTTP client protocol and adapters to make probes easier to test.

Provides:
- SimpleResponse: small container for status, headers, body
- HTTPClientProtocol: typing.Protocol for client implementations
- AiohttpAdapter: adapter for an aiohttp.ClientSession for production
- MockClient: mapping-based mock for tests
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Union

from siteprobe.core.errors import ProbeError

if TYPE_CHECKING:
    import aiohttp


@dataclass
class SimpleResponse:
    status: int
    headers: dict[str, str]
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HTTPClientProtocol(Protocol):
    async def get(
        self, url: str, **kwargs: Any
    ) -> SimpleResponse:  # pragma: no cover - thin protocol
        ...


class AiohttpAdapter:
    """Adapter that wraps an aiohttp.ClientSession and returns SimpleResponse objects.

    Non-2xx responses are returned, never raised; callers decide whether a
    status code is acceptable.
    """

    def __init__(self, session: aiohttp.ClientSession) -> None:
        self._session = session

    async def get(self, url: str, **kwargs: Any) -> SimpleResponse:
        async with self._session.get(url, **kwargs) as resp:
            # undeclared or wrong charsets must not abort a scan
            body = await resp.text(errors="replace")
            return SimpleResponse(status=resp.status, headers=dict(resp.headers), body=body)


def resolve_client(
    client: HTTPClientProtocol | None, session: aiohttp.ClientSession | None
) -> HTTPClientProtocol:
    """Pick the injected client, or wrap the session in an AiohttpAdapter."""
    if client is not None:
        return client
    if session is None:
        raise ProbeError("A client or an aiohttp session is required")
    return AiohttpAdapter(session)


MockEntry = Union[SimpleResponse, Exception, Callable[[str], SimpleResponse]]


class MockClient:
    """Very small mock client for tests. Provide a mapping of url -> entry.

    An entry is a SimpleResponse, an exception instance to raise, or a
    callable receiving the requested URL and returning a SimpleResponse.

    Example:
        client = MockClient({"https://example.com/": SimpleResponse(200, {}, "<html></html>")})
    """

    def __init__(self, mapping: dict[str, MockEntry] | None = None) -> None:
        self._mapping = mapping or {}
        self.requested: list[str] = []

    async def get(self, url: str, **kwargs: Any) -> SimpleResponse:
        self.requested.append(url)

        entry = self._mapping.get(url)
        if entry is None:
            # Prefix match: allow tests to map base URLs (e.g. "https://example.com/page") to
            # responses that should apply to any query-string variation or injected payloads.
            for key, candidate in self._mapping.items():
                if url.startswith(key):
                    entry = candidate
                    break

        if entry is None:
            # default safe empty response
            return SimpleResponse(status=200, headers={}, body="")
        if isinstance(entry, Exception):
            raise entry
        if callable(entry):
            return entry(url)
        return entry
