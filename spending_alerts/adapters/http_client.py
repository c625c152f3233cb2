"""
HTTP client collaborator.

Live instances send requests with aiohttp. Null instances answer from a
table of canned responses keyed by URL path and never touch the network.
Both emit a RequestSent event once a response has been fully received.
"""
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

import aiohttp

from ..events import Event, EventEmitter
from .base import BaseAdapter, ConnectionMode

DEFAULT_TIMEOUT_SECONDS = 30.0
WILDCARD_PATH = "*"


@dataclass
class HttpRequest:
    """Outgoing HTTP request."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


@dataclass
class HttpResponse:
    """Fully received HTTP response."""
    status: int
    headers: Dict[str, str]
    body: str


@dataclass(frozen=True)
class RequestSent(Event):
    type = "requestSent"

    request: HttpRequest
    response: HttpResponse


@dataclass
class NullResponse:
    """Canned response used by null HTTP clients. Unset fields use defaults."""
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


DEFAULT_NULL_RESPONSE = NullResponse(status=404, body="Default null response")

NullConfiguration = Mapping[str, Union[NullResponse, Mapping]]

Fetch = Callable[[HttpRequest], Awaitable[HttpResponse]]


class HttpClient(BaseAdapter):
    """Sends HTTP requests through an injected fetch coroutine."""

    def __init__(self, fetch: Fetch, mode: ConnectionMode = ConnectionMode.LIVE):
        super().__init__(mode)
        self._fetch = fetch
        self.events = EventEmitter()

    @classmethod
    def create(cls, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> "HttpClient":
        return cls(_create_aiohttp_fetch(timeout_seconds))

    @classmethod
    def create_null(cls, responses: Optional[NullConfiguration] = None) -> "HttpClient":
        """
        Create a client that answers from canned responses.

        Args:
            responses: URL path -> NullResponse (or a dict of its fields).
                The "*" entry is used when no path matches; without it the
                client answers 404 "Default null response".
        """
        return cls(_create_fetch_stub(responses), mode=ConnectionMode.NULL)

    async def send_request(self, request: HttpRequest) -> HttpResponse:
        """
        Send a request and return the complete response.

        Transport errors (connection refused, DNS, timeout) propagate as-is
        and no event is emitted for them.
        """
        self.logger.debug(f"{request.method} {request.url}")
        response = await self._fetch(request)
        self.logger.debug(f"{request.method} {request.url} -> {response.status}")

        # Only completed requests are reported
        self.events.emit(RequestSent(request=request, response=response))
        return response


def _create_aiohttp_fetch(timeout_seconds: float) -> Fetch:
    timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def fetch(request: HttpRequest) -> HttpResponse:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body
            ) as resp:
                return HttpResponse(
                    status=resp.status,
                    headers={name.lower(): value for name, value in resp.headers.items()},
                    body=await resp.text()
                )

    return fetch


def _to_null_response(value: Union[NullResponse, Mapping]) -> NullResponse:
    if isinstance(value, NullResponse):
        return value
    return NullResponse(**value)


def _create_fetch_stub(responses: Optional[NullConfiguration] = None) -> Fetch:
    table = {path: _to_null_response(value) for path, value in (responses or {}).items()}
    default = table.get(WILDCARD_PATH, DEFAULT_NULL_RESPONSE)

    async def fetch(request: HttpRequest) -> HttpResponse:
        path = urlsplit(request.url).path
        canned = table.get(path, default)
        return HttpResponse(
            status=canned.status,
            headers=dict(canned.headers),
            body=canned.body
        )

    return fetch
