"""HTTP transport shared by the API entity modules."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode, urlsplit
from urllib.request import Request as _UrlRequest
from urllib.request import urlopen

__all__ = [
    "Request",
    "Response",
    "Requester",
    "ApiError",
    "UnexpectedStatusError",
    "HttpRequester",
    "send",
]


class ApiError(Exception):
    """Raised when a request to the API fails."""


class UnexpectedStatusError(ApiError):
    """Raised when the API answers with a status code the call does not accept."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"unexpected status code: {status_code}")
        self.status_code = status_code


@dataclass
class Request:
    """An outgoing HTTP request."""

    method: str
    url: str
    body: bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    @property
    def query(self) -> str:
        return urlsplit(self.url).query


@dataclass
class Response:
    """An HTTP response as returned by a requester."""

    status_code: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        """Decode the body as JSON, raising ApiError when it is not valid."""
        try:
            return json.loads(self.body.decode("utf-8"))
        except ValueError as exc:
            raise ApiError(f"invalid JSON in response: {exc}") from exc


@runtime_checkable
class Requester(Protocol):
    """Anything that can execute a request against an API base URL."""

    base_url: str

    def do_request(self, request: Request) -> Response:
        ...


class HttpRequester:
    """Executes requests over HTTP, authorising them with a bearer key."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def do_request(self, request: Request) -> Response:
        headers = {"Authorization": f"Bearer {self.api_key}", **request.headers}
        url_request = _UrlRequest(
            request.url, data=request.body, headers=headers, method=request.method
        )
        try:
            with urlopen(url_request, timeout=self.timeout) as reply:
                return Response(reply.status, reply.read(), dict(reply.headers.items()))
        except HTTPError as exc:
            with exc:
                headers_out = dict(exc.headers.items()) if exc.headers else {}
                return Response(exc.code, exc.read(), headers_out)
        except (URLError, OSError) as exc:
            raise ApiError(f"request failed: {exc}") from exc


def send(
    requester: Requester,
    method: str,
    path: str,
    *,
    params: Mapping[str, str] | None = None,
    json_body: Any = None,
    expected: Iterable[int] = (200,),
) -> Response:
    """Send a request to ``path`` below the requester's base URL.

    Query parameters are encoded in key order; a JSON body is sent compact
    with a JSON content type. A status outside ``expected`` raises
    UnexpectedStatusError.
    """
    url = f"{requester.base_url}{path}"
    if params:
        url = f"{url}?{urlencode(sorted(params.items()))}"

    body = None
    headers: dict[str, str] = {}
    if json_body is not None:
        body = json.dumps(json_body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        headers["Content-Type"] = "application/json"

    response = requester.do_request(Request(method, url, body, headers))
    if response.status_code not in tuple(expected):
        raise UnexpectedStatusError(response.status_code)
    return response