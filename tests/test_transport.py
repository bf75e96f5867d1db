import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, parse_qsl

import pytest

from amocrm_sdk.transport import (
    ApiError,
    HttpRequester,
    Request,
    Response,
    UnexpectedStatusError,
    send,
)


class FakeRequester:
    def __init__(self, status_code=200, body=b"{}"):
        self.base_url = "https://example.amocrm.ru"
        self.status_code = status_code
        self.body = body
        self.requests = []

    def do_request(self, request):
        self.requests.append(request)
        return Response(self.status_code, self.body)


class _Handler(BaseHTTPRequestHandler):
    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        self.server.seen.append((self.command, self.path, self.headers, body))
        status, payload = self.server.reply
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = _handle
    do_POST = _handle
    do_PATCH = _handle
    do_DELETE = _handle

    def log_message(self, *args):
        pass


@pytest.fixture
def server():
    srv = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    srv.seen = []
    srv.reply = (200, b"{}")
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    srv.server_close()


def _base_url(srv):
    return f"http://127.0.0.1:{srv.server_address[1]}"


def test_send_builds_url_with_sorted_query():
    requester = FakeRequester()
    send(requester, "GET", "/api/v4/sources", params={"page": "1", "limit": "50"})
    request = requester.requests[0]
    assert request.path == "/api/v4/sources"
    assert parse_qs(request.query) == {"page": ["1"], "limit": ["50"]}
    keys = [key for key, _ in parse_qsl(request.query)]
    assert keys == sorted(keys)


def test_send_encodes_brackets_in_query():
    requester = FakeRequester()
    send(requester, "GET", "/api/v4/sources", params={"filter[type]": "calls"})
    assert "filter%5Btype%5D=calls" in requester.requests[0].url


def test_send_json_body_is_compact_with_content_type():
    requester = FakeRequester()
    send(requester, "POST", "/api/v4/sources/1001/pipeline", json_body={"pipeline_id": 2001})
    request = requester.requests[0]
    assert request.body == b'{"pipeline_id":2001}'
    assert request.headers["Content-Type"] == "application/json"
    assert request.method == "POST"


def test_send_keeps_non_ascii_text():
    requester = FakeRequester()
    send(requester, "POST", "/api/v4/sources", json_body={"name": "Новый источник"})
    assert "Новый источник" in requester.requests[0].body.decode("utf-8")


def test_send_without_body_has_no_content_type():
    requester = FakeRequester()
    send(requester, "DELETE", "/api/v4/sources/1001")
    request = requester.requests[0]
    assert request.body is None
    assert "Content-Type" not in request.headers


def test_send_raises_on_unexpected_status():
    requester = FakeRequester(status_code=404)
    with pytest.raises(UnexpectedStatusError) as info:
        send(requester, "GET", "/api/v4/sources/9999")
    assert info.value.status_code == 404
    assert isinstance(info.value, ApiError)


def test_send_accepts_any_expected_status():
    requester = FakeRequester(status_code=201, body=b'{"id": 5}')
    response = send(requester, "POST", "/api/v4/sources", json_body={}, expected=(200, 201))
    assert response.json() == {"id": 5}


def test_response_json_invalid_raises_api_error():
    with pytest.raises(ApiError):
        Response(200, b'{"id": 123, "name":').json()


def test_response_json_empty_body_raises_api_error():
    with pytest.raises(ApiError):
        Response(204, b"").json()


def test_request_path_and_query():
    request = Request("GET", "https://example.amocrm.ru/api/v4/sources?page=1")
    assert request.path == "/api/v4/sources"
    assert request.query == "page=1"


def test_http_requester_sends_authorization(server):
    server.reply = (200, b'{"id": 1001}')
    requester = HttpRequester(_base_url(server), api_key="placeholder")
    response = send(requester, "GET", "/api/v4/sources/1001")
    assert response.json() == {"id": 1001}
    method, path, headers, _ = server.seen[0]
    assert method == "GET"
    assert path == "/api/v4/sources/1001"
    assert headers.get("Authorization") == "Bearer placeholder"


def test_http_requester_sends_body_and_method(server):
    requester = HttpRequester(_base_url(server), api_key="placeholder")
    send(requester, "PATCH", "/api/v4/sources/1001", json_body={"name": "Обновленный источник"})
    method, _, headers, body = server.seen[0]
    assert method == "PATCH"
    assert body.decode("utf-8") == '{"name":"Обновленный источник"}'
    assert headers.get("Content-Type") == "application/json"


def test_http_requester_returns_error_status_without_raising(server):
    server.reply = (404, b'{"error": "Not Found"}')
    requester = HttpRequester(_base_url(server), api_key="placeholder")
    response = requester.do_request(Request("GET", f"{_base_url(server)}/api/v4/sources/9999"))
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_http_requester_connection_failure_raises_api_error():
    srv = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    base_url = _base_url(srv)
    srv.server_close()
    requester = HttpRequester(base_url, api_key="placeholder", timeout=2.0)
    with pytest.raises(ApiError):
        send(requester, "GET", "/api/v4/sources")