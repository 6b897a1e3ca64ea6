"""pytest fixtures for testing."""

import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
from unittest.mock import Mock

from routekit.models.doh_provider import DoHProvider


A_ANSWER = {
    "Status": 0,
    "Answer": [{"name": "example.com.", "type": 1, "TTL": 300, "data": "1.2.3.4"}],
}


def make_response(body=None, status_code=200, reason="OK", json_error=None):
    """Build a mock streamed ``requests.Response`` carrying a DoH JSON body.

    With ``json_error`` set the body is not valid JSON.
    """
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.ok = 200 <= status_code < 400
    payload = b"<html>not json" if json_error is not None else json.dumps(body).encode()
    response.iter_content.return_value = [payload[:10], payload[10:]]
    return response


@pytest.fixture
def doh_response():
    """Factory for mock DoH HTTP responses."""
    return make_response


@pytest.fixture
def provider_panel():
    """Three independent test providers."""
    return [
        DoHProvider("Alpha", "https://alpha.example/dns-query", "Global", "Alpha"),
        DoHProvider("Bravo", "https://bravo.example/resolve", "Europe", "Bravo"),
        DoHProvider("Charlie", "https://charlie.example/dns-query", "Asia", "Charlie"),
    ]


class TrickleDoHHandler(BaseHTTPRequestHandler):
    """Answers DoH queries; paths under /slow send the body 10 bytes every 0.4s."""

    def do_GET(self):
        body = json.dumps(A_ANSWER).encode()
        try:
            self.send_response(200)
            self.send_header("Content-Type", "application/dns-json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if not self.path.startswith("/slow"):
                self.wfile.write(body)
                return
            for offset in range(0, len(body), 10):
                self.wfile.write(body[offset:offset + 10])
                self.wfile.flush()
                time.sleep(0.4)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def doh_server():
    """Local DoH endpoint; yields its base URL (use /fast or /slow paths)."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), TrickleDoHHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()
