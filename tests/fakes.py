"""Fakes for simulating the gazetteer gateway."""

from __future__ import annotations

import contextlib
import socket
import threading

import requests

from placename.client import create_session


def make_response(status: int, body: bytes, reason: str = "OK", url: str = "") -> requests.Response:
    """Build a real requests.Response with a canned body."""
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.url = url
    response.encoding = "utf-8"
    response._content = body
    # no raw stream behind it, nothing left to close
    response._content_consumed = True
    return response


class FakeSession:
    """Stands in for requests.Session; records each call and replays one outcome."""

    def __init__(self, outcome=None):
        self.outcome = outcome
        self.calls: list[dict] = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if isinstance(self.outcome, Exception):
            raise self.outcome
        if callable(self.outcome):
            return self.outcome(method, url)
        self.outcome.url = url
        return self.outcome


def _read_request(conn: socket.socket) -> None:
    """Read one HTTP request (headers plus Content-Length body) off the socket."""
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = conn.recv(4096)
        if not chunk:
            return
        data += chunk
    head, _, body = data.partition(b"\r\n\r\n")
    length = 0
    for line in head.split(b"\r\n")[1:]:
        name, _, value = line.partition(b":")
        if name.strip().lower() == b"content-length":
            length = int(value.strip())
    while len(body) < length:
        chunk = conn.recv(4096)
        if not chunk:
            return
        body += chunk


@contextlib.contextmanager
def serve_once(raw_response: bytes):
    """Serve one connection on localhost: read the request, write raw bytes, close.

    Yields the base URL. The bytes are written as given, so a response can
    promise more body than it sends.
    """
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    server.settimeout(5)
    port = server.getsockname()[1]

    def handle():
        try:
            conn, _ = server.accept()
        except OSError:
            return
        with conn:
            _read_request(conn)
            conn.sendall(raw_response)

    thread = threading.Thread(target=handle, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        thread.join(timeout=5)
        server.close()


def local_session() -> requests.Session:
    """The shared session, minus proxy settings from the environment."""
    session = create_session()
    session.trust_env = False
    return session


def raw_http(status_line: str, body: bytes, content_length: int | None = None) -> bytes:
    """Raw HTTP/1.1 response bytes; content_length may overstate the body."""
    if content_length is None:
        content_length = len(body)
    head = (
        f"HTTP/1.1 {status_line}\r\n"
        "Content-Type: application/json\r\n"
        f"Content-Length: {content_length}\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    return head.encode("ascii") + body
