"""HTTPS server with pattern routes and client id authorization."""

from __future__ import annotations

import base64
import json
import re
import ssl
import string
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Iterable, Mapping
from urllib.parse import parse_qsl, urlsplit

from moondeck.clientids import ClientIds
from moondeck.enums import SslProtocol
from moondeck.logsettings import get_logger

_log = get_logger("server")

_SCHEME = "basic "
_BASE64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/")
_ARG = "<arg>"


def _decode_base64_lenient(text: str) -> bytes:
    cleaned = "".join(char for char in text.split("=", 1)[0] if char in _BASE64_ALPHABET)
    if len(cleaned) % 4 == 1:
        cleaned = cleaned[:-1]
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned)


def _header(headers: Mapping[str, str], name: str) -> str:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return ""


def get_authorization_id(headers: Mapping[str, str]) -> str:
    """Client id carried in a Basic authorization header, or an empty string."""
    auth = " ".join(_header(headers, "authorization").split())
    if len(auth) > len(_SCHEME) and auth[: len(_SCHEME)].lower() == _SCHEME:
        client_id = _decode_base64_lenient(auth[len(_SCHEME):])
        if client_id:
            return client_id.decode("utf-8", errors="replace")
    return ""


@dataclass
class Request:
    """An incoming request as seen by route handlers."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    query: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass
class Response:
    """An outgoing response."""

    status: int = 200
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_result(cls, result: Any) -> Response:
        """Build a response from what a handler returned."""
        if isinstance(result, Response):
            return result
        if result is None:
            return cls()
        if isinstance(result, bytes):
            return cls(body=result, headers={"Content-Type": "application/octet-stream"})
        if isinstance(result, str):
            return cls(body=result.encode("utf-8"), headers={"Content-Type": "text/plain"})
        if isinstance(result, int) and not isinstance(result, bool):
            return cls(status=result)
        return cls(body=json.dumps(result).encode("utf-8"), headers={"Content-Type": "application/json"})


@dataclass(frozen=True)
class _Route:
    methods: frozenset[str]
    regex: re.Pattern[str]
    handler: Callable[..., Any]


def _compile_pattern(path_pattern: str) -> re.Pattern[str]:
    parts = [re.escape(part) for part in path_pattern.split(_ARG)]
    return re.compile("([^/]+)".join(parts))


def _methods(method: str | Iterable[str]) -> frozenset[str]:
    names = method.split("|") if isinstance(method, str) else method
    return frozenset(name.strip().upper() for name in names if name.strip())


class _Server(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], app: HttpServer) -> None:
        self.app = app
        super().__init__(address, _RequestHandler)


class _RequestHandler(BaseHTTPRequestHandler):
    server: _Server

    def _serve(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        split = urlsplit(self.path)
        request = Request(
            method=self.command,
            path=split.path,
            headers=dict(self.headers.items()),
            body=body,
            query=dict(parse_qsl(split.query)),
        )
        response = self.server.app.handle(request)

        self.send_response(response.status)
        for key, value in response.headers.items():
            self.send_header(key, value)
        self.send_header("Content-Length", str(len(response.body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(response.body)

    do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = do_HEAD = _serve

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        _log.debug(format, *args)


class HttpServer:
    """Routes HTTPS requests to handlers and checks client authorization."""

    def __init__(self, api_version: int, client_ids: ClientIds) -> None:
        self.api_version = api_version
        self.client_ids = client_ids
        self._routes: list[_Route] = []
        self._after_request: list[Callable[[Request, Response], Response | None]] = []
        self._server: _Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int | None:
        """Port the server is listening on, or None when stopped."""
        return self._server.server_address[1] if self._server else None

    def start_server(self, port: int, ssl_cert_file: str, ssl_key_file: str, protocol: SslProtocol) -> bool:
        """Start listening with TLS on all interfaces; return whether it succeeded."""
        if self._server is not None:
            _log.warning("Server is already listening at port %s", self.port)
            return False

        for path, what in ((ssl_cert_file, "certificate"), (ssl_key_file, "key")):
            try:
                with open(path, "rb"):
                    pass
            except OSError:
                _log.warning("Failed to load SSL %s from %s", what, path)
                return False

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.minimum_version, context.maximum_version = protocol.version_range
        try:
            context.load_cert_chain(ssl_cert_file, ssl_key_file)
        except (ssl.SSLError, OSError) as error:
            _log.warning("Failed to load the SSL certificate or key: %s", error)
            return False

        try:
            server = _Server(("", port), self)
        except OSError:
            _log.warning("Server could not start listening at port %s", port)
            return False

        server.socket = context.wrap_socket(server.socket, server_side=True, do_handshake_on_connect=False)
        self._server = server
        self._thread = threading.Thread(target=server.serve_forever, daemon=True)
        self._thread.start()
        _log.info("Server started listening at port %s", port)
        return True

    def stop(self) -> None:
        """Stop listening and wait for the serving thread."""
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join()
        self._server = None
        self._thread = None

    def is_authorized(self, headers: Mapping[str, str]) -> bool:
        return get_authorization_id(headers) in self.client_ids

    def route(self, path_pattern: str, method: str | Iterable[str], handler: Callable[..., Any]) -> bool:
        """Register ``handler`` for ``method`` on ``path_pattern``.

        Each ``<arg>`` in the pattern matches one path segment and is passed to
        the handler, as a string, before the request.
        """
        methods = _methods(method)
        if not path_pattern or not methods:
            return False
        self._routes.append(_Route(methods, _compile_pattern(path_pattern), handler))
        return True

    def after_request(self, handler: Callable[[Request, Response], Response | None]) -> None:
        """Call ``handler`` on every response; a returned Response replaces it."""
        self._after_request.append(handler)

    def handle(self, request: Request) -> Response:
        """Dispatch ``request`` to the first matching route."""
        response = Response(status=404)
        for route in self._routes:
            if request.method.upper() not in route.methods:
                continue
            match = route.regex.fullmatch(request.path)
            if match is None:
                continue
            try:
                response = Response.from_result(route.handler(*match.groups(), request))
            except Exception:
                _log.exception("Handler for %s %s failed", request.method, request.path)
                response = Response(status=500)
            break

        for handler in self._after_request:
            replaced = handler(request, response)
            if replaced is not None:
                response = replaced
        return response