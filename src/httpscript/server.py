"""Threaded HTTP transport for a scripted Handler.

This module plugs a Handler into a real listening socket so HTTP clients
can be pointed at it. Each request is served on its own thread, so a slow
scripted response never holds up the others.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING, Any

from httpscript.handler import Handler
from httpscript.sink import Flusher, ResponseSink

if TYPE_CHECKING:
    from httpscript.instruction import Instruction

logger = logging.getLogger(__name__)


class HandlerResponseSink(ResponseSink, Flusher):
    """Response sink writing through a BaseHTTPRequestHandler."""

    def __init__(self, request_handler: BaseHTTPRequestHandler) -> None:
        super().__init__()
        self._request_handler = request_handler

    def send_status(self, status_code: int) -> None:
        rh = self._request_handler
        rh.log_request(status_code)
        rh.send_response_only(status_code)
        if "Server" not in self.headers:
            rh.send_header("Server", rh.version_string())
        if "Date" not in self.headers:
            rh.send_header("Date", rh.date_time_string())
        for name, value in self.headers.items():
            rh.send_header(name, value)
        rh.end_headers()

    def write(self, data: bytes) -> None:
        self._request_handler.wfile.write(data)

    def flush(self) -> None:
        self._request_handler.wfile.flush()


class ScriptedRequestHandler(BaseHTTPRequestHandler):
    """Routes every request, whatever its method or path, to the Handler."""

    server: _ScriptedHTTPServer
    # Single-byte writes must leave immediately.
    disable_nagle_algorithm = True

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        """Send request log lines to the module logger."""
        logger.debug("%s - %s", self.address_string(), format % args)

    def _discard_request_body(self) -> None:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            length = 0
        if length > 0:
            self.rfile.read(length)

    def _serve(self) -> None:
        self._discard_request_body()
        self.server.script_handler.serve(HandlerResponseSink(self))

    do_GET = _serve  # noqa: N815
    do_HEAD = _serve  # noqa: N815
    do_POST = _serve  # noqa: N815
    do_PUT = _serve  # noqa: N815
    do_PATCH = _serve  # noqa: N815
    do_DELETE = _serve  # noqa: N815
    do_OPTIONS = _serve  # noqa: N815


class _ScriptedHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    request_queue_size = 64

    def __init__(self, address: tuple[str, int], script_handler: Handler) -> None:
        self.script_handler = script_handler
        super().__init__(address, ScriptedRequestHandler)


class ScriptedServer:
    """HTTP server answering requests from a script.

    Example:
        >>> with ScriptedServer([Instruction(status_code=503)]) as server:
        ...     httpx.get(server.url).status_code
        503
    """

    def __init__(
        self,
        instructions: Iterable[Instruction] = (),
        host: str = "127.0.0.1",
        port: int = 0,
    ) -> None:
        """Initialize the server.

        Args:
            instructions: The responses to serve, in order.
            host: Host address to bind to.
            port: Port to listen on (0 for random port).
        """
        self.host = host
        self.port = port
        self.handler = Handler(instructions)
        self._server: _ScriptedHTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._serving = False

    def _bind(self) -> _ScriptedHTTPServer:
        server = _ScriptedHTTPServer((self.host, self.port), self.handler)

        if self.port == 0:
            self.port = server.server_address[1]

        logger.debug(
            "Bound %d instruction(s) to %s", len(self.handler.script), self.url
        )
        return server

    def bind(self) -> int:
        """Open the listening socket without serving yet.

        Returns:
            The port number the server is listening on.
        """
        if self._server is None:
            self._server = self._bind()
        return self.port

    def start(self) -> int:
        """Start serving on a background thread.

        Returns:
            The port number the server is listening on.
        """
        self.bind()
        self._serving = True
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

        return self.port

    def serve_forever(self) -> None:
        """Serve on the calling thread until interrupted or `stop` is called."""
        self.bind()
        server = self._server
        self._serving = True
        try:
            server.serve_forever()
        finally:
            self._serving = False
            server.server_close()
            self._server = None

    def stop(self) -> None:
        """Stop the server."""
        server, self._server = self._server, None
        if server:
            # shutdown() blocks forever unless a serve loop is running.
            if self._serving:
                server.shutdown()
            server.server_close()
        if self._thread:
            self._thread.join()
            self._thread = None
        self._serving = False

    @property
    def url(self) -> str:
        """Base URL for the server."""
        return f"http://{self.host}:{self.port}"

    def __enter__(self) -> ScriptedServer:
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()
