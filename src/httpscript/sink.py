"""Response sink contracts.

The emitter never talks to a socket directly. It writes to a ResponseSink,
and relies on the Flusher capability to push partial output out as soon as
it is written.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from multidict import CIMultiDict


class ResponseSink(ABC):
    """Destination for one HTTP response.

    Attributes:
        headers: Response headers, committed by `send_status`. Names are
            case-insensitive and may carry several values.
    """

    def __init__(self) -> None:
        self.headers: CIMultiDict[str] = CIMultiDict()

    @abstractmethod
    def send_status(self, status_code: int) -> None:
        """Commit the status line and the current headers.

        Args:
            status_code: HTTP status code.
        """

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write body bytes.

        Args:
            data: Bytes to write.

        Raises:
            OSError: If the transport fails, e.g. the client went away.
        """


class Flusher(ABC):
    """Capability to force buffered output to the transport."""

    @abstractmethod
    def flush(self) -> None:
        """Flush buffered output.

        Raises:
            OSError: If the transport fails.
        """


class BufferedSink(ResponseSink, Flusher):
    """In-memory sink recording everything written to it.

    Attributes:
        status_code: Committed status code, or None before `send_status`.
        sent_headers: Snapshot of `headers` taken at commit time.
        chunks: Each `write` call's data, in order.
        flushes: Number of `flush` calls.
        fail_after: If set, writes after this many chunks raise
            BrokenPipeError, simulating a client disconnect.

    Example:
        >>> sink = BufferedSink()
        >>> sink.send_status(204)
        >>> sink.status_code
        204
    """

    def __init__(self, fail_after: int | None = None) -> None:
        super().__init__()
        self.status_code: int | None = None
        self.sent_headers: CIMultiDict[str] | None = None
        self.chunks: list[bytes] = []
        self.flushes = 0
        self.fail_after = fail_after

    def send_status(self, status_code: int) -> None:
        self.status_code = status_code
        self.sent_headers = self.headers.copy()

    def write(self, data: bytes) -> None:
        if self.fail_after is not None and len(self.chunks) >= self.fail_after:
            raise BrokenPipeError("sink closed")
        self.chunks.append(bytes(data))

    def flush(self) -> None:
        self.flushes += 1

    @property
    def body(self) -> bytes:
        """All bytes written so far."""
        return b"".join(self.chunks)
