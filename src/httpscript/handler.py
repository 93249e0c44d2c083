"""Scripted request handling.

The Handler serves each incoming request with the next instruction of its
script. Once the script runs out, every further request gets a 400 Bad
Request explaining why.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from httpscript.emitter import ResponseEmitter
from httpscript.sequencer import Sequencer

if TYPE_CHECKING:
    from httpscript.instruction import Instruction
    from httpscript.sink import ResponseSink

logger = logging.getLogger(__name__)


class Handler:
    """Serves requests from a fixed script of instructions.

    Request ``n`` (counting from zero, in the order requests claim an
    index) is served with ``script[n]``. Requests beyond the end of the
    script still use up an index and are answered with status 400.

    Attributes:
        script: The instructions, fixed at construction.

    Example:
        >>> handler = Handler([Instruction(status_code=204)])
        >>> handler.serve(BufferedSink())  # 204
        >>> handler.serve(BufferedSink())  # 400, out of instructions
    """

    def __init__(self, instructions: Iterable[Instruction] = ()) -> None:
        """Initialize the handler.

        Args:
            instructions: The responses to serve, in order.
        """
        self.script: tuple[Instruction, ...] = tuple(instructions)
        self._sequencer = Sequencer()

    @property
    def served(self) -> int:
        """Number of requests that have claimed an index."""
        return self._sequencer.count

    @property
    def remaining(self) -> int:
        """Number of instructions not yet handed out."""
        return max(0, len(self.script) - self.served)

    def serve(self, sink: ResponseSink) -> None:
        """Serve one request.

        Args:
            sink: The response sink for this request.

        Raises:
            FlushNotSupportedError: If an instruction is due and the sink
                cannot flush.
        """
        n = self._sequencer.next_index()

        if n >= len(self.script):
            self._serve_exhausted(n, sink)
            return

        ResponseEmitter(self.script[n], sink).emit()

    def _serve_exhausted(self, n: int, sink: ResponseSink) -> None:
        body = f"Out of instructions: N[{n}] >= len(Inst)[{len(self.script)}]".encode()
        logger.warning(body.decode())
        sink.headers["Content-Length"] = str(len(body))
        try:
            sink.send_status(400)
            sink.write(body)
        except OSError as e:
            logger.debug("Exhaustion response not delivered: %s", e)

    def __repr__(self) -> str:
        return f"Handler(instructions={len(self.script)}, served={self.served})"
