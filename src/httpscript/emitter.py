"""Timed response emission.

This module provides the ResponseEmitter, the state machine that plays one
Instruction against one response sink: wait, send headers, wait, then
trickle the body out one flushed byte at a time.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable

from httpscript.errors import FlushNotSupportedError
from httpscript.sink import Flusher

if TYPE_CHECKING:
    from httpscript.instruction import Instruction
    from httpscript.sink import ResponseSink

logger = logging.getLogger(__name__)


class EmitterState(Enum):
    """Stages of a response emission, in order."""

    INIT = "init"
    HEADER_DELAY = "header_delay"
    HEADERS_SENT = "headers_sent"
    BODY_DELAY = "body_delay"
    STREAMING = "streaming"
    DONE = "done"


class ResponseEmitter:
    """Executes one Instruction against one response sink.

    The body is written one byte at a time with a flush after each, so a
    client sees a steady trickle rather than a burst at the end. Each byte
    but the last is preceded by an equal share of the body service time;
    the wait before the last byte is whatever remains of the budget, which
    absorbs any oversleeping along the way. The total time spent streaming
    is therefore never less than ``body_service_time``.

    A write failure ends the emission quietly: the client hung up, and
    that is a normal way for a test response to end.

    Attributes:
        instruction: The instruction being played.
        sink: Where the response goes. Must also be a Flusher.
        state: Current stage of the emission.

    Example:
        >>> sink = BufferedSink()
        >>> ResponseEmitter(Instruction(body=b"hi"), sink).emit()
        >>> sink.body
        b'hi'
    """

    def __init__(
        self,
        instruction: Instruction,
        sink: ResponseSink,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the emitter.

        Args:
            instruction: The instruction to play.
            sink: The response sink to write to.
            sleep: Function used to wait, in seconds.
            clock: Monotonic clock, in seconds.
        """
        self.instruction = instruction
        self.sink = sink
        self.state = EmitterState.INIT
        self._sleep = sleep
        self._clock = clock

    def emit(self) -> None:
        """Play the instruction from start to finish.

        Raises:
            FlushNotSupportedError: If the sink is not a Flusher.
        """
        if not isinstance(self.sink, Flusher):
            raise FlushNotSupportedError(self.sink)
        flusher: Flusher = self.sink
        inst = self.instruction

        self.state = EmitterState.HEADER_DELAY
        self._wait(inst.header_delay)

        self.merge_headers()
        try:
            self.sink.send_status(inst.status_code)
            flusher.flush()
        except OSError as e:
            self._abort(e)
            return
        self.state = EmitterState.HEADERS_SENT

        self.state = EmitterState.BODY_DELAY
        self._wait(inst.body_delay)

        body = inst.body
        if not body:
            self.state = EmitterState.DONE
            return

        self.state = EmitterState.STREAMING
        service_time = inst.body_service_time
        byte_pause = service_time / len(body)
        service_start = self._clock()
        try:
            for i in range(len(body) - 1):
                self._wait(byte_pause)
                self.sink.write(body[i : i + 1])
                flusher.flush()
            self._wait(service_time - (self._clock() - service_start))
            self.sink.write(body[-1:])
        except OSError as e:
            self._abort(e)
            return

        self.state = EmitterState.DONE

    def merge_headers(self) -> None:
        """Copy the instruction headers onto the sink.

        Each instruction header replaces every existing value of the same
        name. Content-Length is filled in from the body when the body is
        present and no Content-Length has been set.
        """
        headers = self.sink.headers
        for name, values in self.instruction.headers.items():
            headers.popall(name, None)
            for value in values:
                headers.add(name, value)

        body = self.instruction.body
        if body is not None and "Content-Length" not in headers:
            headers["Content-Length"] = str(len(body))

    def _wait(self, seconds: float) -> None:
        if seconds > 0:
            self._sleep(seconds)

    def _abort(self, error: OSError) -> None:
        logger.debug(
            "Response emission stopped in state %s: %s", self.state.value, error
        )
        self.state = EmitterState.DONE
