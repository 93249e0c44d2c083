"""httpscript - A scripted HTTP responder for testing HTTP clients.

Script the exact responses a server gives, including how slowly it gives
them, and point the client under test at it.

Quick Start:
    >>> import httpx
    >>> from httpscript import Instruction, ScriptedServer
    >>> with ScriptedServer([
    ...     Instruction(status_code=200, header_delay=0.5),
    ...     Instruction(status_code=200, body=b"hello", body_service_time=2.0),
    ... ]) as server:
    ...     httpx.get(server.url)  # headers arrive after 0.5s
    ...     httpx.get(server.url)  # body trickles in over 2s
    ...     httpx.get(server.url)  # 400: out of instructions
"""

from httpscript.__version__ import __author__, __email__, __license__, __version__
from httpscript.emitter import EmitterState, ResponseEmitter
from httpscript.errors import FlushNotSupportedError, HTTPScriptError, ScriptConfigError
from httpscript.handler import Handler
from httpscript.instruction import Instruction
from httpscript.sequencer import Sequencer
from httpscript.server import HandlerResponseSink, ScriptedServer
from httpscript.sink import BufferedSink, Flusher, ResponseSink

__all__ = [
    "BufferedSink",
    "EmitterState",
    "FlushNotSupportedError",
    "Flusher",
    "HTTPScriptError",
    "Handler",
    "HandlerResponseSink",
    "Instruction",
    "ResponseEmitter",
    "ResponseSink",
    "ScriptConfigError",
    "ScriptedServer",
    "Sequencer",
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
