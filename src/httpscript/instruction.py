"""Scripted response descriptors.

An Instruction tells the Handler how to serve one HTTP response: what to
send, and how long to take over each part of it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


def normalize_headers(headers: Mapping[str, Any] | None) -> Mapping[str, tuple[str, ...]]:
    """Freeze a header mapping into name -> tuple of string values.

    A single value becomes a one-element tuple. Values that are not strings
    are converted with ``str()``, so ``{"Content-Length": 1111}`` works.

    Args:
        headers: Mapping of header name to a value or a sequence of values.

    Returns:
        A read-only mapping preserving the input order.
    """
    frozen: dict[str, tuple[str, ...]] = {}
    for name, value in (headers or {}).items():
        if isinstance(value, (list, tuple)):
            frozen[str(name)] = tuple(_header_text(v) for v in value)
        else:
            frozen[str(name)] = (_header_text(value),)
    return MappingProxyType(frozen)


def _header_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


@dataclass(frozen=True)
class Instruction:
    """One scripted HTTP response.

    All durations are in seconds.

    Attributes:
        header_delay: How long to pause before returning the response headers.
        headers: HTTP headers to return, name -> tuple of values. If this
            lacks ``Content-Length`` and ``body`` is not None, the header is
            added and set to the length of ``body``.
        status_code: HTTP status code to return.
        body_delay: How long to pause after the headers before beginning to
            write the body.
        body_service_time: How long transmitting the entire body should
            take, at minimum. The body is written one byte at a time, with a
            flush after each byte and a proportional share of this time
            spent before each one.
        body: Body bytes, or None for no body at all. A ``str`` is encoded
            as UTF-8.

    Example:
        >>> Instruction(
        ...     status_code=200,
        ...     headers={"Content-Type": "text/plain"},
        ...     body=b"hello",
        ...     body_service_time=0.5,
        ... )
    """

    header_delay: float = 0.0
    headers: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    status_code: int = 200
    body_delay: float = 0.0
    body_service_time: float = 0.0
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", normalize_headers(self.headers))
        if isinstance(self.body, str):
            object.__setattr__(self, "body", self.body.encode("utf-8"))
        elif isinstance(self.body, (bytearray, memoryview)):
            object.__setattr__(self, "body", bytes(self.body))

    def __hash__(self) -> int:
        return hash((
            self.header_delay,
            frozenset(self.headers.items()),
            self.status_code,
            self.body_delay,
            self.body_service_time,
            self.body,
        ))

    @property
    def has_body(self) -> bool:
        """Whether the instruction carries a body, even an empty one."""
        return self.body is not None

    def __repr__(self) -> str:
        body = "None" if self.body is None else f"<{len(self.body)} bytes>"
        return (
            f"Instruction(status_code={self.status_code}, "
            f"header_delay={self.header_delay}, "
            f"headers={dict(self.headers)}, "
            f"body_delay={self.body_delay}, "
            f"body_service_time={self.body_service_time}, "
            f"body={body})"
        )
