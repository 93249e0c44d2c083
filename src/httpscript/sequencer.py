"""Request sequencing.

Hands each incoming request the next unconsumed instruction index.
"""

from __future__ import annotations

import threading


class Sequencer:
    """Thread-safe request counter.

    Each call to `next_index` returns the number of calls made before it,
    so concurrent callers never observe the same index. The lock covers
    only the read-and-increment.

    Example:
        >>> seq = Sequencer()
        >>> seq.next_index(), seq.next_index()
        (0, 1)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._n = 0

    def next_index(self) -> int:
        """Claim the next index.

        Returns:
            The counter value before incrementing.
        """
        with self._lock:
            n = self._n
            self._n += 1
        return n

    @property
    def count(self) -> int:
        """Number of indexes handed out so far."""
        with self._lock:
            return self._n
