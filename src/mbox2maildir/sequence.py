"""Run-wide output sequence numbers."""

import threading


class Sequencer:
    """Hands out consecutive integers to concurrent workers.

    The lock covers only the read-and-increment, never any I/O.
    """

    def __init__(self, start: int = 0):
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
        return value

    @property
    def value(self) -> int:
        """The number the next call to ``next`` will return."""
        with self._lock:
            return self._next
