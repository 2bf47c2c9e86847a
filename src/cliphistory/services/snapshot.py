import threading
from contextlib import contextmanager
from typing import Iterator, Optional


class HeldSnapshot:
    """Mutable view of the snapshot while its lock is held."""

    __slots__ = ("value",)

    def __init__(self, value: Optional[str]) -> None:
        self.value = value


class Snapshot:
    """The last clipboard text seen or written by this process.

    Used only to suppress re-detection of unchanged or self-written text.
    """

    def __init__(self, initial: Optional[str] = None) -> None:
        self._lock = threading.Lock()
        self._value = initial

    @property
    def value(self) -> Optional[str]:
        with self._lock:
            return self._value

    def set(self, value: Optional[str]) -> None:
        with self._lock:
            self._value = value

    @contextmanager
    def hold(self) -> Iterator[HeldSnapshot]:
        """Compare-and-update under the lock.

        Whatever ``held.value`` is when the block exits becomes the new
        snapshot, including when the block raises.
        """
        with self._lock:
            held = HeldSnapshot(self._value)
            try:
                yield held
            finally:
                self._value = held.value
