"""Clipboard change detector for ClipHistory.

A background thread samples the system clipboard at a fixed cadence, compares
the text against the shared snapshot and records real changes through the
``HistoryService``. No failure inside one cycle ends the loop.
"""

import logging
import threading
from enum import Enum
from typing import Optional

from cliphistory.exceptions import ClipboardError, ClipboardUnavailable, StoreWriteFailure
from cliphistory.models import is_blank
from cliphistory.services.history_service import HistoryService

logger = logging.getLogger(__name__)


class PollOutcome(Enum):
    NO_TEXT = "no_text"
    BLANK = "blank"
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    ERROR = "error"


class ChangeDetector:
    """Polls the clipboard on a dedicated thread until :meth:`stop` is called."""

    def __init__(
        self,
        service: HistoryService,
        poll_interval: float = 0.5,
        auto_start: bool = False,
    ) -> None:
        self._service = service
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._poll_thread: Optional[threading.Thread] = None
        self.poll_interval = poll_interval
        self.captured = 0

        if auto_start:
            self.start()

    # ---------------------------------------------------------------------
    # Lifecycle management
    # ---------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return bool(self._poll_thread and self._poll_thread.is_alive())

    def start(self) -> None:
        with self._lock:
            if self.is_running:
                logger.debug("ChangeDetector already running")
                return

            logger.info("Starting clipboard polling (interval=%ss)", self.poll_interval)
            self._stop_event.clear()
            self._poll_thread = threading.Thread(
                target=self._poll_loop,
                daemon=True,
                name="cliphistory-detector",
            )
            self._poll_thread.start()

    def stop(self, timeout: float = 5.0) -> bool:
        """Signal the loop to finish and wait for the thread.

        Returns ``True`` once the thread has exited.
        """
        with self._lock:
            thread = self._poll_thread
            if thread is None:
                return True
            logger.info("Stopping clipboard polling")
            self._stop_event.set()

        # join outside the lock
        thread.join(timeout=timeout)
        stopped = not thread.is_alive()
        if stopped:
            with self._lock:
                if self._poll_thread is thread:
                    self._poll_thread = None
        else:
            logger.warning("Clipboard polling thread did not stop within %ss", timeout)
        return stopped

    def __enter__(self) -> "ChangeDetector":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # ---------------------------------------------------------------------
    # Polling
    # ---------------------------------------------------------------------
    def poll_once(self) -> PollOutcome:
        """Run one sample/compare/persist cycle."""
        service = self._service
        try:
            text = service.clipboard.read_text()
        except ClipboardUnavailable:
            return PollOutcome.NO_TEXT
        except ClipboardError as exc:
            logger.warning("Error reading clipboard: %s", exc)
            return PollOutcome.ERROR

        if is_blank(text):
            return PollOutcome.BLANK

        with service.snapshot.hold() as held:
            if held.value == text:
                return PollOutcome.UNCHANGED

            # A failed write still moves the snapshot, otherwise every tick
            # would retry the same text.
            held.value = text
            try:
                record = service.record(text)
            except StoreWriteFailure as exc:
                logger.error("Failed to save clip: %s", exc)
                return PollOutcome.ERROR

        self.captured += 1
        logger.info("Detected new clip from %r: %r", record.source or "unknown", record.preview())
        service.notify(record)
        return PollOutcome.CHANGED

    def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception:
                logger.exception("Unexpected error in clipboard poll cycle")

            self._stop_event.wait(self.poll_interval)
        logger.debug("Clipboard polling loop exited")
