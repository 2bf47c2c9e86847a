"""Service layer for ClipHistory."""

from .change_detector import ChangeDetector, PollOutcome
from .history_service import HistoryService
from .notifier import CallbackNotifier, CompositeNotifier, Notifier, RedisNotifier
from .snapshot import Snapshot

__all__ = [
    "CallbackNotifier",
    "ChangeDetector",
    "CompositeNotifier",
    "HistoryService",
    "Notifier",
    "PollOutcome",
    "RedisNotifier",
    "Snapshot",
]
