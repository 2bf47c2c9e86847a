"""Change notifications emitted after a clip is persisted.

The UI side subscribes either in-process through ``CallbackNotifier`` or
across processes through the Redis channel published by ``RedisNotifier``.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional

import redis

from cliphistory.config import RedisConfig
from cliphistory.models import ClipRecord

logger = logging.getLogger(__name__)

CLIPS_UPDATED = "clips_updated"


class Notifier(ABC):

    @abstractmethod
    def notify(self, record: ClipRecord) -> None:
        """Announce that ``record`` was written to the history."""

    def close(self) -> None:
        pass


class NullNotifier(Notifier):

    def notify(self, record: ClipRecord) -> None:
        pass


class CallbackNotifier(Notifier):
    """Calls every registered callback; a failing callback does not stop the rest."""

    def __init__(self, callbacks: Optional[Iterable[Callable[[ClipRecord], None]]] = None) -> None:
        self._callbacks: List[Callable[[ClipRecord], None]] = list(callbacks or [])
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[ClipRecord], None]) -> None:
        with self._lock:
            self._callbacks.append(callback)

    def unsubscribe(self, callback: Callable[[ClipRecord], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def notify(self, record: ClipRecord) -> None:
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            try:
                callback(record)
            except Exception:
                logger.exception("clips_updated callback raised")


class RedisNotifier(Notifier):
    """Publishes a JSON ``clips_updated`` message on a Redis channel."""

    def __init__(self, config: Optional[RedisConfig] = None, client: Optional[redis.Redis] = None) -> None:
        self.config = config or RedisConfig()
        self.client = client or redis.Redis(
            host=self.config.host,
            port=self.config.port,
            db=self.config.db,
            password=self.config.password,
            decode_responses=True,
        )

    def notify(self, record: ClipRecord) -> None:
        message = json.dumps({
            "event": CLIPS_UPDATED,
            "identity": record.identity,
            "source": record.source,
            "timestamp": record.captured_at,
        })
        self.client.publish(self.config.channel, message)

    def close(self) -> None:
        self.client.close()


class CompositeNotifier(Notifier):

    def __init__(self, notifiers: Iterable[Notifier]) -> None:
        self.notifiers = list(notifiers)

    def notify(self, record: ClipRecord) -> None:
        for notifier in self.notifiers:
            safe_notify(notifier, record)

    def close(self) -> None:
        for notifier in self.notifiers:
            try:
                notifier.close()
            except Exception:
                logger.exception("Error while closing %s", type(notifier).__name__)


def safe_notify(notifier: Optional[Notifier], record: ClipRecord) -> bool:
    """Deliver a notification, logging instead of raising on failure."""
    if notifier is None:
        return False
    try:
        notifier.notify(record)
        return True
    except Exception:
        logger.exception("Failed to emit %s for %s", CLIPS_UPDATED, record.identity)
        return False
