"""Shared context for the clipboard history.

``HistoryService`` owns the store, the clipboard handle, the foreground
resolver, the notifier and the snapshot. The change detector, the HTTP API and
the CLI all receive the same instance instead of reaching for module globals.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from cliphistory.clipboard import TextClipboard
from cliphistory.config import DEFAULT_LIST_LIMIT
from cliphistory.database import HistoryStore
from cliphistory.exceptions import ClipboardError, ClipboardUnavailable
from cliphistory.foreground import ForegroundResolver, NullResolver, resolve_source
from cliphistory.models import ClipRecord, ClipRecordBuilder, is_blank
from cliphistory.services.notifier import Notifier, NullNotifier, safe_notify
from cliphistory.services.snapshot import Snapshot

logger = logging.getLogger(__name__)


class HistoryService:

    def __init__(
        self,
        store: HistoryStore,
        clipboard: TextClipboard,
        *,
        resolver: Optional[ForegroundResolver] = None,
        notifier: Optional[Notifier] = None,
        builder: Optional[ClipRecordBuilder] = None,
        snapshot: Optional[Snapshot] = None,
        list_limit: int = DEFAULT_LIST_LIMIT,
    ) -> None:
        self.store = store
        self.clipboard = clipboard
        self.resolver = resolver or NullResolver()
        self.notifier = notifier or NullNotifier()
        self.builder = builder or ClipRecordBuilder()
        self.snapshot = snapshot or Snapshot()
        self.list_limit = list_limit

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------
    def prime_snapshot(self) -> Optional[str]:
        """Seed the snapshot with the current clipboard text.

        Text already on the clipboard at startup is not recorded.
        """
        try:
            text = self.clipboard.read_text()
        except ClipboardUnavailable:
            return None
        except ClipboardError as exc:
            logger.warning("Could not read initial clipboard contents: %s", exc)
            return None

        if is_blank(text):
            return None
        self.snapshot.set(text)
        return text

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def record(self, text: str) -> ClipRecord:
        """Label, build and upsert a record for ``text``.

        Raises:
            StoreWriteFailure: the upsert did not commit.
        """
        source = resolve_source(self.resolver)
        record = self.builder.build(text, source)
        self.store.upsert(record)
        return record

    def notify(self, record: ClipRecord) -> bool:
        return safe_notify(self.notifier, record)

    def write_back(self, text: str) -> bool:
        """Put a history entry back on the system clipboard.

        Returns ``False`` when there was nothing to do: blank text, or text
        identical to the snapshot. The snapshot is updated before the
        clipboard changes hands so the detector sees this write as unchanged.

        Raises:
            ClipboardWriteFailure: the clipboard was not updated; the snapshot
                keeps its previous value.
            StoreWriteFailure: the clipboard was updated but the upsert failed.
        """
        if is_blank(text):
            return False

        with self.snapshot.hold() as held:
            if held.value == text:
                return False
            self.clipboard.write_text(text)
            held.value = text
            record = self.record(text)

        logger.info("Clip selected from history: %r", record.preview())
        self.notify(record)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_clips(self, limit: Optional[int] = None) -> List[ClipRecord]:
        return self.store.list_recent(self.list_limit if limit is None else limit)

    def search_clips(
        self,
        term: str = "",
        source_filter: str = "",
        limit: Optional[int] = None,
    ) -> List[ClipRecord]:
        return self.store.search(
            term,
            source_filter,
            limit=self.list_limit if limit is None else limit,
        )

    def list_sources(self) -> List[str]:
        return self.store.distinct_sources()

    def close(self) -> None:
        self.notifier.close()
        self.store.close()
