"""
Durable, content-addressed clipboard history backed by SQLite.

Rows are keyed by the MD5 identity of their text, so re-copying a known text
refreshes its timestamp and source instead of adding a row.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Union

from sqlalchemy import case, delete, event, func
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, col, create_engine, select

from cliphistory.config import DEFAULT_LIST_LIMIT
from cliphistory.database.models import HistoryRow
from cliphistory.exceptions import (
    StoreOpenFailure,
    StoreQueryFailure,
    StoreWriteFailure,
)
from cliphistory.models import ClipRecord, is_blank

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def _register_functions(dbapi_connection, _connection_record) -> None:
    # SQLite's lower() only folds ASCII
    dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)


def _build_engine(path: Union[str, Path]):
    if str(path) == MEMORY:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_file = Path(path).expanduser()
        db_file.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{db_file}",
            connect_args={"check_same_thread": False, "timeout": 5.0},
        )
    event.listen(engine, "connect", _register_functions)
    return engine


class HistoryStore:
    """Clipboard history table with upsert, listing and search.

    All calls are serialised through one re-entrant lock, so a store can be
    shared by the detector thread and any number of API threads.
    """

    def __init__(self, engine) -> None:
        self._engine = engine
        self._lock = threading.RLock()

    @classmethod
    def open(cls, path: Union[str, Path] = MEMORY) -> "HistoryStore":
        """Open (and create if needed) the history database at ``path``.

        Raises:
            StoreOpenFailure: the file or table could not be created.
        """
        try:
            engine = _build_engine(path)
            SQLModel.metadata.create_all(engine, tables=[HistoryRow.__table__])
        except (OSError, SQLAlchemyError) as exc:
            raise StoreOpenFailure(f"Cannot open history database at {path}", exc)
        logger.info("History database ready at %s", path)
        return cls(engine)

    def close(self) -> None:
        with self._lock:
            self._engine.dispose()

    def __enter__(self) -> "HistoryStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def upsert(self, record: ClipRecord) -> None:
        """Insert ``record`` or refresh the row that shares its identity.

        The stored timestamp never moves backwards; the source follows
        whichever capture carries the newer timestamp.
        """
        table = HistoryRow.__table__
        stmt = insert(table).values(
            identity=record.identity,
            timestamp=record.captured_at,
            value=record.value,
            source=record.source,
        )
        newer = stmt.excluded.timestamp >= table.c.timestamp
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.identity],
            set_={
                "timestamp": func.max(table.c.timestamp, stmt.excluded.timestamp),
                "source": case((newer, stmt.excluded.source), else_=table.c.source),
            },
        )
        try:
            with self._lock, self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreWriteFailure(f"Failed to upsert clip {record.identity}", exc)
        logger.debug("Upserted clip %s from %r", record.identity, record.source)

    def delete(self, identity: str) -> bool:
        try:
            with self._lock, Session(self._engine) as session:
                row = session.get(HistoryRow, identity)
                if row is None:
                    return False
                session.delete(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreWriteFailure(f"Failed to delete clip {identity}", exc)
        return True

    def clear(self) -> int:
        """Delete every row and return how many were removed."""
        try:
            with self._lock, self._engine.begin() as conn:
                table = HistoryRow.__table__
                removed = conn.execute(select(func.count()).select_from(table)).scalar_one()
                conn.execute(delete(table))
        except SQLAlchemyError as exc:
            raise StoreWriteFailure("Failed to clear history", exc)
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_recent(self, limit: int = DEFAULT_LIST_LIMIT) -> List[ClipRecord]:
        """Newest-first records, at most ``limit`` of them."""
        if limit <= 0:
            return []
        statement = self._newest_first(select(HistoryRow)).limit(limit)
        return self._fetch(statement, "list clips")

    def search(
        self,
        term: str = "",
        source_filter: str = "",
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[ClipRecord]:
        """Case-insensitive substring search, optionally restricted to a source.

        When both ``term`` and ``source_filter`` are blank this is exactly
        :meth:`list_recent`. Otherwise a non-empty ``term`` is matched as
        given, whitespace included.
        """
        term = term or ""
        source_filter = (source_filter or "").strip()
        if is_blank(term) and not source_filter:
            return self.list_recent(limit)
        if limit <= 0:
            return []

        statement = select(HistoryRow)
        if term:
            needle = term.casefold()
            statement = statement.where(func.instr(func.casefold(HistoryRow.value), needle) > 0)
        if source_filter:
            statement = statement.where(HistoryRow.source == source_filter)
        statement = self._newest_first(statement).limit(limit)
        return self._fetch(statement, "search clips")

    def distinct_sources(self) -> List[str]:
        statement = (
            select(HistoryRow.source)
            .where(col(HistoryRow.source).is_not(None))
            .where(HistoryRow.source != "")
            .distinct()
            .order_by(HistoryRow.source)
        )
        try:
            with self._lock, Session(self._engine) as session:
                return list(session.exec(statement).all())
        except SQLAlchemyError as exc:
            raise StoreQueryFailure("Failed to list sources", exc)

    def get(self, identity: str) -> Optional[ClipRecord]:
        try:
            with self._lock, Session(self._engine) as session:
                row = session.get(HistoryRow, identity)
                return row.to_record() if row else None
        except SQLAlchemyError as exc:
            raise StoreQueryFailure(f"Failed to load clip {identity}", exc)

    def count(self) -> int:
        try:
            with self._lock, Session(self._engine) as session:
                return session.exec(select(func.count()).select_from(HistoryRow)).one()
        except SQLAlchemyError as exc:
            raise StoreQueryFailure("Failed to count clips", exc)

    @staticmethod
    def _newest_first(statement):
        return statement.order_by(col(HistoryRow.timestamp).desc(), col(HistoryRow.identity))

    def _fetch(self, statement, action: str) -> List[ClipRecord]:
        try:
            with self._lock, Session(self._engine) as session:
                return [row.to_record() for row in session.exec(statement).all()]
        except SQLAlchemyError as exc:
            raise StoreQueryFailure(f"Failed to {action}", exc)
