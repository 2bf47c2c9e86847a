from sqlmodel import Field, Index, SQLModel

from cliphistory.models import ClipRecord


class HistoryRow(SQLModel, table=True):
    """Schema of the ``history`` table, one row per distinct clipboard text."""

    __tablename__ = "history"
    __table_args__ = (
        Index('ix_history_timestamp', 'timestamp'),  # recency ordering
        Index('ix_history_source', 'source'),  # source filter
    )

    identity: str = Field(primary_key=True)  # md5 of value

    timestamp: int  # ms since epoch of the latest capture

    value: str

    source: str = Field(default="")

    @classmethod
    def from_record(cls, record: ClipRecord) -> "HistoryRow":
        return cls(
            identity=record.identity,
            timestamp=record.captured_at,
            value=record.value,
            source=record.source,
        )

    def to_record(self) -> ClipRecord:
        return ClipRecord(
            value=self.value,
            identity=self.identity,
            captured_at=self.timestamp,
            source=self.source or "",
        )
