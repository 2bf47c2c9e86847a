from typing import List

from pydantic import BaseModel, Field

from cliphistory.models import ClipRecord


class Clip(BaseModel):
    value: str
    identity: str
    timestamp: int = Field(description="Milliseconds since the Unix epoch of the latest capture")
    source: str = ""

    @classmethod
    def from_record(cls, record: ClipRecord) -> "Clip":
        return cls(
            value=record.value,
            identity=record.identity,
            timestamp=record.captured_at,
            source=record.source,
        )


def to_clips(records: List[ClipRecord]) -> List[Clip]:
    return [Clip.from_record(record) for record in records]


class SelectClip(BaseModel):
    value: str


class SelectResult(BaseModel):
    ok: bool = True
    changed: bool


class Health(BaseModel):
    status: str = "ok"
    detector_running: bool
