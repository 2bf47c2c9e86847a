import hashlib
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


def now_millis() -> int:
	return int(time.time() * 1000)


def content_identity(value: str) -> str:
	"""MD5 hex digest of the UTF-8 bytes of ``value``."""
	return hashlib.md5(value.encode("utf-8")).hexdigest()


def is_blank(value: Optional[str]) -> bool:
	return value is None or not value.strip()


@dataclass(frozen=True)
class ClipRecord:
	"""Immutable clipboard history entry used across services and persistence."""
	value: str
	identity: str
	captured_at: int
	source: str = ""

	def preview(self, length: int = 50) -> str:
		return self.value[:length]

	def to_dict(self) -> Dict[str, Any]:
		return {
			"value": self.value,
			"identity": self.identity,
			"timestamp": self.captured_at,
			"source": self.source,
		}


class ClipRecordBuilder:
	"""Builds ``ClipRecord`` instances stamped with the current time.

	Callers must reject blank text before calling :meth:`build`.
	"""

	def __init__(self, clock: Optional[Callable[[], int]] = None) -> None:
		self._clock = clock or now_millis

	def build(self, value: str, source: Optional[str] = None) -> ClipRecord:
		return ClipRecord(
			value=value,
			identity=content_identity(value),
			captured_at=self._clock(),
			source=source or "",
		)
