from typing import List, Optional

import pytest

from cliphistory.clipboard import TextClipboard
from cliphistory.database import HistoryStore
from cliphistory.exceptions import ResolverFailure
from cliphistory.foreground import ForegroundResolver
from cliphistory.models import ClipRecord, ClipRecordBuilder
from cliphistory.services import CallbackNotifier, HistoryService


class FakeClipboard(TextClipboard):
    """In-memory clipboard; ``text = None`` means no text content."""

    def __init__(self, text: Optional[str] = None) -> None:
        self.text = text
        self.writes: List[str] = []
        self.read_error: Optional[Exception] = None
        self.reject_writes = False

    def _get_text(self) -> Optional[str]:
        if self.read_error is not None:
            raise self.read_error
        return self.text

    def _set_text(self, text: str) -> bool:
        if self.reject_writes:
            return False
        self.writes.append(text)
        self.text = text
        return True


class FakeResolver(ForegroundResolver):

    def __init__(self, name: str = "Terminal") -> None:
        super().__init__()
        self.name = name
        self.fail = False
        self.calls = 0

    def current_foreground_app_name(self) -> str:
        self.calls += 1
        if self.fail:
            raise ResolverFailure("no focused window")
        return self.name


class StepClock:
    """Deterministic millisecond clock advancing by ``step`` per call."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 10) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def builder(clock):
    return ClipRecordBuilder(clock=clock)


@pytest.fixture
def store():
    history = HistoryStore.open(":memory:")
    yield history
    history.close()


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def notified():
    return []


@pytest.fixture
def service(store, clipboard, resolver, builder, notified):
    notifier = CallbackNotifier([notified.append])
    return HistoryService(store, clipboard, resolver=resolver, notifier=notifier, builder=builder)


def make_record(value: str, captured_at: int, source: str = "") -> ClipRecord:
    return ClipRecordBuilder(clock=lambda: captured_at).build(value, source)
