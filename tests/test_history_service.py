import pytest

from cliphistory.exceptions import ClipboardWriteFailure, StoreWriteFailure
from cliphistory.services import ChangeDetector, PollOutcome


def test_write_back_sets_clipboard_and_records(service, clipboard, store, notified):
    assert service.write_back("abc") is True

    assert clipboard.writes == ["abc"]
    assert service.snapshot.value == "abc"
    assert [r.value for r in store.list_recent(10)] == ["abc"]
    assert len(notified) == 1


def test_detector_does_not_reingest_written_back_text(service, clipboard, store, notified):
    detector = ChangeDetector(service)
    service.write_back("abc")
    before = store.list_recent(10)

    assert detector.poll_once() is PollOutcome.UNCHANGED
    assert store.list_recent(10) == before
    assert len(notified) == 1


def test_write_back_of_snapshot_text_is_noop(service, clipboard, store):
    service.snapshot.set("abc")

    assert service.write_back("abc") is False
    assert clipboard.writes == []
    assert store.count() == 0


@pytest.mark.parametrize("text", ["", "  ", "\n"])
def test_write_back_blank_is_noop(service, clipboard, text):
    assert service.write_back(text) is False
    assert clipboard.writes == []
    assert service.snapshot.value is None


def test_write_back_refreshes_older_entry(service, clipboard, store):
    detector = ChangeDetector(service)
    for text in ("old", "new"):
        clipboard.text = text
        detector.poll_once()

    service.write_back("old")

    assert [r.value for r in store.list_recent(10)] == ["old", "new"]
    assert store.count() == 2


def test_clipboard_failure_keeps_snapshot(service, clipboard, store):
    service.snapshot.set("before")
    clipboard.reject_writes = True

    with pytest.raises(ClipboardWriteFailure):
        service.write_back("abc")

    assert service.snapshot.value == "before"
    assert store.count() == 0


def test_store_failure_reaches_caller(service, clipboard, store, monkeypatch, notified):
    def failing_upsert(record):
        raise StoreWriteFailure("read-only database")

    monkeypatch.setattr(store, "upsert", failing_upsert)

    with pytest.raises(StoreWriteFailure):
        service.write_back("abc")

    # clipboard already holds the text, the detector must not pick it up
    assert service.snapshot.value == "abc"
    assert notified == []


def test_queries_use_default_limit(service):
    service.list_limit = 2
    for text in ("a", "b", "c"):
        service.write_back(text)

    assert len(service.list_clips()) == 2
    assert len(service.list_clips(10)) == 3
    assert len(service.search_clips("")) == 2
    assert service.list_sources() == ["Terminal"]
