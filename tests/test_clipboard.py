import shutil
import subprocess
import sys

import pytest

from cliphistory.clipboard import factory
from cliphistory.clipboard.base import TextClipboard
from cliphistory.clipboard.linux import LinuxClipboard
from cliphistory.exceptions import (
    ClipboardError,
    ClipboardInitFailure,
    ClipboardUnavailable,
    ClipboardWriteFailure,
)


class FakeCommands:
    """Stands in for ``subprocess.run``, answering by command line."""

    def __init__(self, outputs):
        self.outputs = outputs
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append((list(command), kwargs))
        key = " ".join(command)
        if key not in self.outputs:
            raise FileNotFoundError(command[0])
        output = self.outputs[key]
        if isinstance(output, Exception):
            raise output
        return subprocess.CompletedProcess(command, 0, stdout=output, stderr=b"")


def _tools(monkeypatch, *available):
    monkeypatch.setattr(shutil, "which", lambda name: f"/usr/bin/{name}" if name in available else None)


@pytest.fixture
def wayland(monkeypatch):
    monkeypatch.setenv("WAYLAND_DISPLAY", "wayland-0")
    _tools(monkeypatch, "wl-paste", "wl-copy", "xclip")


@pytest.fixture
def x11(monkeypatch):
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    _tools(monkeypatch, "xclip")


def _commands(monkeypatch, outputs):
    fake = FakeCommands(outputs)
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


class _ScriptedClipboard(TextClipboard):
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error

    def _get_text(self):
        if self.error:
            raise self.error
        return self.text

    def _set_text(self, text):
        return False


def test_read_text_without_text_is_unavailable():
    with pytest.raises(ClipboardUnavailable):
        _ScriptedClipboard(None).read_text()


def test_read_text_wraps_backend_errors():
    with pytest.raises(ClipboardError) as info:
        _ScriptedClipboard(error=RuntimeError("boom")).read_text()

    assert not isinstance(info.value, ClipboardUnavailable)
    assert isinstance(info.value.original_error, RuntimeError)


def test_write_text_rejected_by_backend():
    with pytest.raises(ClipboardWriteFailure):
        _ScriptedClipboard("x").write_text("x")


@pytest.mark.parametrize(
    "types, expected",
    [
        (["text/plain;charset=utf-8"], True),
        (["UTF8_STRING", "TARGETS"], True),
        (["STRING"], True),
        (["image/png", "TARGETS"], False),
        ([], False),
    ],
)
def test_has_text_target(x11, types, expected):
    assert LinuxClipboard()._has_text_target(types) is expected


def test_wayland_read(wayland, monkeypatch):
    fake = _commands(monkeypatch, {
        "wl-paste --list-types": b"text/plain;charset=utf-8\ntext/html\n",
        "wl-paste --no-newline": "héllo".encode("utf-8"),
    })

    assert LinuxClipboard().read_text() == "héllo"
    assert [call[0][0] for call in fake.calls] == ["wl-paste", "wl-paste"]


def test_xclip_read(x11, monkeypatch):
    fake = _commands(monkeypatch, {
        "xclip -selection clipboard -t TARGETS -o": b"TARGETS\nUTF8_STRING\n",
        "xclip -selection clipboard -o": b"from x11",
    })

    assert LinuxClipboard().read_text() == "from x11"
    assert fake.calls[-1][0] == ["xclip", "-selection", "clipboard", "-o"]


def test_image_only_clipboard_is_unavailable(x11, monkeypatch):
    fake = _commands(monkeypatch, {
        "xclip -selection clipboard -t TARGETS -o": b"TARGETS\nimage/png\n",
        "xclip -selection clipboard -o": b"\x89PNG",
    })

    with pytest.raises(ClipboardUnavailable):
        LinuxClipboard().read_text()
    assert len(fake.calls) == 1


def test_failed_read_is_unavailable(wayland, monkeypatch):
    _commands(monkeypatch, {
        "wl-paste --list-types": b"text/plain\n",
        "wl-paste --no-newline": subprocess.CalledProcessError(1, "wl-paste"),
    })

    with pytest.raises(ClipboardUnavailable):
        LinuxClipboard().read_text()


def test_undecodable_bytes_are_replaced(x11, monkeypatch):
    _commands(monkeypatch, {
        "xclip -selection clipboard -t TARGETS -o": b"UTF8_STRING\n",
        "xclip -selection clipboard -o": b"ok \xff\xfe",
    })

    assert LinuxClipboard().read_text() == "ok \ufffd\ufffd"


def test_wayland_write_uses_wl_copy(wayland, monkeypatch):
    fake = _commands(monkeypatch, {"wl-copy": b""})

    LinuxClipboard().write_text("hello")

    command, kwargs = fake.calls[0]
    assert command == ["wl-copy"]
    assert kwargs["input"] == b"hello"


def test_failed_write_is_typed(x11, monkeypatch):
    _commands(monkeypatch, {
        "xclip -selection clipboard": subprocess.CalledProcessError(1, "xclip"),
    })

    with pytest.raises(ClipboardWriteFailure):
        LinuxClipboard().write_text("hello")


def test_missing_tools_fail_init(monkeypatch):
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    _tools(monkeypatch)

    with pytest.raises(ClipboardInitFailure):
        LinuxClipboard()


def test_unsupported_platform(monkeypatch):
    monkeypatch.setattr(factory.platform, "system", lambda: "Plan9")

    with pytest.raises(ClipboardInitFailure):
        factory.get_clipboard_class()


def test_linux_platform_selects_linux_clipboard(monkeypatch):
    monkeypatch.setattr(factory.platform, "system", lambda: "Linux")

    assert factory.get_clipboard_class() is LinuxClipboard


def test_missing_platform_library_fails_init(monkeypatch):
    monkeypatch.setattr(factory.platform, "system", lambda: "Darwin")
    monkeypatch.setitem(sys.modules, "AppKit", None)
    monkeypatch.delitem(sys.modules, "cliphistory.clipboard.macos", raising=False)

    with pytest.raises(ClipboardInitFailure):
        factory.get_clipboard_class()


def test_get_clipboard_without_tools(monkeypatch):
    monkeypatch.setattr(factory.platform, "system", lambda: "Linux")
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    _tools(monkeypatch)

    with pytest.raises(ClipboardInitFailure):
        factory.get_clipboard()
