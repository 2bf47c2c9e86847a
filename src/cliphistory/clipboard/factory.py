"""
Platform-specific clipboard factory.

Picks the text clipboard implementation for the running platform. Import or
construction errors surface as ``ClipboardInitFailure`` since the history
daemon cannot run without clipboard access.
"""

import platform
from typing import Type

from cliphistory.clipboard.base import TextClipboard
from cliphistory.exceptions import ClipboardInitFailure


def get_clipboard_class() -> Type[TextClipboard]:
    system = platform.system()

    try:
        if system == "Windows":
            from cliphistory.clipboard.windows import WindowsClipboard
            return WindowsClipboard
        elif system == "Linux":
            from cliphistory.clipboard.linux import LinuxClipboard
            return LinuxClipboard
        elif system == "Darwin":
            from cliphistory.clipboard.macos import MacOSClipboard
            return MacOSClipboard
    except ImportError as exc:
        raise ClipboardInitFailure(f"Clipboard support for {system} is not installed", exc)

    raise ClipboardInitFailure(f"Platform '{system}' is not supported")


def get_clipboard() -> TextClipboard:
    clipboard_class = get_clipboard_class()
    try:
        return clipboard_class()
    except ClipboardInitFailure:
        raise
    except Exception as exc:
        raise ClipboardInitFailure("Failed to initialise clipboard", exc)
