import time
from typing import Optional

import win32clipboard as wc
import win32con

from cliphistory.clipboard.base import TextClipboard
from cliphistory.exceptions import ClipboardError


class WindowsClipboard(TextClipboard):
    _OPEN_ATTEMPTS = 3

    def _open(self) -> None:
        # Another process may hold the clipboard for a few milliseconds.
        last_error = None
        for _ in range(self._OPEN_ATTEMPTS):
            try:
                wc.OpenClipboard()
                return
            except Exception as exc:
                last_error = exc
                time.sleep(0.05)
        raise ClipboardError("Could not open the Windows clipboard", last_error)

    def _get_text(self) -> Optional[str]:
        self._open()
        try:
            if not wc.IsClipboardFormatAvailable(win32con.CF_UNICODETEXT):
                return None
            return wc.GetClipboardData(win32con.CF_UNICODETEXT)
        finally:
            wc.CloseClipboard()

    def _set_text(self, text: str) -> bool:
        self._open()
        try:
            wc.EmptyClipboard()
            wc.SetClipboardData(win32con.CF_UNICODETEXT, text)
            return True
        finally:
            wc.CloseClipboard()
