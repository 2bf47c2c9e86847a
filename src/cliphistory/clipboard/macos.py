from typing import Optional

from AppKit import NSPasteboard, NSPasteboardTypeString

from cliphistory.clipboard.base import TextClipboard


class MacOSClipboard(TextClipboard):

    def __init__(self) -> None:
        self._pasteboard = NSPasteboard.generalPasteboard()

    def _get_text(self) -> Optional[str]:
        if NSPasteboardTypeString not in (self._pasteboard.types() or []):
            return None
        text = self._pasteboard.stringForType_(NSPasteboardTypeString)
        return str(text) if text is not None else None

    def _set_text(self, text: str) -> bool:
        self._pasteboard.clearContents()
        return bool(self._pasteboard.setString_forType_(text, NSPasteboardTypeString))
