from abc import ABC, abstractmethod
from typing import Optional

from cliphistory.exceptions import (
    ClipboardError,
    ClipboardUnavailable,
    ClipboardWriteFailure,
)


class TextClipboard(ABC):
    """Text-only access to the system clipboard.

    Subclasses implement ``_get_text`` returning ``None`` when the clipboard
    holds no text, and ``_set_text`` returning ``False`` on failure.
    """

    @abstractmethod
    def _get_text(self) -> Optional[str]:
        pass

    @abstractmethod
    def _set_text(self, text: str) -> bool:
        pass

    def read_text(self) -> str:
        try:
            text = self._get_text()
        except ClipboardError:
            raise
        except Exception as exc:
            raise ClipboardError("Failed to read clipboard", exc)
        if text is None:
            raise ClipboardUnavailable("Clipboard holds no text content")
        return text

    def write_text(self, text: str) -> None:
        try:
            ok = self._set_text(text)
        except Exception as exc:
            raise ClipboardWriteFailure("Failed to set clipboard", exc)
        if not ok:
            raise ClipboardWriteFailure("Clipboard rejected the text")
