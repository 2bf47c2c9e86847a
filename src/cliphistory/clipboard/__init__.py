"""
Cross-platform text clipboard access.
"""

from cliphistory.clipboard.base import TextClipboard
from cliphistory.clipboard.factory import get_clipboard, get_clipboard_class

__all__ = [
    'TextClipboard',
    'get_clipboard',
    'get_clipboard_class',
]
