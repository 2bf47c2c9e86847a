"""
Foreground application lookup used to label captured clips.
"""

from cliphistory.foreground.base import ForegroundResolver, NullResolver, resolve_source
from cliphistory.foreground.factory import get_foreground_resolver

__all__ = [
    'ForegroundResolver',
    'NullResolver',
    'get_foreground_resolver',
    'resolve_source',
]
