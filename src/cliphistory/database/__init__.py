"""
Persistence for ClipHistory.
"""

from cliphistory.database.history_store import HistoryStore
from cliphistory.database.models import HistoryRow

__all__ = [
    'HistoryRow',
    'HistoryStore',
]
