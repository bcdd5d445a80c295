"""Storage module for persistence."""

from .database import Database
from .history import HISTORY_KEY, HistoryStore

__all__ = ["Database", "HISTORY_KEY", "HistoryStore"]
