"""Persistence of the recent-pick history."""

import json
from typing import Iterable, Optional

import aiosqlite
import structlog

from ..errors import PersistenceUnavailable
from .database import Database

logger = structlog.get_logger(__name__)

HISTORY_KEY = "recent_challenge_history"

# Errors that mean the slot is unusable; never surfaced to the user.
_STORAGE_ERRORS = (aiosqlite.Error, OSError, PersistenceUnavailable)


class HistoryStore:
    """Reads and writes the history slot in the key/value database.

    All failures are logged and absorbed: the roulette keeps working with
    its in-memory history only.
    """

    def __init__(self, db: Optional[Database] = None, key: str = HISTORY_KEY):
        """Initialize the history store.

        Args:
            db: Database instance
            key: Preference key holding the serialized history
        """
        self.db = db or Database()
        self.key = key

    async def open(self) -> bool:
        """Connect the underlying database. Returns False if unavailable."""
        try:
            await self.db.connect()
        except _STORAGE_ERRORS as e:
            logger.warning("history_store_unavailable", path=str(self.db.db_path), error=repr(e))
            return False
        return True

    async def close(self) -> None:
        try:
            await self.db.close()
        except _STORAGE_ERRORS as e:
            logger.warning("history_store_close_failed", error=repr(e))

    async def load(self) -> list[int]:
        """Read the persisted history ids, most recent first.

        Returns:
            The ids, or an empty list when the slot is missing or corrupt
        """
        try:
            raw = await self.db.get_preference(self.key)
        except _STORAGE_ERRORS as e:
            logger.warning("history_load_failed", error=repr(e))
            return []

        if raw is None:
            logger.warning("history_missing", key=self.key)
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("history_corrupt", error=repr(e))
            return []

        if not isinstance(data, list) or not all(
            isinstance(item, int) and not isinstance(item, bool) for item in data
        ):
            logger.warning("history_corrupt", value=raw[:200])
            return []

        return data

    async def save(self, ids: Iterable[int]) -> None:
        """Write the history ids. Failures are logged only."""
        value = json.dumps(list(ids))
        try:
            await self.db.set_preference(self.key, value)
        except _STORAGE_ERRORS as e:
            logger.warning("history_save_failed", error=repr(e))

    async def clear(self) -> None:
        """Remove the persisted history. Failures are logged only."""
        try:
            await self.db.delete_preference(self.key)
        except _STORAGE_ERRORS as e:
            logger.warning("history_clear_failed", error=repr(e))
