"""SQLite key/value storage."""

import aiosqlite
from pathlib import Path
from typing import Optional

from ..errors import PersistenceUnavailable

DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "challenge-roulette"


class Database:
    """SQLite database holding small key/value preferences."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize the database.

        Args:
            db_path: Path to SQLite database file.
                    Defaults to ~/.local/share/challenge-roulette/data.db
        """
        if db_path is None:
            db_path = DEFAULT_DATA_DIR / "data.db"

        self.db_path = Path(db_path)
        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Connect to the database."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self.db_path)
        await self._create_tables()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def _create_tables(self) -> None:
        """Create database tables if they don't exist."""
        assert self._connection is not None

        await self._connection.executescript("""
            CREATE TABLE IF NOT EXISTS user_preferences (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
        """)
        await self._connection.commit()

    @property
    def connection(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if self._connection is None:
            raise PersistenceUnavailable("Database not connected. Call connect() first.")
        return self._connection

    async def set_preference(self, key: str, value: str) -> None:
        """Set a user preference."""
        await self.connection.execute(
            """
            INSERT INTO user_preferences (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET value=?, updated_at=CURRENT_TIMESTAMP
            """,
            (key, value, value),
        )
        await self.connection.commit()

    async def get_preference(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a user preference."""
        async with self.connection.execute(
            "SELECT value FROM user_preferences WHERE key = ?", (key,)
        ) as cursor:
            row = await cursor.fetchone()
            return row[0] if row else default

    async def delete_preference(self, key: str) -> None:
        """Remove a user preference."""
        await self.connection.execute(
            "DELETE FROM user_preferences WHERE key = ?", (key,)
        )
        await self.connection.commit()
