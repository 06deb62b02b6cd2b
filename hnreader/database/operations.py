"""State operations: last listed stories and the login token.

Tables are created from the schema on first use.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from hnreader.database.connection import check_database_exists, get_connection, init_database
from hnreader.database.models import Auth, get_timestamp
from hnreader.scraper.models import Story

logger = logging.getLogger(__name__)


class StateStore:
    """Persists what the CLI needs between invocations."""

    def __init__(self, db_path: Optional[Path] = None, schema_path: Optional[Path] = None):
        """Initialize the store.

        Args:
            db_path: SQLite file (uses settings default if None)
            schema_path: Schema used when the file is new (packaged schema if None)
        """
        self.db_path = db_path
        self.schema_path = schema_path

    def ensure_tables(self) -> None:
        """Create tables if they do not exist."""
        if check_database_exists(self.db_path):
            logger.debug("State tables already exist")
            return
        init_database(self.db_path, self.schema_path)

    def save_last_stories(self, stories: Dict[int, Story]) -> int:
        """Merge listed stories into the saved ones, replacing equal ranks.

        Returns:
            Number of stories written
        """
        self.ensure_tables()
        if not stories:
            return 0

        saved_at = get_timestamp()
        rows = [
            {"rank": rank, **story.to_dict(), "saved_at": saved_at}
            for rank, story in stories.items()
        ]
        columns = list(rows[0].keys())
        placeholders = ", ".join(f":{col}" for col in columns)
        sql = (
            f"INSERT OR REPLACE INTO last_stories ({', '.join(columns)}) "
            f"VALUES ({placeholders})"
        )
        with get_connection(self.db_path) as conn:
            conn.executemany(sql, rows)
        logger.debug("Saved %d stories", len(rows))
        return len(rows)

    def get_last_story(self, rank: int) -> Optional[Story]:
        """Story last listed at ``rank``, if any."""
        self.ensure_tables()
        with get_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT * FROM last_stories WHERE rank = ?", (rank,)
            ).fetchone()
        return Story.from_dict(dict(row)) if row else None

    def get_last_stories(self) -> Dict[int, Story]:
        self.ensure_tables()
        with get_connection(self.db_path) as conn:
            rows = conn.execute("SELECT * FROM last_stories ORDER BY rank").fetchall()
        return {row["rank"]: Story.from_dict(dict(row)) for row in rows}

    def save_auth(self, auth: Auth) -> None:
        self.ensure_tables()
        data = auth.to_dict()
        columns = ", ".join(data.keys())
        placeholders = ", ".join(f":{col}" for col in data)
        with get_connection(self.db_path) as conn:
            conn.execute(f"INSERT OR REPLACE INTO auth ({columns}) VALUES ({placeholders})", data)
        logger.debug("Saved auth for %s", auth.username)

    def get_auth(self) -> Optional[Auth]:
        """The saved login, None when signed out."""
        self.ensure_tables()
        with get_connection(self.db_path) as conn:
            row = conn.execute("SELECT * FROM auth WHERE id = 1").fetchone()
        return Auth.from_dict(dict(row)) if row else None

    def clear_auth(self) -> bool:
        """Forget the saved login; True if there was one."""
        self.ensure_tables()
        with get_connection(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM auth")
            return cursor.rowcount > 0
