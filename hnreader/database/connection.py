"""Database connection management for the local state file."""

import logging
import sqlite3
from contextlib import contextmanager
from importlib import resources
from pathlib import Path
from typing import Generator, Optional

from config.settings import settings

logger = logging.getLogger(__name__)

SCHEMA_FILE = "schema.sql"


def get_sqlite_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Create a SQLite connection with proper configuration.

    Args:
        db_path: Path to database file. Uses settings default if None.

    Returns:
        Configured SQLite connection
    """
    if db_path is None:
        db_path = settings.state_path

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_connection(db_path: Optional[Path] = None) -> Generator[sqlite3.Connection, None, None]:
    """Context manager committing on success and rolling back on error.

    Yields:
        SQLite connection
    """
    conn = get_sqlite_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception as e:
        conn.rollback()
        logger.error("Database error: %s", e)
        raise
    finally:
        conn.close()


def default_schema_path() -> Path:
    """Schema shipped inside this package."""
    return Path(str(resources.files(__package__).joinpath(SCHEMA_FILE)))


def init_database(db_path: Optional[Path] = None, schema_path: Optional[Path] = None) -> None:
    """Initialize the database with the schema.

    Args:
        db_path: SQLite file (uses settings default if None)
        schema_path: Schema to run (settings override, else the packaged one)
    """
    if schema_path is None:
        schema_path = settings.schema_path or default_schema_path()
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")
    schema_sql = schema_path.read_text(encoding="utf-8")
    with get_connection(db_path) as conn:
        conn.executescript(schema_sql)
    logger.info("State database initialized at %s", db_path or settings.state_path)


def check_database_exists(db_path: Optional[Path] = None) -> bool:
    """Check if the database exists and has tables."""
    path = db_path or settings.state_path
    if not path.exists():
        return False
    with get_connection(path) as conn:
        cursor = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='last_stories'"
        )
        return cursor.fetchone() is not None
