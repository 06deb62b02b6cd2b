"""Local state package for hnreader."""

from hnreader.database.connection import default_schema_path, get_connection, init_database
from hnreader.database.models import Auth
from hnreader.database.operations import StateStore

__all__ = [
    "Auth",
    "StateStore",
    "default_schema_path",
    "get_connection",
    "init_database",
]
