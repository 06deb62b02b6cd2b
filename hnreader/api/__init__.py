"""GraphQL API package for hnreader."""

from hnreader.api.schema import flatten_comments, schema

__all__ = [
    "flatten_comments",
    "schema",
]
