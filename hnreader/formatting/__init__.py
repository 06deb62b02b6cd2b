"""Terminal formatting for hnreader."""

from hnreader.formatting.terminal import (
    format_comment,
    format_comment_tree,
    format_story,
    format_story_details,
    format_story_text,
    format_user,
    indent,
    wrap_text,
)

__all__ = [
    "format_comment",
    "format_comment_tree",
    "format_story",
    "format_story_details",
    "format_story_text",
    "format_user",
    "indent",
    "wrap_text",
]
