"""Scraper package for hnreader."""

from hnreader.scraper.client import HackerNewsClient
from hnreader.scraper.fetcher import RequestsFetcher
from hnreader.scraper.models import Comment, Story, StoryList, StoryWithDetails, User
from hnreader.scraper.parsers import (
    is_vote_accepted,
    parse_comment_rows,
    parse_stories_list,
    parse_story_details,
    parse_user,
)

__all__ = [
    "Comment",
    "HackerNewsClient",
    "RequestsFetcher",
    "Story",
    "StoryList",
    "StoryWithDetails",
    "User",
    "is_vote_accepted",
    "parse_comment_rows",
    "parse_stories_list",
    "parse_story_details",
    "parse_user",
]
