"""Data models for Hacker News entities using dataclasses."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from hnreader.tree import Node


class StoryList(str, Enum):
    """Available story lists, valued by their path on the site."""

    NEWS = "news"
    NEWEST = "newest"
    ASK = "ask"
    SHOW = "show"
    JOBS = "jobs"
    BEST = "best"

    def url(self, base_url: str) -> str:
        return f"{base_url}/{self.value}"


@dataclass
class Story:
    """Information about a story."""

    id: int
    title: str
    # Full URL; text stories point back at the site itself.
    url: str
    date: datetime
    date_displayed: str
    # As displayed next to the title, often only the domain.
    url_displayed: Optional[str] = None
    # Needed to upvote; only present when logged in.
    upvote_auth: Optional[str] = None
    user: Optional[str] = None
    score: Optional[int] = None
    comment_count: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        return {
            "id_story": self.id,
            "title": self.title,
            "url": self.url,
            "url_displayed": self.url_displayed,
            "upvote_auth": self.upvote_auth,
            "user": self.user,
            "score": self.score,
            "date": self.date.isoformat(),
            "date_displayed": self.date_displayed,
            "comment_count": self.comment_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Story":
        return cls(
            id=data["id_story"],
            title=data["title"],
            url=data["url"],
            url_displayed=data.get("url_displayed"),
            upvote_auth=data.get("upvote_auth"),
            user=data.get("user"),
            score=data.get("score"),
            date=datetime.fromisoformat(data["date"]),
            date_displayed=data["date_displayed"],
            comment_count=data.get("comment_count"),
        )


@dataclass
class Comment:
    """A comment posted on a story.

    Replies and the parent comment are reached through the ``Node`` that
    wraps the comment once the thread is built.
    """

    id: int
    date: Optional[datetime]
    date_displayed: str = ""
    html_content: str = ""
    # None for deleted comments.
    user: Optional[str] = None


@dataclass
class User:
    """Information about a user."""

    id: str
    created: date
    karma: int = 0
    about: str = ""


@dataclass
class StoryWithDetails:
    """A story with its text and its threaded comments."""

    story: Story
    html_content: Optional[str] = None
    comments: List[Node[Comment]] = field(default_factory=list)
