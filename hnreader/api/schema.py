"""GraphQL schema exposing stories and flattened comment threads."""

import asyncio
import enum
import logging
from typing import List, Optional

import strawberry
from strawberry.types import Info

from hnreader.scraper import models
from hnreader.scraper.client import HackerNewsClient
from hnreader.tree import Node, walk

logger = logging.getLogger(__name__)


@strawberry.type(description="Information about a story.")
class Story:
    id: int
    title: str
    url: str = strawberry.field(
        description="Story full URL. For text stories, the URL is on the site itself."
    )
    url_displayed: Optional[str] = strawberry.field(
        description="URL as displayed, often the domain only (e.g. “github.com/user”)."
    )
    user: Optional[str]
    score: Optional[int]
    date: str
    date_displayed: str = strawberry.field(
        description="Date as displayed, e.g. “2 months ago”."
    )
    comment_count: Optional[int]

    @classmethod
    def from_model(cls, story: models.Story) -> "Story":
        return cls(
            id=story.id,
            title=story.title,
            url=story.url,
            url_displayed=story.url_displayed,
            user=story.user,
            score=story.score,
            date=story.date.isoformat(),
            date_displayed=story.date_displayed,
            comment_count=story.comment_count,
        )


@strawberry.type(description="A story with the rank it was listed at.")
class StoryWithRank:
    rank: int
    story: Story


@strawberry.enum(description="Available story lists.")
class StoryList(enum.Enum):
    NEWS = "news"
    NEWEST = "newest"
    ASK = "ask"
    SHOW = "show"
    JOBS = "jobs"
    BEST = "best"

    def to_model(self) -> models.StoryList:
        return models.StoryList(self.value)


@strawberry.type(
    description="A comment posted on a story. Replies point at their parent by id."
)
class Comment:
    parent: Optional[int] = strawberry.field(
        description="ID of the parent comment, null if posted on the story."
    )
    id: int
    user: Optional[str]
    date: Optional[str]
    date_displayed: str
    html_content: str
    children: List[int] = strawberry.field(description="IDs of the reply comments.")

    @classmethod
    def from_node(cls, node: Node[models.Comment]) -> "Comment":
        comment = node.payload
        parent = node.parent
        return cls(
            parent=parent.payload.id if parent is not None else None,
            id=comment.id,
            user=comment.user,
            date=comment.date.isoformat() if comment.date else None,
            date_displayed=comment.date_displayed,
            html_content=comment.html_content,
            children=[child.payload.id for child in node.children],
        )


def flatten_comments(roots: List[Node[models.Comment]]) -> List[Comment]:
    """Comments in reading order, each tagged with its parent id."""
    return [Comment.from_node(node) for _, node in walk(roots)]


@strawberry.type(description="A story with its text and its comments.")
class StoryWithDetails:
    story: Story
    html_content: Optional[str]
    comments: List[Comment]

    @classmethod
    def from_model(cls, details: models.StoryWithDetails) -> "StoryWithDetails":
        return cls(
            story=Story.from_model(details.story),
            html_content=details.html_content,
            comments=flatten_comments(details.comments),
        )


@strawberry.input
class StoriesInListInput:
    list: Optional[StoryList] = strawberry.field(
        default=None, description="List to read (default: top stories)."
    )
    page: Optional[int] = strawberry.field(
        default=None,
        description="Page number from 1 (default: 1). Lower values read the first page.",
    )


def get_client(info: Info) -> HackerNewsClient:
    return info.context["client"]


@strawberry.type
class Query:
    @strawberry.field(description="Stories of a list at a given page, ordered by rank.")
    async def stories(self, info: Info, input: StoriesInListInput) -> List[StoryWithRank]:
        story_list = input.list.to_model() if input.list else models.StoryList.NEWS
        stories = await asyncio.to_thread(
            get_client(info).stories_list, story_list, input.page or 1
        )
        return [
            StoryWithRank(rank=rank, story=Story.from_model(stories[rank]))
            for rank in sorted(stories)
        ]

    @strawberry.field(description="Details of a story, null for a non-existent id.")
    async def story(self, info: Info, id: int) -> Optional[StoryWithDetails]:
        details = await asyncio.to_thread(get_client(info).story_details, id)
        if details is None:
            logger.info("Story %d not found", id)
            return None
        return StoryWithDetails.from_model(details)


schema = strawberry.Schema(query=Query)
