"""CSS selectors for news.ycombinator.com scraping.

All selectors are centralized here for easy maintenance.
Modify these values if the website structure changes.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StoryListSelectors:
    """Selectors for the story listing pages (/news, /newest, ...)."""

    story_row: str = "tr.athing"
    rank: str = ".rank"
    title_link: str = ".titleline > a, a.titlelink"
    site: str = ".sitestr"
    upvote_link: str = "a.clicky, a[id^='up_']"


@dataclass(frozen=True)
class SubtextSelectors:
    """Selectors for the metadata line under a story title."""

    score: str = ".score"
    user: str = ".hnuser"
    age: str = ".age"
    links: str = "a"


@dataclass(frozen=True)
class StoryPageSelectors:
    """Selectors for an individual story page (/item?id=...)."""

    story_row: str = "table.fatitem tr.athing"
    text: str = ".fatitem .toptext"


@dataclass(frozen=True)
class CommentSelectors:
    """Selectors for comment rows on a story page."""

    row: str = ".comment-tree tr.comtr"
    indent: str = ".ind"
    user: str = ".hnuser"
    age: str = ".age"
    content: str = ".commtext"
    reply_class: str = "reply"


@dataclass(frozen=True)
class UserPageSelectors:
    """Selectors for user profile pages (/user?id=...)."""

    user: str = "a.hnuser"
    created_link: str = "a[href*='day=']"


@dataclass(frozen=True)
class VoteSelectors:
    """Selectors for the vote endpoint response."""

    vote_form: str = "form[action='vote']"


@dataclass(frozen=True)
class Selectors:
    """Container for all selector groups."""

    story_list: StoryListSelectors = StoryListSelectors()
    subtext: SubtextSelectors = SubtextSelectors()
    story_page: StoryPageSelectors = StoryPageSelectors()
    comment: CommentSelectors = CommentSelectors()
    user_page: UserPageSelectors = UserPageSelectors()
    vote: VoteSelectors = VoteSelectors()


# Global selectors instance
selectors = Selectors()
