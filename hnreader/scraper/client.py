"""Hacker News client: fetches pages and hands them to the parsers.

Information is obtained by scraping the website rather than the official
API, which has no convenient way to get all comments of a story and only
allows reads.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple
from urllib.parse import urlencode

from config.settings import settings
from hnreader.scraper.fetcher import AUTH_COOKIE, RequestsFetcher
from hnreader.scraper.models import Story, StoryList, StoryWithDetails, User
from hnreader.scraper.parsers import (
    is_vote_accepted,
    parse_stories_list,
    parse_story_details,
    parse_user,
)
from hnreader.tree import GapPolicy

logger = logging.getLogger(__name__)


class HackerNewsClient:
    """Read stories, comments and users, log in and upvote.

    Usable as a context manager, closing the underlying HTTP session on exit.
    """

    def __init__(
        self,
        fetcher: Optional[RequestsFetcher] = None,
        base_url: Optional[str] = None,
        gap_policy: Optional[GapPolicy] = None,
    ):
        """Initialize the client.

        Args:
            fetcher: HTTP fetcher (a fresh RequestsFetcher if None)
            base_url: Site root (uses settings default if None)
            gap_policy: Comment indent gap handling (uses settings default if None)
        """
        self.fetcher = fetcher or RequestsFetcher()
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.gap_policy = GapPolicy(gap_policy or settings.indent_gap_policy)

    def __enter__(self) -> "HackerNewsClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.fetcher.close()

    def stories_list(
        self,
        story_list: StoryList = StoryList.NEWS,
        page: int = 1,
        token: Optional[str] = None,
    ) -> Dict[int, Story]:
        """Get all the stories of a list at a given page.

        Args:
            story_list: Which list to read
            page: Page number, pages below 1 read the first page
            token: Login token; when given, stories carry their upvote auth

        Returns:
            Stories keyed by rank
        """
        url = f"{story_list.url(self.base_url)}?{urlencode({'p': max(page, 1)})}"
        html = self.fetcher.fetch_page(url, token=token)
        return parse_stories_list(html, self.base_url)

    def story_details(self, story_id: int) -> Optional[StoryWithDetails]:
        """Get a story with its text and comment tree, None if it does not exist."""
        url = f"{self.base_url}/item?{urlencode({'id': story_id})}"
        html = self.fetcher.fetch_page(url)
        return parse_story_details(html, self.base_url, self.gap_policy)

    def user_details(self, user_id: str) -> Optional[User]:
        """Get details about a user, None if the user does not exist."""
        url = f"{self.base_url}/user?{urlencode({'id': user_id})}"
        html = self.fetcher.fetch_page(url)
        return parse_user(html)

    def login(self, username: str, password: str) -> Optional[Tuple[str, Optional[datetime]]]:
        """Log in and return the auth token with its expiry.

        Returns:
            ``(token, expires)``, or None when the credentials are rejected
        """
        response = self.fetcher.post_form(
            f"{self.base_url}/login",
            {"goto": "news", "acct": username, "pw": password},
        )
        for cookie in response.cookies:
            if cookie.name == AUTH_COOKIE and cookie.value:
                expires = None
                if cookie.expires is not None:
                    expires = datetime.fromtimestamp(cookie.expires, tz=timezone.utc)
                logger.info("Logged in as %s", username)
                return cookie.value, expires
        logger.info("Login rejected for %s", username)
        return None

    def upvote_story(self, story_id: int, upvote_auth: str, token: str) -> bool:
        """Upvote a story; True when the vote went through."""
        query = urlencode({"id": story_id, "how": "up", "auth": upvote_auth, "goto": "news"})
        html = self.fetcher.fetch_page(f"{self.base_url}/vote?{query}", token=token)
        accepted = is_vote_accepted(html)
        logger.info("Upvote of story %d %s", story_id, "accepted" if accepted else "rejected")
        return accepted
