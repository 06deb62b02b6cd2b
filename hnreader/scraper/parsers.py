"""HTML parsing functions for news.ycombinator.com pages.

Parsing is defensive: optional fields come back as None or 0 when missing,
and rows that cannot be identified are skipped.
"""

import logging
import re
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from config.selectors import selectors
from config.settings import settings
from hnreader.scraper.models import Comment, Story, StoryWithDetails, User
from hnreader.tree import GapPolicy, build_forest, materialize

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"\d+")
DAY_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2})")
# Older pages only size a spacer image, 40px per level.
INDENT_PIXELS = 40


def safe_get_text(element: Optional[Tag], default: str = "") -> str:
    """Safely extract text from a BeautifulSoup element.

    Args:
        element: BeautifulSoup Tag or None
        default: Default value if extraction fails

    Returns:
        Extracted text or default
    """
    if element is None:
        return default
    return element.get_text(strip=True) or default


def safe_get_attr(element: Optional[Tag], attr: str, default: str = "") -> str:
    """Safely extract attribute from a BeautifulSoup element.

    Args:
        element: BeautifulSoup Tag or None
        attr: Attribute name
        default: Default value if extraction fails

    Returns:
        Attribute value or default
    """
    if element is None:
        return default
    value = element.get(attr, default)
    if isinstance(value, list):
        value = " ".join(value)
    return value or default


def parse_number(text: str) -> Optional[int]:
    """First integer in ``text`` ("42 points", "7\xa0comments"), else None."""
    match = NUMBER_PATTERN.search(text or "")
    return int(match.group()) if match else None


def parse_score(text: str) -> Optional[int]:
    return parse_number(text)


def parse_comment_count(text: str) -> Optional[int]:
    """Comment count from a subtext link; "discuss" means zero."""
    if "discuss" in text.lower():
        return 0
    return parse_number(text)


def parse_age(element: Optional[Tag]) -> Tuple[Optional[datetime], str]:
    """Parse an ``.age`` element into a UTC datetime and its displayed text.

    The ``title`` attribute holds an ISO timestamp, sometimes followed by
    the epoch seconds ("2021-07-19T14:33:05 1626705185").
    """
    if element is None:
        return None, ""
    displayed = safe_get_text(element)
    stamp = safe_get_attr(element, "title").split(" ")[0].rstrip("Z")
    if not stamp:
        return None, displayed
    try:
        parsed = datetime.fromisoformat(stamp)
    except ValueError:
        logger.warning("Unparseable timestamp: %s", stamp)
        return None, displayed
    return parsed.replace(tzinfo=timezone.utc), displayed


def parse_indent(element: Optional[Tag]) -> int:
    """Nesting level of a comment row, 0 when it cannot be told."""
    value = safe_get_attr(element, "indent")
    if value.isdigit():
        return int(value)
    spacer = element.find("img") if element is not None else None
    width = safe_get_attr(spacer, "width")
    if width.isdigit():
        return int(width) // INDENT_PIXELS
    return 0


def absolute_url(href: str, base_url: Optional[str] = None) -> str:
    """Resolve a link relative to the site root ("item?id=1" and friends)."""
    base_url = base_url or settings.base_url
    return urljoin(base_url.rstrip("/") + "/", href)


def inner_html(element: Tag, exclude_class: Optional[str] = None) -> str:
    """Markup inside ``element``, leaving out descendants with ``exclude_class``."""
    if exclude_class:
        for excluded in element.select(f".{exclude_class}"):
            excluded.decompose()
    return element.decode_contents().strip()


def parse_story_row(row: Tag, base_url: Optional[str] = None) -> Optional[Story]:
    """Parse a story title row and the subtext row following it.

    Args:
        row: ``tr.athing`` element of the story
        base_url: Site root for relative links

    Returns:
        Story, or None when the row has no id or title
    """
    sel = selectors.story_list
    story_id = safe_get_attr(row, "id")
    title_el = row.select_one(sel.title_link)
    if not story_id.isdigit() or title_el is None:
        logger.debug("Skipping story row without id or title")
        return None

    upvote_auth = None
    upvote_link = row.select_one(sel.upvote_link)
    if upvote_link is not None:
        query = parse_qs(urlparse(safe_get_attr(upvote_link, "href")).query)
        upvote_auth = query.get("auth", [None])[0]

    subtext = row.find_next_sibling("tr")
    sub = selectors.subtext
    score_el = subtext.select_one(sub.score) if subtext else None
    user_el = subtext.select_one(sub.user) if subtext else None
    age_el = subtext.select_one(sub.age) if subtext else None
    story_date, date_displayed = parse_age(age_el)

    comment_count = None
    if subtext is not None:
        for link in subtext.select(sub.links):
            link_text = link.get_text()
            if "comment" in link_text or link_text.strip() == "discuss":
                comment_count = parse_comment_count(link_text)
                break

    return Story(
        id=int(story_id),
        title=safe_get_text(title_el),
        url=absolute_url(safe_get_attr(title_el, "href"), base_url),
        url_displayed=safe_get_text(row.select_one(sel.site)) or None,
        upvote_auth=upvote_auth,
        user=safe_get_text(user_el) or None,
        score=parse_score(safe_get_text(score_el)) if score_el else None,
        date=story_date or datetime.fromtimestamp(0, tz=timezone.utc),
        date_displayed=date_displayed,
        comment_count=comment_count,
    )


def parse_stories_list(html: str, base_url: Optional[str] = None) -> Dict[int, Story]:
    """Parse a story listing page.

    Args:
        html: HTML content of a listing page
        base_url: Site root for relative links

    Returns:
        Stories keyed by their rank on the page
    """
    soup = BeautifulSoup(html, "lxml")
    stories: Dict[int, Story] = {}

    for row in soup.select(selectors.story_list.story_row):
        rank = parse_number(safe_get_text(row.select_one(selectors.story_list.rank)))
        story = parse_story_row(row, base_url)
        if rank is None or story is None:
            continue
        stories[rank] = story

    logger.info("Parsed %d stories from listing", len(stories))
    return stories


def parse_comment_rows(soup: BeautifulSoup) -> Tuple[List[Tuple[int, int]], Dict[int, Comment]]:
    """Flatten the comment rows of a story page.

    Args:
        soup: Parsed story page

    Returns:
        ``(indent, comment_id)`` pairs in document order, and the comments
        keyed by id
    """
    sel = selectors.comment
    entries: List[Tuple[int, int]] = []
    comments: Dict[int, Comment] = {}

    for row in soup.select(sel.row):
        comment_id = safe_get_attr(row, "id")
        if not comment_id.isdigit():
            logger.warning("Skipping comment row without a numeric id")
            continue

        content_el = row.select_one(sel.content)
        comment_date, date_displayed = parse_age(row.select_one(sel.age))
        comment = Comment(
            id=int(comment_id),
            user=safe_get_text(row.select_one(sel.user)) or None,
            date=comment_date,
            date_displayed=date_displayed,
            html_content=inner_html(content_el, sel.reply_class) if content_el else "",
        )
        entries.append((parse_indent(row.select_one(sel.indent)), comment.id))
        comments[comment.id] = comment

    return entries, comments


def parse_story_details(
    html: str,
    base_url: Optional[str] = None,
    gap_policy: Optional[GapPolicy] = None,
) -> Optional[StoryWithDetails]:
    """Parse a story page with its comment thread.

    Args:
        html: HTML content of /item?id=...
        base_url: Site root for relative links
        gap_policy: Handling of comments nested deeper than their
            predecessor allows (settings default if None)

    Returns:
        Story details, or None when the page holds no story
    """
    soup = BeautifulSoup(html, "lxml")
    row = soup.select_one(selectors.story_page.story_row)
    story = parse_story_row(row, base_url) if row is not None else None
    if story is None:
        return None

    html_content = None
    text_el = soup.select_one(selectors.story_page.text)
    if text_el is not None:
        html_content = inner_html(text_el) or None
    if html_content and "<form " in html_content:
        html_content = None

    entries, payloads = parse_comment_rows(soup)
    forest = build_forest(entries, gap_policy or GapPolicy(settings.indent_gap_policy))
    comments = materialize(forest, payloads)

    logger.info("Parsed story %d with %d comments", story.id, len(entries))
    return StoryWithDetails(story=story, html_content=html_content, comments=comments)


def parse_user(html: str) -> Optional[User]:
    """Parse a user profile page.

    Args:
        html: HTML content of /user?id=...

    Returns:
        User, or None for a page without a user ("No such user.")
    """
    soup = BeautifulSoup(html, "lxml")
    user_el = soup.select_one(selectors.user_page.user)
    table = user_el.find_parent("table") if user_el is not None else None
    if table is None:
        return None

    fields: Dict[str, Tag] = {}
    for tr in table.find_all("tr"):
        cells = tr.find_all("td", recursive=False)
        if len(cells) >= 2:
            label = safe_get_text(cells[0]).rstrip(":").lower()
            fields.setdefault(label, cells[1])

    created = None
    created_el = fields.get("created")
    if created_el is not None:
        link = created_el.select_one(selectors.user_page.created_link)
        match = DAY_PATTERN.search(safe_get_attr(link, "href"))
        if match:
            created = date.fromisoformat(match.group(1))
        else:
            try:
                created = datetime.strptime(safe_get_text(created_el), "%B %d, %Y").date()
            except ValueError:
                logger.warning("Unparseable creation date for %s", safe_get_text(user_el))
    if created is None:
        return None

    karma_el = fields.get("karma")
    about_el = fields.get("about")
    return User(
        id=safe_get_text(user_el),
        created=created,
        karma=parse_number(safe_get_text(karma_el)) or 0,
        about=inner_html(about_el) if about_el is not None else "",
    )


def is_vote_accepted(html: str) -> bool:
    """False when the vote endpoint answers with its login form again."""
    soup = BeautifulSoup(html, "lxml")
    return soup.select_one(selectors.vote.vote_form) is None
