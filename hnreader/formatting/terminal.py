"""Render stories, users and comments as styled terminal text."""

import html
import re
import textwrap
from typing import Iterator, List, Optional

import click

from config.settings import settings
from hnreader.scraper.models import Comment, Story, StoryWithDetails, User
from hnreader.tree import Node, walk

LINK_PATTERN = re.compile(r"<a\s[^>]*>(.*?)</a>", re.S)
ITALIC_PATTERN = re.compile(r"<i>(.*?)</i>", re.S)
TAG_PATTERN = re.compile(r"<[^>]+>")
INDENT_UNIT = "  "


def indent(text: str, level: int) -> str:
    """Prefix every line of ``text`` with ``level`` indentation units."""
    prefix = INDENT_UNIT * level
    return "\n".join(f"{prefix}{line}" for line in text.splitlines())


def wrap_text(text: str, width: int) -> str:
    """Wrap each paragraph to ``width`` columns, keeping blank lines."""
    return "\n".join(
        textwrap.fill(line, width=width, break_on_hyphens=True) if line.strip() else ""
        for line in text.splitlines()
    )


def format_story_text(markup: str, level: int = 0, width: Optional[int] = None) -> str:
    """Turn comment or story HTML into wrapped, indented terminal text.

    Paragraphs become blank-line separated, link text is dimmed, ``<i>`` is
    italicised, other tags are dropped and entities decoded.
    """
    width = width or settings.text_width
    text = markup.replace("<p>", "\n\n").replace("</p>", "")
    text = LINK_PATTERN.sub(lambda m: click.style(m.group(1), dim=True), text)
    text = ITALIC_PATTERN.sub(lambda m: click.style(m.group(1), italic=True), text)
    text = html.unescape(TAG_PATTERN.sub("", text))
    return indent(wrap_text(text.strip(), max(width - len(INDENT_UNIT) * level, 20)), level)


def format_story_title(title: str) -> str:
    return click.style(title, bold=True)


def format_story_short_url(story: Story) -> str:
    if not story.url_displayed:
        return ""
    return click.style(f"({story.url_displayed})", dim=True)


def format_second_line(story: Story) -> str:
    by = f" by {story.user}" if story.user else ""
    return click.style(
        f"{story.score or 0} points{by} {story.date_displayed} | {story.comment_count or 0} comments",
        dim=True,
        italic=True,
    )


def format_story(rank: int, story: Story) -> str:
    """One listing entry: rank, title, domain, then the metadata line."""
    return (
        f"{rank:2}. ▲ {format_story_title(story.title)} {format_story_short_url(story)}\n"
        f"      {format_second_line(story)}"
    )


def format_story_details(details: StoryWithDetails) -> str:
    text = ""
    if details.html_content:
        text = f"\n\n{format_story_text(details.html_content)}"
    return (
        f"▲ {format_story_title(details.story.title)}\n"
        f"  {format_second_line(details.story)}\n"
        f"  ↳ {details.story.url}{text}"
    )


def format_comment_header(comment: Comment) -> str:
    return click.style(
        f"{comment.user or '[deleted]'} {comment.date_displayed}",
        dim=True,
        italic=True,
    )


def format_comment(comment: Comment, level: int = 0) -> str:
    return f"{indent(format_comment_header(comment), level)}\n{format_story_text(comment.html_content, level)}"


def format_comment_tree(comments: List[Node[Comment]]) -> Iterator[str]:
    """Formatted comments in reading order, each indented by its depth."""
    for level, node in walk(comments):
        yield f"\n{format_comment(node.payload, level)}\n"


def format_user(user: User) -> str:
    label_width = len("created: ")
    about = format_story_text(user.about, width=settings.text_width - label_width)
    about = about.replace("\n", "\n" + " " * label_width)
    return (
        f"{click.style('user:    ', dim=True)}{user.id}\n"
        f"{click.style('created: ', dim=True)}{user.created.day}-{user.created:%b-%Y}\n"
        f"{click.style('karma:   ', dim=True)}{user.karma}\n"
        f"{click.style('about:   ', dim=True)}{about}\n"
    )
