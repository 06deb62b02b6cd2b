"""Unit tests for terminal rendering."""

from datetime import date, datetime, timezone

import click

from hnreader.formatting import (
    format_comment,
    format_comment_tree,
    format_story,
    format_story_details,
    format_story_text,
    format_user,
    indent,
    wrap_text,
)
from hnreader.scraper.models import Comment, Story, StoryWithDetails, User
from hnreader.tree import build_forest, materialize

WHEN = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_story(**overrides) -> Story:
    fields = dict(
        id=1,
        title="Example launches",
        url="https://example.com/post",
        url_displayed="example.com",
        date=WHEN,
        date_displayed="3 hours ago",
        user="alice",
        score=123,
        comment_count=45,
    )
    fields.update(overrides)
    return Story(**fields)


def make_comment(comment_id: int, text: str, user="carol") -> Comment:
    return Comment(id=comment_id, date=WHEN, date_displayed="1 hour ago", html_content=text, user=user)


class TestIndent:
    """Tests for indent and wrap_text."""

    def test_indent_every_line(self):
        assert indent("a\nb", 2) == "    a\n    b"

    def test_level_zero(self):
        assert indent("a", 0) == "a"

    def test_wrap_keeps_blank_lines(self):
        assert wrap_text("one two three\n\nfour", 8) == "one two\nthree\n\nfour"


class TestFormatStoryText:
    """Tests for format_story_text."""

    def test_paragraphs(self):
        text = format_story_text("First.<p>Second.</p>", width=80)
        assert text == "First.\n\nSecond."

    def test_entities_decoded(self):
        assert format_story_text("Fish &amp; chips &gt; salad", width=80) == "Fish & chips > salad"

    def test_links_keep_text(self):
        markup = 'See <a href="https://example.com" rel="nofollow">example.com</a> now'
        assert click.unstyle(format_story_text(markup, width=80)) == "See example.com now"

    def test_italic_styled(self):
        rendered = format_story_text("very <i>nice</i>", width=80)
        assert rendered != click.unstyle(rendered)
        assert click.unstyle(rendered) == "very nice"

    def test_unknown_tags_dropped(self):
        assert format_story_text("<pre><code>x = 1</code></pre>", width=80) == "x = 1"

    def test_indented_by_level(self):
        lines = format_story_text("word " * 30, level=2, width=40).splitlines()
        assert all(line.startswith("    ") for line in lines)
        assert all(len(line) <= 40 for line in lines)


class TestFormatStory:
    """Tests for listing and detail rendering."""

    def test_listing_entry(self):
        text = click.unstyle(format_story(1, make_story()))
        first, second = text.splitlines()
        assert first == " 1. ▲ Example launches (example.com)"
        assert second.strip() == "123 points by alice 3 hours ago | 45 comments"

    def test_job_entry(self):
        story = make_story(user=None, score=None, comment_count=None, url_displayed=None)
        text = click.unstyle(format_story(12, story))
        assert text.startswith("12. ▲ Example launches")
        assert "0 points 3 hours ago | 0 comments" in text

    def test_details_with_text(self):
        details = StoryWithDetails(story=make_story(), html_content="Hello &amp; welcome")
        text = click.unstyle(format_story_details(details))
        assert "↳ https://example.com/post" in text
        assert text.endswith("Hello & welcome")

    def test_details_without_text(self):
        text = click.unstyle(format_story_details(StoryWithDetails(story=make_story())))
        assert text.endswith("↳ https://example.com/post")


class TestFormatComments:
    """Tests for comment rendering."""

    def test_comment_header(self):
        text = click.unstyle(format_comment(make_comment(1, "Hi")))
        assert text == "carol 1 hour ago\nHi"

    def test_deleted_comment(self):
        text = click.unstyle(format_comment(make_comment(1, "", user=None)))
        assert text.startswith("[deleted] 1 hour ago")

    def test_tree_in_reading_order_and_indented(self):
        entries = [(0, 1), (1, 2), (2, 3), (0, 4)]
        payloads = {item: make_comment(item, f"text {item}") for _, item in entries}
        roots = materialize(build_forest(entries), payloads)
        blocks = [click.unstyle(block) for block in format_comment_tree(roots)]
        assert [block.strip().splitlines()[-1].strip() for block in blocks] == [
            "text 1",
            "text 2",
            "text 3",
            "text 4",
        ]
        assert "\n    text 3" in blocks[2]
        assert "\ntext 4" in blocks[3]

    def test_empty_tree(self):
        assert list(format_comment_tree([])) == []


class TestFormatUser:
    """Tests for format_user."""

    def test_fields(self):
        user = User(id="alice", created=date(2006, 10, 9), karma=157316, about="Reader &amp; writer")
        lines = click.unstyle(format_user(user)).splitlines()
        assert lines[0] == "user:    alice"
        assert lines[1] == "created: 9-Oct-2006"
        assert lines[2] == "karma:   157316"
        assert lines[3] == "about:   Reader & writer"

    def test_multiline_about_aligned(self):
        user = User(id="bob", created=date(2010, 1, 2), about="First<p>Second")
        lines = click.unstyle(format_user(user)).splitlines()
        assert lines[3] == "about:   First"
        assert lines[4].strip() == ""
        assert lines[5] == "         Second"
