"""Unit tests for the command line interface."""

from datetime import datetime, timezone

import click
import pytest
from click.testing import CliRunner

import app.__main__ as cli_module
from hnreader.database import Auth, StateStore, default_schema_path
from hnreader.scraper.models import Comment, Story, StoryList, StoryWithDetails, User
from hnreader.tree import build_forest, materialize

SCHEMA_PATH = default_schema_path()
WHEN = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_story(story_id: int, title: str, upvote_auth=None) -> Story:
    return Story(
        id=story_id,
        title=title,
        url=f"https://example.com/{story_id}",
        url_displayed="example.com",
        date=WHEN,
        date_displayed="3 hours ago",
        user="alice",
        score=10,
        comment_count=1,
        upvote_auth=upvote_auth,
    )


class FakeClient:
    """Canned answers in place of the network client."""

    calls = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass

    def stories_list(self, story_list, page, token=None):
        self.calls.append(("stories_list", story_list, page, token))
        return {1: make_story(11, "First", upvote_auth="auth11" if token else None), 2: make_story(12, "Second")}

    def story_details(self, story_id):
        self.calls.append(("story_details", story_id))
        comment = Comment(id=101, date=WHEN, date_displayed="1 hour ago", html_content="Nice", user="carol")
        roots = materialize(build_forest([(0, 101)]), {101: comment})
        return StoryWithDetails(story=make_story(story_id, "First"), html_content=None, comments=roots)

    def user_details(self, user_id):
        if user_id != "alice":
            return None
        return User(id="alice", created=datetime(2006, 10, 9).date(), karma=42, about="Hi")

    def login(self, username, password):
        self.calls.append(("login", username))
        if password != "right":
            return None
        return "alice&tok", datetime(2030, 1, 1, tzinfo=timezone.utc)

    def upvote_story(self, story_id, upvote_auth, token):
        self.calls.append(("upvote", story_id, upvote_auth, token))
        return True


@pytest.fixture
def state(tmp_path):
    return StateStore(tmp_path / "state.db", SCHEMA_PATH)


@pytest.fixture
def runner(monkeypatch, state):
    FakeClient.calls = []
    monkeypatch.setattr(cli_module, "HackerNewsClient", FakeClient)
    monkeypatch.setattr(cli_module, "StateStore", lambda: state)
    monkeypatch.setattr(click, "echo_via_pager", lambda pages: click.echo("".join(pages)))
    return CliRunner()


class TestListing:
    """Tests for listing commands."""

    def test_top_is_default(self, runner):
        result = runner.invoke(cli_module.cli, [])
        assert result.exit_code == 0
        assert "1. ▲ First" in result.output
        assert FakeClient.calls == [("stories_list", StoryList.NEWS, 1, None)]

    def test_alias_and_page(self, runner):
        result = runner.invoke(cli_module.cli, ["a", "--page", "2"])
        assert result.exit_code == 0
        assert FakeClient.calls == [("stories_list", StoryList.ASK, 2, None)]

    def test_listing_is_remembered(self, runner, state):
        runner.invoke(cli_module.cli, ["new"])
        assert state.get_last_story(2).id == 12


class TestDetails:
    """Tests for details and open."""

    def test_details_of_listed_story(self, runner):
        runner.invoke(cli_module.cli, ["top"])
        result = runner.invoke(cli_module.cli, ["d", "1"])
        assert result.exit_code == 0
        assert "carol 1 hour ago" in click.unstyle(result.output)
        assert ("story_details", 11) in FakeClient.calls

    def test_unknown_rank(self, runner):
        result = runner.invoke(cli_module.cli, ["details", "9"])
        assert result.exit_code == 1
        assert "Invalid story index." in result.output

    def test_open(self, runner, monkeypatch):
        launched = []
        monkeypatch.setattr(click, "launch", lambda url: launched.append(url) or 0)
        runner.invoke(cli_module.cli, ["top"])
        result = runner.invoke(cli_module.cli, ["o", "2"])
        assert result.exit_code == 0
        assert launched == ["https://example.com/12"]


class TestUser:
    """Tests for the user command."""

    def test_user(self, runner):
        result = runner.invoke(cli_module.cli, ["u", "alice"])
        assert result.exit_code == 0
        assert "karma:   42" in click.unstyle(result.output)

    def test_unknown_user(self, runner):
        result = runner.invoke(cli_module.cli, ["user", "nobody"])
        assert result.exit_code == 1
        assert "Invalid user name." in result.output


class TestAuth:
    """Tests for login, logout and upvote."""

    def test_login_saves_token(self, runner, state):
        result = runner.invoke(cli_module.cli, ["login"], input="alice\nright\n")
        assert "Successfully signed in as alice." in click.unstyle(result.output)
        assert state.get_auth().token == "alice&tok"

    def test_login_rejected(self, runner, state):
        result = runner.invoke(cli_module.cli, ["l"], input="alice\nwrong\n")
        assert "Invalid username or password." in result.output
        assert state.get_auth() is None

    def test_already_signed_in(self, runner, state):
        state.save_auth(Auth(username="alice", token="tok"))
        result = runner.invoke(cli_module.cli, ["login"])
        assert "Already signed in as alice." in click.unstyle(result.output)
        assert ("login", "alice") not in FakeClient.calls

    def test_logout(self, runner, state):
        state.save_auth(Auth(username="alice", token="tok"))
        assert "Signed out." in runner.invoke(cli_module.cli, ["logout"]).output
        assert "Not signed in." in runner.invoke(cli_module.cli, ["logout"]).output

    def test_listing_sends_token(self, runner, state):
        state.save_auth(Auth(username="alice", token="tok"))
        runner.invoke(cli_module.cli, ["top"])
        assert FakeClient.calls[-1] == ("stories_list", StoryList.NEWS, 1, "tok")

    def test_upvote(self, runner, state):
        state.save_auth(Auth(username="alice", token="tok"))
        runner.invoke(cli_module.cli, ["top"])
        result = runner.invoke(cli_module.cli, ["upvote", "1"])
        assert result.exit_code == 0
        assert ("upvote", 11, "auth11", "tok") in FakeClient.calls

    def test_upvote_requires_login(self, runner):
        runner.invoke(cli_module.cli, ["top"])
        result = runner.invoke(cli_module.cli, ["upvote", "1"])
        assert result.exit_code == 1
        assert "Not signed in." in result.output

    def test_upvote_without_auth_string(self, runner, state):
        runner.invoke(cli_module.cli, ["top"])
        state.save_auth(Auth(username="alice", token="tok"))
        result = runner.invoke(cli_module.cli, ["upvote", "2"])
        assert result.exit_code == 1
        assert "cannot be upvoted" in result.output
