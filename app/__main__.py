"""CLI entry point for hnreader.

Usage:
    python -m app top --page 2
    python -m app details 3
    python -m app user pg
    python -m app serve --port 8080
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

import click
import requests

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import settings
from hnreader.database import Auth, StateStore
from hnreader.formatting import (
    format_comment_tree,
    format_story,
    format_story_details,
    format_user,
)
from hnreader.scraper import HackerNewsClient, Story, StoryList


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: Enable debug logging
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)


class AliasedGroup(click.Group):
    """Command group accepting short aliases (``t`` for ``top``)."""

    ALIASES = {
        "t": "top",
        "n": "new",
        "b": "best",
        "a": "ask",
        "s": "show",
        "j": "job",
        "d": "details",
        "o": "open",
        "u": "user",
        "l": "login",
    }

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx: click.Context, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args


class AppContext:
    """Objects shared by all commands."""

    def __init__(self, state: StateStore, client: HackerNewsClient):
        self.state = state
        self.client = client


pass_app = click.make_pass_decorator(AppContext)


@click.group(cls=AliasedGroup, invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Read Hacker News from the terminal.

    Lists stories, shows a story with its threaded comments, shows users,
    and can serve the same data over GraphQL.
    """
    setup_logging(verbose)
    client = ctx.with_resource(HackerNewsClient())
    ctx.obj = AppContext(StateStore(), client)
    if ctx.invoked_subcommand is None:
        ctx.invoke(top)


def print_stories(ctx: AppContext, story_list: StoryList, page: int) -> Dict[int, Story]:
    """Print a listing and remember it so stories can be picked by rank."""
    auth = ctx.state.get_auth()
    token = auth.token if auth and not auth.is_expired else None
    stories = ctx.client.stories_list(story_list, page, token=token)
    for rank in sorted(stories):
        click.echo(format_story(rank, stories[rank]))
    ctx.state.save_last_stories(stories)
    return stories


def story_from_rank(ctx: AppContext, index: int) -> Story:
    story = ctx.state.get_last_story(index)
    if story is None:
        raise click.ClickException("Invalid story index.")
    return story


def listing_command(name: str, story_list: StoryList, help_text: str) -> click.Command:
    @cli.command(name=name, help=help_text)
    @click.option("-p", "--page", default=1, show_default=True, help="Page number")
    @pass_app
    def command(ctx: AppContext, page: int) -> None:
        print_stories(ctx, story_list, page)

    return command


top = listing_command("top", StoryList.NEWS, "Print top stories (default command)")
listing_command("new", StoryList.NEWEST, "Print new stories")
listing_command("best", StoryList.BEST, "Print best stories")
listing_command("ask", StoryList.ASK, "Print ask stories")
listing_command("show", StoryList.SHOW, "Print show stories")
listing_command("job", StoryList.JOBS, "Print job stories")


@cli.command()
@click.argument("index", type=int)
@pass_app
def details(ctx: AppContext, index: int) -> None:
    """Print a story's details and comments."""
    story = story_from_rank(ctx, index)
    story_details = ctx.client.story_details(story.id)
    if story_details is None:
        raise click.ClickException(f"Story {story.id} no longer exists.")

    def pages():
        yield format_story_details(story_details) + "\n"
        yield from format_comment_tree(story_details.comments)

    click.echo_via_pager(pages())


@cli.command(name="open")
@click.argument("index", type=int)
@pass_app
def open_story(ctx: AppContext, index: int) -> None:
    """Open a story's link in the default browser."""
    story = story_from_rank(ctx, index)
    if click.launch(story.url) != 0:
        click.echo("Error while opening the default browser.", err=True)


@cli.command()
@click.argument("user_name")
@pass_app
def user(ctx: AppContext, user_name: str) -> None:
    """Show details about a user."""
    details = ctx.client.user_details(user_name)
    if details is None:
        raise click.ClickException("Invalid user name.")
    click.echo(format_user(details))


@cli.command()
@pass_app
def login(ctx: AppContext) -> None:
    """Sign in and remember the session token."""
    auth = ctx.state.get_auth()
    if auth is not None and not auth.is_expired:
        click.echo(f"Already signed in as {click.style(auth.username, bold=True)}.")
        return

    username = click.prompt("Username")
    password = click.prompt("Password", hide_input=True)
    result = ctx.client.login(username, password)
    if result is None:
        click.echo("Invalid username or password.")
        return
    token, expires = result
    ctx.state.save_auth(Auth(username=username, token=token, expires=expires))
    click.echo(f"Successfully signed in as {click.style(username, bold=True)}.")


@cli.command()
@pass_app
def logout(ctx: AppContext) -> None:
    """Forget the session token."""
    if ctx.state.clear_auth():
        click.echo("Signed out.")
    else:
        click.echo("Not signed in.")


@cli.command()
@click.argument("index", type=int)
@pass_app
def upvote(ctx: AppContext, index: int) -> None:
    """Upvote a story from the last listing."""
    auth = ctx.state.get_auth()
    if auth is None or auth.is_expired:
        raise click.ClickException("Not signed in.")
    story = story_from_rank(ctx, index)
    if not story.upvote_auth:
        raise click.ClickException("Story cannot be upvoted; list stories again while signed in.")
    if ctx.client.upvote_story(story.id, story.upvote_auth, auth.token):
        click.echo(f"Upvoted {click.style(story.title, bold=True)}.")
    else:
        raise click.ClickException("Upvote rejected.")


@cli.command()
@click.option("--host", default=None, help="Interface to bind (settings default if omitted)")
@click.option("--port", default=None, type=int, help="Port to listen on (settings default if omitted)")
def serve(host: Optional[str], port: Optional[int]) -> None:
    """Serve stories and comments over GraphQL."""
    from hnreader.api.server import run

    run(host or settings.host, port or settings.port)


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except requests.RequestException as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
