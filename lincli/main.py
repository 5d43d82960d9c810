"""lincli CLI — argument dispatch and the top-level error boundary."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Annotated, Any

import typer
from rich.console import Console
from typer.core import TyperGroup

from lincli import commands
from lincli.args import parse_assign_to_me, parse_label, parse_team, positional
from lincli.errors import LinearCliError, MissingArgument, UnknownCommand
from lincli.linear import LinearClient
from lincli.log import setup_logging
from lincli.settings import LinearSettings, get_settings

log = logging.getLogger(__name__)

err_console = Console(stderr=True, soft_wrap=True, highlight=False, emoji=False)

HELP_TEXT = """\
Linear CLI - Commands:

  Listing:
    my-tasks [--label X]       Your assigned issues (excludes completed)
    in-progress                Issues you're actively working on
    backlog [--label X]        Your backlog items
    team-tasks [--label X]     All team issues (shows assignee)
    search "query" [--label X] Search title/description

  Actions:
    create "title"             Create issue (add --assignee me to assign, --team KEY to pick a team)
    start ISSUE-ID             Move to In Progress
    done ISSUE-ID              Mark as done
    show ISSUE-ID              Show full details
    comment ISSUE-ID "text"    Add comment

  Filtering:
    --label NAME               Filter by label (partial match)

  Options:
    -v, --verbose              Debug logging to stderr (before the command)"""

# Subcommands take their arguments as raw tokens; see lincli.args.
_RAW_ARGS = {"allow_extra_args": True, "ignore_unknown_options": True, "help_option_names": []}


def _print_error(line: str) -> None:
    err_console.print(line, style="red", markup=False)


@contextmanager
def cli_errors() -> Iterator[None]:
    """Report errors on stderr and turn them into exit codes."""
    try:
        yield
    except typer.Exit:
        raise
    except LinearCliError as exc:
        _print_error(f"ERROR: {exc.message}")
        for line in exc.details():
            _print_error(line)
        raise typer.Exit(exc.exit_code) from exc
    except Exception as exc:
        log.debug("Unhandled error", exc_info=True)
        _print_error(f"Error: {exc}")
        raise typer.Exit(1) from exc


class _Dispatcher(TyperGroup):
    def resolve_command(self, ctx: typer.Context, args: list[str]) -> Any:
        name = args[0] if args else None
        if name and self.get_command(ctx, name) is None:
            with cli_errors():
                raise UnknownCommand(name)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=_Dispatcher,
    add_completion=False,
    # Unrecognized leading flags fall through to resolve_command as unknown commands.
    context_settings={"ignore_unknown_options": True},
)


def _require(value: str | None, message: str, usage: str) -> str:
    if value is None:
        raise MissingArgument(message, usage)
    return value


def _run(ctx: typer.Context, handler: Callable[..., Awaitable[None]], *args: Any) -> None:
    settings: LinearSettings = ctx.obj

    async def _invoke() -> None:
        async with LinearClient(settings) as client:
            await handler(client, *args)

    asyncio.run(_invoke())


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging to stderr")] = False,
) -> None:
    """Linear issues from the terminal."""
    with cli_errors():
        settings = get_settings()
    setup_logging(verbose or settings.debug, console=err_console)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        typer.echo(HELP_TEXT)
        raise typer.Exit(0)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


@app.command("my-tasks", context_settings=_RAW_ARGS)
def my_tasks(ctx: typer.Context) -> None:
    """Your assigned issues (excludes completed)."""
    with cli_errors():
        _run(ctx, commands.my_tasks, parse_label(ctx.args))


@app.command("in-progress", context_settings=_RAW_ARGS)
def in_progress(ctx: typer.Context) -> None:
    """Issues you're actively working on."""
    with cli_errors():
        _run(ctx, commands.in_progress)


@app.command("backlog", context_settings=_RAW_ARGS)
def backlog(ctx: typer.Context) -> None:
    """Your backlog items."""
    with cli_errors():
        _run(ctx, commands.backlog, parse_label(ctx.args))


@app.command("team-tasks", context_settings=_RAW_ARGS)
def team_tasks(ctx: typer.Context) -> None:
    """All open team issues, with assignee."""
    with cli_errors():
        _run(ctx, commands.team_tasks, parse_label(ctx.args))


@app.command("search", context_settings=_RAW_ARGS)
def search(ctx: typer.Context) -> None:
    """Search title and description."""
    with cli_errors():
        query = _require(positional(ctx.args, 0), "Search query required", 'search "query" [--label LABEL]')
        _run(ctx, commands.search, query, parse_label(ctx.args))


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@app.command("create", context_settings=_RAW_ARGS)
def create(ctx: typer.Context) -> None:
    """Create an issue."""
    with cli_errors():
        title = _require(positional(ctx.args, 0), "Title required", 'create "Task title" [--assignee me] [--team TEAM]')
        _run(ctx, commands.create, title, parse_assign_to_me(ctx.args), parse_team(ctx.args))


@app.command("start", context_settings=_RAW_ARGS)
def start(ctx: typer.Context) -> None:
    """Move an issue to In Progress."""
    with cli_errors():
        issue_id = _require(positional(ctx.args, 0), "Issue ID required", "start ISSUE-ID")
        _run(ctx, commands.start, issue_id)


@app.command("done", context_settings=_RAW_ARGS)
def done(ctx: typer.Context) -> None:
    """Mark an issue as done."""
    with cli_errors():
        issue_id = _require(positional(ctx.args, 0), "Issue ID required", "done ISSUE-ID")
        _run(ctx, commands.done, issue_id)


@app.command("show", context_settings=_RAW_ARGS)
def show(ctx: typer.Context) -> None:
    """Show full details for an issue."""
    with cli_errors():
        issue_id = _require(positional(ctx.args, 0), "Issue ID required", "show ISSUE-ID")
        _run(ctx, commands.show, issue_id)


@app.command("comment", context_settings=_RAW_ARGS)
def comment(ctx: typer.Context) -> None:
    """Add a comment to an issue."""
    with cli_errors():
        issue_id = positional(ctx.args, 0)
        body = positional(ctx.args, 1)
        if issue_id is None or body is None:
            raise MissingArgument("Issue ID and comment text required", 'comment ISSUE-ID "Comment text"')
        _run(ctx, commands.comment, issue_id, body)
