"""Async command handlers.

Every handler takes the client for the current invocation as its first
argument and writes its result to stdout.
"""

import asyncio
import logging

import httpx
import typer

from lincli import filters
from lincli.errors import IssueNotFound, LinearApiError, NoTeamsFound, StateNotFound, TeamNotFound
from lincli.filters import Filter
from lincli.formatting import format_issue, format_table
from lincli.linear import LinearClient
from lincli.models import Issue, IssueRow, WorkflowState

log = logging.getLogger(__name__)

IN_PROGRESS = "In Progress"
DONE = "Done"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def find_state(states: list[WorkflowState], name: str) -> WorkflowState | None:
    """Case-insensitive exact match on state name."""
    wanted = name.lower()
    return next((s for s in states if s.name.lower() == wanted), None)


async def _enrich(client: LinearClient, issue: Issue) -> IssueRow:
    relations = await client.issue_relations(issue.id)
    return IssueRow(
        identifier=issue.identifier,
        title=issue.title,
        state=relations.state.name if relations.state else "Unknown",
        priority=issue.priority,
        assignee=relations.assignee.name if relations.assignee else None,
    )


async def _list(client: LinearClient, issue_filter: Filter, show_assignee: bool = False) -> None:
    issues = await client.issues(issue_filter)
    log.debug("Fetched %d issues, resolving relations", len(issues))
    # gather keeps input order, so rows line up with the query result.
    rows = await asyncio.gather(*(_enrich(client, issue) for issue in issues))
    typer.echo(format_table(list(rows), show_assignee=show_assignee))


async def _find_issue(client: LinearClient, issue_id: str) -> Issue:
    try:
        issue = await client.issue(issue_id.upper())
    except (LinearApiError, httpx.HTTPError) as exc:
        log.debug("Issue lookup for %s failed: %s", issue_id, exc)
        raise IssueNotFound(issue_id) from exc
    if issue is None:
        raise IssueNotFound(issue_id)
    return issue


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


async def my_tasks(client: LinearClient, label: str | None = None) -> None:
    me = await client.viewer()
    await _list(client, filters.my_tasks_filter(me.id, label))


async def in_progress(client: LinearClient) -> None:
    me = await client.viewer()
    await _list(client, filters.in_progress_filter(me.id))


async def backlog(client: LinearClient, label: str | None = None) -> None:
    me = await client.viewer()
    await _list(client, filters.backlog_filter(me.id, label))


async def team_tasks(client: LinearClient, label: str | None = None) -> None:
    await _list(client, filters.team_tasks_filter(label), show_assignee=True)


async def search(client: LinearClient, query: str, label: str | None = None) -> None:
    await _list(client, filters.search_filter(query, label), show_assignee=True)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


async def create(client: LinearClient, title: str, assign_to_me: bool = False, team_key: str | None = None) -> None:
    """Create an issue in the given team, or the workspace's first team."""
    assignee_id = (await client.viewer()).id if assign_to_me else None

    if team_key:
        team = await client.team(team_key)
        if team is None:
            raise TeamNotFound(f"Team {team_key} not found")
    else:
        teams = await client.teams()
        if not teams:
            raise NoTeamsFound()
        # Falls back to whichever team Linear lists first.
        team = teams[0]

    wanted = "Todo" if assign_to_me else "Backlog"
    states = await client.team_states(team.id)
    target = find_state(states, wanted)
    if target is None and states:
        log.debug("No %r state in team %s, using first state %r", wanted, team.key, states[0].name)
        target = states[0]

    created = await client.create_issue(
        team_id=team.id,
        title=title,
        state_id=target.id if target else None,
        assignee_id=assignee_id,
    )

    typer.echo(f"Created: {created.identifier} - {created.title}")
    typer.echo(f"State: {target.name if target else wanted}")
    typer.echo(f"Assigned: {'You' if assign_to_me else 'Unassigned'}")
    if created.url:
        typer.echo(f"URL: {created.url}")


async def transition(client: LinearClient, issue_id: str, state_name: str) -> None:
    """Move an issue to the named workflow state of its own team."""
    issue = await _find_issue(client, issue_id)
    if issue.team is None:
        raise TeamNotFound("Could not find team for issue")

    states = await client.team_states(issue.team.id)
    target = find_state(states, state_name)
    if target is None:
        raise StateNotFound(state_name, [s.name for s in states])

    await client.update_issue(issue.id, target.id)
    typer.echo(f"{issue.identifier} → {target.name}")


async def start(client: LinearClient, issue_id: str) -> None:
    await transition(client, issue_id, IN_PROGRESS)


async def done(client: LinearClient, issue_id: str) -> None:
    await transition(client, issue_id, DONE)


async def show(client: LinearClient, issue_id: str) -> None:
    issue = await _find_issue(client, issue_id)
    typer.echo(format_issue(issue))


async def comment(client: LinearClient, issue_id: str, body: str) -> None:
    issue = await _find_issue(client, issue_id)
    await client.create_comment(issue.id, body)
    typer.echo(f"Comment added to {issue.identifier}")
