"""Linear GraphQL API client."""

import logging
import time

import httpx

from lincli.errors import LinearApiError
from lincli.filters import Filter, to_graphql
from lincli.models import CreatedIssue, Issue, IssueRelations, Team, User, WorkflowState
from lincli.settings import LinearSettings

log = logging.getLogger(__name__)

_VIEWER = """
query Viewer {
  viewer { id name }
}
"""

# Relations are left out of the list query and resolved per issue afterwards.
_LIST_ISSUES = """
query ListIssues($filter: IssueFilter) {
  issues(filter: $filter) {
    nodes {
      id
      identifier
      title
      priority
      createdAt
    }
  }
}
"""

_ISSUE_RELATIONS = """
query IssueRelations($id: String!) {
  issue(id: $id) {
    state { id name type }
    assignee { id name }
  }
}
"""

_GET_ISSUE = """
query GetIssue($id: String!) {
  issue(id: $id) {
    id
    identifier
    title
    description
    priority
    createdAt
    state { id name type }
    assignee { id name }
    team { id key name }
    labels { nodes { name } }
  }
}
"""

_GET_TEAM = """
query GetTeam($id: String!) {
  team(id: $id) { id key name }
}
"""

_LIST_TEAMS = """
query ListTeams {
  teams {
    nodes { id key name }
  }
}
"""

_TEAM_STATES = """
query TeamStates($id: String!) {
  team(id: $id) {
    states {
      nodes { id name type }
    }
  }
}
"""

_CREATE_ISSUE = """
mutation CreateIssue($teamId: String!, $title: String!, $stateId: String, $assigneeId: String) {
  issueCreate(input: {
    teamId: $teamId
    title: $title
    stateId: $stateId
    assigneeId: $assigneeId
  }) {
    success
    issue {
      id
      identifier
      title
      url
    }
  }
}
"""

_UPDATE_ISSUE = """
mutation UpdateIssue($id: String!, $stateId: String!) {
  issueUpdate(id: $id, input: { stateId: $stateId }) {
    success
  }
}
"""

_CREATE_COMMENT = """
mutation CreateComment($issueId: String!, $body: String!) {
  commentCreate(input: { issueId: $issueId, body: $body }) {
    success
  }
}
"""


def _user(node: dict | None) -> User | None:
    if not node:
        return None
    return User(id=node["id"], name=node["name"])


def _state(node: dict | None) -> WorkflowState | None:
    if not node:
        return None
    return WorkflowState(id=node["id"], name=node["name"], type=node["type"])


def _team(node: dict | None) -> Team | None:
    if not node:
        return None
    return Team(id=node["id"], key=node["key"], name=node["name"])


def _operation_name(query: str) -> str:
    # "query Foo($x: ...)" -> "Foo"
    header = query.strip().split("{", 1)[0].split("(", 1)[0].split()
    return header[1] if len(header) > 1 else "anonymous"


class LinearClient:
    """Async client for one CLI invocation.

    Use as an async context manager so the underlying connection pool is closed.
    """

    def __init__(self, settings: LinearSettings) -> None:
        if not settings.api_key:
            raise RuntimeError("api_key is required")
        self._endpoint = settings.api_url
        self._http = httpx.AsyncClient(
            headers={
                "Authorization": settings.api_key.get_secret_value(),
                "Content-Type": "application/json",
            },
            timeout=settings.timeout,
        )
        self._viewer: User | None = None

    async def __aenter__(self) -> "LinearClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _gql(self, query: str, variables: dict | None = None) -> dict:
        operation = _operation_name(query)
        started = time.perf_counter()
        response = await self._http.post(
            self._endpoint,
            json={"query": query, "variables": variables or {}},
        )
        log.debug("%s -> HTTP %s in %.0f ms", operation, response.status_code, (time.perf_counter() - started) * 1000)
        if response.status_code in (401, 403):
            raise LinearApiError(
                f"Linear API returned {response.status_code}. Check that LINEAR_API_KEY is a valid personal API key."
            )
        try:
            data = response.json()
        except ValueError:
            response.raise_for_status()
            raise
        if data.get("errors"):
            messages = "; ".join(e.get("message", str(e)) for e in data["errors"])
            raise LinearApiError(f"Linear API error: {messages}")
        response.raise_for_status()
        return data["data"]

    async def viewer(self) -> User:
        """Return the authenticated user, fetched at most once per client."""
        if self._viewer is None:
            data = await self._gql(_VIEWER)
            self._viewer = _user(data["viewer"])
        return self._viewer

    async def issues(self, issue_filter: Filter) -> list[Issue]:
        data = await self._gql(_LIST_ISSUES, {"filter": to_graphql(issue_filter)})
        return [
            Issue(
                id=n["id"],
                identifier=n["identifier"],
                title=n["title"],
                priority=int(n.get("priority") or 0),
                created_at=n.get("createdAt"),
            )
            for n in data["issues"]["nodes"]
        ]

    async def issue_relations(self, issue_id: str) -> IssueRelations:
        data = await self._gql(_ISSUE_RELATIONS, {"id": issue_id})
        node = data["issue"] or {}
        return IssueRelations(state=_state(node.get("state")), assignee=_user(node.get("assignee")))

    async def issue(self, identifier: str) -> Issue | None:
        """Look up an issue by identifier (ENG-123) or UUID. None if Linear returns no node."""
        data = await self._gql(_GET_ISSUE, {"id": identifier})
        node = data["issue"]
        if not node:
            return None
        return Issue(
            id=node["id"],
            identifier=node["identifier"],
            title=node["title"],
            description=node.get("description"),
            priority=int(node.get("priority") or 0),
            created_at=node.get("createdAt"),
            state=_state(node.get("state")),
            assignee=_user(node.get("assignee")),
            team=_team(node.get("team")),
            labels=[label["name"] for label in (node.get("labels") or {}).get("nodes", [])],
        )

    async def team(self, key: str) -> Team | None:
        data = await self._gql(_GET_TEAM, {"id": key})
        return _team(data["team"])

    async def teams(self) -> list[Team]:
        data = await self._gql(_LIST_TEAMS)
        return [Team(id=n["id"], key=n["key"], name=n["name"]) for n in data["teams"]["nodes"]]

    async def team_states(self, team_id: str) -> list[WorkflowState]:
        data = await self._gql(_TEAM_STATES, {"id": team_id})
        if not data["team"]:
            return []
        return [WorkflowState(id=n["id"], name=n["name"], type=n["type"]) for n in data["team"]["states"]["nodes"]]

    async def create_issue(
        self,
        team_id: str,
        title: str,
        state_id: str | None = None,
        assignee_id: str | None = None,
    ) -> CreatedIssue:
        data = await self._gql(
            _CREATE_ISSUE,
            {
                "teamId": team_id,
                "title": title,
                "stateId": state_id,
                "assigneeId": assignee_id,
            },
        )
        result = data["issueCreate"]
        if not result["success"] or not result.get("issue"):
            raise LinearApiError("Linear issueCreate returned success=false")
        issue = result["issue"]
        return CreatedIssue(
            id=issue["id"],
            identifier=issue["identifier"],
            title=issue["title"],
            url=issue.get("url"),
        )

    async def update_issue(self, issue_id: str, state_id: str) -> None:
        data = await self._gql(_UPDATE_ISSUE, {"id": issue_id, "stateId": state_id})
        if not data["issueUpdate"]["success"]:
            raise LinearApiError("Linear issueUpdate returned success=false")

    async def create_comment(self, issue_id: str, body: str) -> None:
        data = await self._gql(_CREATE_COMMENT, {"issueId": issue_id, "body": body})
        if not data["commentCreate"]["success"]:
            raise LinearApiError("Linear commentCreate returned success=false")
