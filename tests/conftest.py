"""Shared test fixtures."""

from datetime import datetime, timezone

import pytest

from lincli.errors import LinearApiError
from lincli.models import CreatedIssue, Issue, IssueRelations, Team, User, WorkflowState

VIEWER = User(id="user_me", name="Jane Doe")
ENG = Team(id="team_eng", key="ENG", name="Engineering")

STATES = [
    WorkflowState(id="st_backlog", name="Backlog", type="backlog"),
    WorkflowState(id="st_todo", name="Todo", type="unstarted"),
    WorkflowState(id="st_progress", name="In Progress", type="started"),
    WorkflowState(id="st_done", name="Done", type="completed"),
    WorkflowState(id="st_canceled", name="Canceled", type="canceled"),
]


class FakeLinearClient:
    """In-memory stand-in for LinearClient that records every call."""

    def __init__(
        self,
        issues: list[Issue] | None = None,
        relations: dict[str, IssueRelations] | None = None,
        detail: Issue | None = None,
        teams: list[Team] | None = None,
        states: list[WorkflowState] | None = None,
    ) -> None:
        self.issue_list = issues or []
        self.relations = relations or {}
        self.detail = detail
        self.team_list = [ENG] if teams is None else teams
        self.states = STATES if states is None else states
        self.calls: list[tuple] = []

    async def __aenter__(self) -> "FakeLinearClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    async def viewer(self) -> User:
        self.calls.append(("viewer",))
        return VIEWER

    async def issues(self, issue_filter) -> list[Issue]:
        self.calls.append(("issues", issue_filter))
        return self.issue_list

    async def issue_relations(self, issue_id: str) -> IssueRelations:
        self.calls.append(("issue_relations", issue_id))
        return self.relations.get(issue_id, IssueRelations())

    async def issue(self, identifier: str) -> Issue | None:
        self.calls.append(("issue", identifier))
        if self.detail is None or self.detail.identifier != identifier:
            raise LinearApiError("Linear API error: Entity not found")
        return self.detail

    async def team(self, key: str) -> Team | None:
        self.calls.append(("team", key))
        return next((t for t in self.team_list if t.key == key), None)

    async def teams(self) -> list[Team]:
        self.calls.append(("teams",))
        return self.team_list

    async def team_states(self, team_id: str) -> list[WorkflowState]:
        self.calls.append(("team_states", team_id))
        return self.states

    async def create_issue(self, team_id, title, state_id=None, assignee_id=None) -> CreatedIssue:
        self.calls.append(("create_issue", team_id, title, state_id, assignee_id))
        return CreatedIssue(id="new_id", identifier="ENG-99", title=title, url="https://linear.app/t/issue/ENG-99")

    async def update_issue(self, issue_id: str, state_id: str) -> None:
        self.calls.append(("update_issue", issue_id, state_id))

    async def create_comment(self, issue_id: str, body: str) -> None:
        self.calls.append(("create_comment", issue_id, body))


@pytest.fixture
def linear_issue() -> Issue:
    return Issue(
        id="issue_abc123",
        identifier="ENG-123",
        title="Fix null check in auth middleware",
        description="The middleware throws when session is None.",
        priority=2,
        created_at=datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc),
        state=STATES[2],
        assignee=VIEWER,
        team=ENG,
        labels=["bug", "auth"],
    )


@pytest.fixture
def fake_client(linear_issue: Issue) -> FakeLinearClient:
    listed = [
        Issue(id="i1", identifier="ENG-1", title="First issue", priority=1),
        Issue(id="i2", identifier="ENG-2", title="Second issue", priority=3),
    ]
    relations = {
        "i1": IssueRelations(state=STATES[2], assignee=VIEWER),
        "i2": IssueRelations(state=STATES[1], assignee=None),
    }
    return FakeLinearClient(issues=listed, relations=relations, detail=linear_issue)
