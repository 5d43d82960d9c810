"""Shared pydantic models — the contract between the Linear client, handlers and formatter."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class Team(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    key: str  # ENG
    name: str


class WorkflowState(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str  # backlog | unstarted | started | completed | canceled (| triage)


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # Linear UUID
    identifier: str  # ENG-123
    title: str
    description: str | None = None
    priority: int = 0
    created_at: datetime | None = None
    # Relations are only populated by the single-issue lookup.
    state: WorkflowState | None = None
    assignee: User | None = None
    team: Team | None = None
    labels: list[str] = []


class IssueRelations(BaseModel):
    """Lazily-resolved relations of one issue, fetched during list enrichment."""

    model_config = ConfigDict(frozen=True)

    state: WorkflowState | None = None
    assignee: User | None = None


class IssueRow(BaseModel):
    """One line of the issue table."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    title: str
    state: str
    priority: int | None = None
    assignee: str | None = None


class CreatedIssue(BaseModel):
    """Returned by create_issue — minimal, just what the caller needs."""

    model_config = ConfigDict(frozen=True)

    id: str
    identifier: str
    title: str
    url: str | None = None
