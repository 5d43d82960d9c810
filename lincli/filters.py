"""Issue filter expressions and their Linear ``IssueFilter`` serialization.

Each listing command builds a small expression tree with one of the
``*_filter`` builders; ``to_graphql`` turns it into the object passed as the
``filter`` variable of the ``issues`` query. Filtering happens server-side.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

StateCategory = Literal["triage", "backlog", "unstarted", "started", "completed", "canceled"]

CLOSED_CATEGORIES: tuple[StateCategory, ...] = ("completed", "canceled")


class AssigneeEquals(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str


class StateCategoryIn(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: tuple[StateCategory, ...]


class StateCategoryNotIn(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: tuple[StateCategory, ...]


class LabelContains(BaseModel):
    """Case-insensitive substring match on a label name."""

    model_config = ConfigDict(frozen=True)

    value: str


class TitleOrDescriptionContains(BaseModel):
    """Case-insensitive substring match on title or description."""

    model_config = ConfigDict(frozen=True)

    text: str


class And(BaseModel):
    model_config = ConfigDict(frozen=True)

    clauses: tuple["Filter", ...]


class Or(BaseModel):
    model_config = ConfigDict(frozen=True)

    clauses: tuple["Filter", ...]


Filter = Union[
    AssigneeEquals,
    StateCategoryIn,
    StateCategoryNotIn,
    LabelContains,
    TitleOrDescriptionContains,
    And,
    Or,
]

And.model_rebuild()
Or.model_rebuild()


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _contains(text: str) -> dict:
    return {"containsIgnoreCase": text}


def to_graphql(expr: Filter) -> dict:
    """Serialize a filter expression into Linear's IssueFilter input shape."""
    match expr:
        case AssigneeEquals(user_id=user_id):
            return {"assignee": {"id": {"eq": user_id}}}
        case StateCategoryIn(categories=categories):
            if len(categories) == 1:
                return {"state": {"type": {"eq": categories[0]}}}
            return {"state": {"type": {"in": list(categories)}}}
        case StateCategoryNotIn(categories=categories):
            return {"state": {"type": {"nin": list(categories)}}}
        case LabelContains(value=value):
            return {"labels": {"name": _contains(value)}}
        case TitleOrDescriptionContains(text=text):
            return {"or": [{"title": _contains(text)}, {"description": _contains(text)}]}
        case And(clauses=clauses):
            parts = [to_graphql(c) for c in clauses]
            merged: dict = {}
            for part in parts:
                # Colliding keys cannot share one object; fall back to an explicit and-list.
                if merged.keys() & part.keys():
                    return {"and": parts}
                merged.update(part)
            return merged
        case Or(clauses=clauses):
            return {"or": [to_graphql(c) for c in clauses]}
    raise TypeError(f"Unsupported filter expression: {expr!r}")


# ---------------------------------------------------------------------------
# Per-command builders
# ---------------------------------------------------------------------------


def _with_label(expr: Filter, label: str | None) -> Filter:
    if not label:
        return expr
    if isinstance(expr, And):
        return And(clauses=(*expr.clauses, LabelContains(value=label)))
    return And(clauses=(expr, LabelContains(value=label)))


def my_tasks_filter(viewer_id: str, label: str | None = None) -> Filter:
    """Open issues assigned to the viewer."""
    return _with_label(
        And(clauses=(AssigneeEquals(user_id=viewer_id), StateCategoryNotIn(categories=CLOSED_CATEGORIES))),
        label,
    )


def in_progress_filter(viewer_id: str) -> Filter:
    return And(clauses=(AssigneeEquals(user_id=viewer_id), StateCategoryIn(categories=("started",))))


def backlog_filter(viewer_id: str, label: str | None = None) -> Filter:
    return _with_label(
        And(clauses=(AssigneeEquals(user_id=viewer_id), StateCategoryIn(categories=("backlog",)))),
        label,
    )


def team_tasks_filter(label: str | None = None) -> Filter:
    """Open issues regardless of assignee."""
    return _with_label(StateCategoryNotIn(categories=CLOSED_CATEGORIES), label)


def search_filter(query: str, label: str | None = None) -> Filter:
    return _with_label(TitleOrDescriptionContains(text=query), label)
