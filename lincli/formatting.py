"""Plain-text rendering of issue tables and the single-issue detail view."""

from lincli.models import Issue, IssueRow

PRIORITY_LABELS = {0: "None", 1: "Urgent", 2: "High", 3: "Medium", 4: "Low"}

ID_WIDTH = 10
TITLE_WIDTH = 50
STATE_WIDTH = 12
PRIORITY_WIDTH = 9
ASSIGNEE_WIDTH = 15

RULE = "─" * 60


def format_priority(priority: int | None) -> str:
    """Linear priority number to label. Out-of-range values read as "None"."""
    return PRIORITY_LABELS.get(priority, "None")


def truncate_title(title: str) -> str:
    if len(title) > TITLE_WIDTH:
        return title[: TITLE_WIDTH - 3] + "..."
    return title.ljust(TITLE_WIDTH)


def _header(show_assignee: bool) -> list[str]:
    names = ["ID".ljust(ID_WIDTH), "Title".ljust(TITLE_WIDTH), "State".ljust(STATE_WIDTH), "Priority"]
    dashes = ["-" * (ID_WIDTH + 1), "-" * (TITLE_WIDTH + 2), "-" * (STATE_WIDTH + 2)]
    if show_assignee:
        names.append("Assignee")
        dashes += ["-" * (PRIORITY_WIDTH + 2), "-" * (len("Assignee") + 1)]
    else:
        dashes.append("-" * PRIORITY_WIDTH)
    return [" | ".join(names), "|".join(dashes)]


def format_row(row: IssueRow, show_assignee: bool = False) -> str:
    cells = [
        row.identifier.ljust(ID_WIDTH),
        truncate_title(row.title),
        row.state.ljust(STATE_WIDTH),
        format_priority(row.priority).ljust(PRIORITY_WIDTH),
    ]
    if show_assignee:
        cells.append((row.assignee or "Unassigned")[:ASSIGNEE_WIDTH])
    return " | ".join(cells)


def format_table(rows: list[IssueRow], show_assignee: bool = False) -> str:
    """Render rows as a fixed-width table followed by a count line."""
    if not rows:
        return "No issues found."

    lines = _header(show_assignee)
    lines += [format_row(row, show_assignee) for row in rows]
    noun = "issue" if len(rows) == 1 else "issues"
    lines += ["", f"{len(rows)} {noun} found."]
    return "\n".join(lines)


def format_issue(issue: Issue) -> str:
    """Render the detail view used by ``show``."""
    created = issue.created_at.astimezone().date().isoformat() if issue.created_at else "Unknown"
    lines = [
        f"{issue.identifier}: {issue.title}",
        RULE,
        f"Team:     {issue.team.name if issue.team else 'Unknown'}",
        f"State:    {issue.state.name if issue.state else 'Unknown'}",
        f"Priority: {format_priority(issue.priority)}",
        f"Assignee: {issue.assignee.name if issue.assignee else 'Unassigned'}",
        f"Labels:   {', '.join(issue.labels) or 'None'}",
        f"Created:  {created}",
    ]

    if issue.description:
        lines += [RULE, issue.description]

    return "\n".join(lines)
