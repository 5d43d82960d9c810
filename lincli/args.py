"""Raw-token argument helpers.

Subcommands receive their arguments as an unparsed token list. Flags are found
by their first occurrence; positionals are read by fixed index.
"""

LABEL_FLAG = "--label"
ASSIGNEE_FLAG = "--assignee"
TEAM_FLAG = "--team"


def flag_value(args: list[str], flag: str) -> str | None:
    """Return the token after the first ``flag``, or None when absent or last."""
    try:
        idx = args.index(flag)
    except ValueError:
        return None
    return args[idx + 1] if idx + 1 < len(args) else None


def parse_label(args: list[str]) -> str | None:
    return flag_value(args, LABEL_FLAG)


def parse_assign_to_me(args: list[str]) -> bool:
    return flag_value(args, ASSIGNEE_FLAG) == "me"


def parse_team(args: list[str]) -> str | None:
    return flag_value(args, TEAM_FLAG)


def positional(args: list[str], index: int) -> str | None:
    """Return the token at ``index`` unless it is missing, empty or a ``--`` flag."""
    if index >= len(args):
        return None
    token = args[index]
    if not token or token.startswith("--"):
        return None
    return token
