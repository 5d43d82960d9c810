"""Error taxonomy.

Classified errors carry their own exit code and are printed as ``ERROR: ...``
by the dispatcher. Anything else reaching the dispatcher (``LinearApiError``,
``httpx.HTTPError``) is printed as ``Error: ...`` and exits 1.
"""


class LinearCliError(Exception):
    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def details(self) -> list[str]:
        """Extra lines printed after the error message."""
        return []


class MissingCredential(LinearCliError):
    pass


class MissingArgument(LinearCliError):
    def __init__(self, message: str, usage: str | None = None) -> None:
        super().__init__(message)
        self.usage = usage

    def details(self) -> list[str]:
        return [f"Usage: {self.usage}"] if self.usage else []


class UnknownCommand(LinearCliError):
    def __init__(self, command: str) -> None:
        super().__init__(f"Unknown command: {command}")

    def details(self) -> list[str]:
        return ["Run without arguments to see available commands"]


class IssueNotFound(LinearCliError):
    def __init__(self, issue_id: str) -> None:
        super().__init__(f"Issue {issue_id} not found")
        self.issue_id = issue_id


class StateNotFound(LinearCliError):
    def __init__(self, state_name: str, available: list[str]) -> None:
        super().__init__(f'State "{state_name}" not found')
        self.state_name = state_name
        self.available = available

    def details(self) -> list[str]:
        return [f"Available states: {', '.join(self.available)}"]


class NoTeamsFound(LinearCliError):
    def __init__(self) -> None:
        super().__init__("No teams found in your workspace")


class TeamNotFound(LinearCliError):
    pass


class LinearApiError(RuntimeError):
    """The Linear API rejected a request or reported a failed mutation."""
