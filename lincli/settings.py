"""Settings resolution from the environment.

Only environment variables are read; there is no config file.
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from lincli.errors import MissingCredential

DEFAULT_API_URL = "https://api.linear.app/graphql"

_SETUP_INSTRUCTIONS = [
    "Add to ~/.zshrc:",
    '  export LINEAR_API_KEY="lin_api_..."',
    "",
    "Get your key from: Linear → Settings → Security & access → Personal API keys",
]


class LinearSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LINEAR_",
        extra="ignore",
    )

    api_key: SecretStr | None = None
    api_url: str = DEFAULT_API_URL
    timeout: float = 30.0
    debug: bool = False


class _MissingApiKey(MissingCredential):
    def details(self) -> list[str]:
        return ["", *_SETUP_INSTRUCTIONS]


def get_settings() -> LinearSettings:
    """Return settings populated from LINEAR_* environment variables.

    Raises MissingCredential when LINEAR_API_KEY is unset or empty.
    """
    settings = LinearSettings()
    if not settings.api_key or not settings.api_key.get_secret_value():
        raise _MissingApiKey("LINEAR_API_KEY not set")
    return settings
