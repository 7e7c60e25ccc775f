"""Settings and credential resolution.

Settings come from the environment (``PIPEDREAM_*``) and an optional ``.env``
file via pydantic-settings. Credentials are resolved per invocation into an
explicit ``Credentials`` object that is passed to every operation:

    explicit option > environment variable > config.ini > missing
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from .errors import MissingCredentialError
from .models import ProjectConfig


class Settings(BaseSettings):
    api_key: str | None = None
    username: str | None = None
    password: str | None = None
    org_id: str | None = None
    # Account slug for the projects page (https://pipedream.com/@<slug>/projects).
    workspace_slug: str | None = None

    api_base_url: str = "https://api.pipedream.com/v1"
    app_base_url: str = "https://pipedream.com"
    webhook_base_url: str = "https://webhook.pipedream.com/v1/sources"

    headless: bool = False
    navigation_timeout_seconds: float = 30.0
    request_timeout_seconds: float = 30.0
    log_dir: str = "logs"
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/112.0.0.0 Safari/537.36"
    )

    default_trigger_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DEFAULT_TRIGGER_TYPE", "PIPEDREAM_DEFAULT_TRIGGER_TYPE"),
    )
    default_schedule: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DEFAULT_SCHEDULE", "PIPEDREAM_DEFAULT_SCHEDULE"),
    )

    model_config = {
        "env_prefix": "PIPEDREAM_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def login_url(self) -> str:
        return f"{self.app_base_url}/auth/login"

    @property
    def signin_url(self) -> str:
        return f"{self.app_base_url}/auth/signin"

    @property
    def projects_url(self) -> str:
        if self.workspace_slug:
            return f"{self.app_base_url}/@{self.workspace_slug.lstrip('@')}/projects"
        return f"{self.app_base_url}/projects"

    def log_path(self, base_dir: Path | None = None) -> Path:
        path = Path(self.log_dir)
        if not path.is_absolute():
            path = (base_dir or Path.cwd()) / path
        return path


def load_settings(**overrides: Any) -> Settings:
    """Build settings from env/.env with explicit overrides applied last."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


# name -> (display name, CLI option, environment variable)
CREDENTIAL_HINTS: dict[str, tuple[str, str, str]] = {
    "api_key": ("API key", "--api-key", "PIPEDREAM_API_KEY"),
    "username": ("Username", "--username", "PIPEDREAM_USERNAME"),
    "password": ("Password", "--password", "PIPEDREAM_PASSWORD"),
    "org_id": ("Workspace (org) ID", "--org", "PIPEDREAM_ORG_ID"),
}


def resolve_value(
    option: str | None,
    env_value: str | None,
    config_value: str | None = None,
) -> tuple[str | None, str | None]:
    """Return ``(value, source)`` using option > env > config precedence."""
    for value, source in ((option, "option"), (env_value, "env"), (config_value, "config")):
        if isinstance(value, str) and value.strip():
            return value, source
    return None, None


@dataclass(frozen=True)
class Credentials:
    """Credentials for one command invocation."""

    api_key: str | None = None
    username: str | None = None
    password: str | None = None
    org_id: str | None = None
    sources: dict[str, str] = field(default_factory=dict)

    def require(self, *names: str) -> "Credentials":
        """Raise MissingCredentialError for the first missing credential."""
        for name in names:
            if not getattr(self, name):
                display, option, env_var = CREDENTIAL_HINTS[name]
                raise MissingCredentialError(display, option, env_var)
        return self

    def has(self, name: str) -> bool:
        return bool(getattr(self, name))

    def source_of(self, name: str) -> str | None:
        return self.sources.get(name)


def resolve_credentials(
    settings: Settings,
    project_config: ProjectConfig | None = None,
    *,
    api_key: str | None = None,
    username: str | None = None,
    password: str | None = None,
    org_id: str | None = None,
) -> Credentials:
    """Resolve every credential from explicit options, settings and config.ini.

    Passwords are never read from config.ini; the project descriptor only
    records the owning username and, optionally, an API key.
    """
    cfg = project_config or ProjectConfig()
    resolved: dict[str, str | None] = {}
    sources: dict[str, str] = {}

    candidates = {
        "api_key": (api_key, settings.api_key, cfg.api_key),
        "username": (username, settings.username, cfg.username),
        "password": (password, settings.password, None),
        "org_id": (org_id, settings.org_id, None),
    }
    for name, (opt, env_value, config_value) in candidates.items():
        value, source = resolve_value(opt, env_value, config_value)
        resolved[name] = value
        if source:
            sources[name] = source

    return Credentials(sources=sources, **resolved)
