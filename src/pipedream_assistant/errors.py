"""Exception types raised by the assistant.

The CLI is the only layer that turns these into exit codes; library code
raises and lets them propagate.
"""

from __future__ import annotations

from typing import Any


class AssistantError(Exception):
    """Base exception for Pipedream Assistant errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class MissingCredentialError(AssistantError):
    """A required credential was not supplied by option, environment or config."""

    def __init__(self, name: str, option: str, env_var: str):
        self.name = name
        self.option = option
        self.env_var = env_var
        super().__init__(
            f"{name} is required. Provide via {option} option or set {env_var} in .env file"
        )


class APIError(AssistantError):
    """Remote API returned a non-2xx response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: Any = None,
    ):
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class AuthenticationError(APIError):
    """API key rejected (401/403)."""

    pass


class APIResponseError(APIError):
    """2xx response whose body is unparseable or lacks the expected fields."""

    pass


class ElementNotFoundError(AssistantError):
    """Every strategy of the heuristic clicker came up empty."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Could not find {label}")


class LoginFailedError(AssistantError):
    """Still on the login page after submitting the form."""

    pass


class ProjectNotFoundError(AssistantError):
    """No project id from option or config.ini."""

    pass


class WorkflowNotFoundError(AssistantError):
    """No workflow id from option, workflow.json or directory name."""

    pass
