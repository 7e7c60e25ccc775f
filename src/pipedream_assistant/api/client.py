"""Pipedream REST API client - typed wrapper over httpx.

Usage:
    async with PipedreamClient(api_key) as pd:
        me = await pd.get_me()
        org_id = await pd.resolve_org_id()
        workflow_id = await pd.workflows.create("My workflow", project_id, org_id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import httpx

from ..errors import APIError, APIResponseError, AuthenticationError

if TYPE_CHECKING:
    from .workflows import WorkflowsAPI


logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.pipedream.com/v1"
DEFAULT_APP_BASE_URL = "https://pipedream.com"
DEFAULT_WEBHOOK_BASE_URL = "https://webhook.pipedream.com/v1/sources"


def workflow_url(workflow_id: str, app_base_url: str = DEFAULT_APP_BASE_URL) -> str:
    return f"{app_base_url.rstrip('/')}/workflows/{workflow_id}"


def webhook_url(workflow_id: str, webhook_base_url: str = DEFAULT_WEBHOOK_BASE_URL) -> str:
    return f"{webhook_base_url.rstrip('/')}/{workflow_id}/events"


@dataclass
class PipedreamConfig:
    """Pipedream API configuration."""

    api_key: str
    base_url: str = DEFAULT_API_BASE_URL
    timeout: float = 30.0


class PipedreamClient:
    """Pipedream API client with domain-specific sub-APIs.

    Remote failures are not retried: 401/403 raise ``AuthenticationError``,
    any other non-2xx raises ``APIError`` and a 2xx body that is not JSON
    raises ``APIResponseError``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 30.0,
    ):
        self.config = PipedreamConfig(api_key=api_key, base_url=base_url, timeout=timeout)
        self._client: httpx.AsyncClient | None = None
        self._workflows: WorkflowsAPI | None = None

    @classmethod
    def from_settings(cls, settings, api_key: str) -> "PipedreamClient":
        return cls(
            api_key,
            base_url=settings.api_base_url,
            timeout=settings.request_timeout_seconds,
        )

    async def __aenter__(self) -> "PipedreamClient":
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            headers={
                "Authorization": f"Bearer {self.config.api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

        from .workflows import WorkflowsAPI

        self._workflows = WorkflowsAPI(self)
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()

    @property
    def workflows(self) -> "WorkflowsAPI":
        """Workflows API."""
        if not self._workflows:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._workflows

    # HTTP methods
    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("%s %s", method, endpoint)
        resp = await self._client.request(method, endpoint, params=params or None, json=json)

        if resp.status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed ({resp.status_code}): {resp.text}",
                status_code=resp.status_code,
                response=resp.text,
            )
        if not resp.is_success:
            raise APIError(
                f"Request failed with status code {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
                response=resp.text,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise APIResponseError(
                f"Failed to parse response: {e}",
                status_code=resp.status_code,
                response=resp.text,
            ) from e

    async def _get(self, endpoint: str, **params) -> Any:
        """Make GET request."""
        return await self._request("GET", endpoint, params=params)

    async def _post(self, endpoint: str, data: dict | None = None) -> Any:
        """Make POST request."""
        return await self._request("POST", endpoint, json=data)

    # Account
    async def get_me(self) -> dict[str, Any]:
        """Get the authenticated user (``data.email``, ``data.orgs``)."""
        result = await self._get("/users/me")
        data = result.get("data") if isinstance(result, dict) else None
        if not isinstance(data, dict) or not data.get("id"):
            raise APIResponseError("Failed to fetch user details", response=result)
        return data

    async def resolve_org_id(self, explicit: str | None = None) -> str:
        """Return the workspace (org) id to use.

        An explicit id wins. Otherwise the first org listed by ``/users/me``
        is used; when there is more than one, the choice is logged.
        """
        if explicit:
            return explicit

        me = await self.get_me()
        orgs = me.get("orgs") or []
        if not orgs:
            raise APIResponseError("No workspace found for the user", response=me)

        first = orgs[0]
        org_id = first.get("id") if isinstance(first, dict) else None
        if not org_id:
            raise APIResponseError("First workspace of the user has no id", response=me)

        if len(orgs) > 1:
            others = ", ".join(str(o.get("id")) if isinstance(o, dict) else "?" for o in orgs[1:])
            logger.warning(
                "User belongs to %d workspaces; using the first (%s). Others: %s. "
                "Pass --org or set PIPEDREAM_ORG_ID to choose.",
                len(orgs),
                org_id,
                others,
            )
        return org_id
