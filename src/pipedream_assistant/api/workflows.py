"""Workflows API - create and inspect Pipedream workflows."""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from ..errors import APIResponseError
from ..models import TriggerSpec

if TYPE_CHECKING:
    from .client import PipedreamClient


logger = logging.getLogger(__name__)


def trigger_component(name: str, trigger: TriggerSpec) -> dict[str, Any] | None:
    """Trigger component for a new workflow; ``None`` for unsupported types."""
    if trigger.type == "http":
        return {
            "key": "trigger",
            "type": "source",
            "app": "http",
            "source": {
                "type": "webhook",
                "name": f"{name} HTTP Webhook",
                "key": "http-webhook",
            },
        }
    if trigger.type == "schedule":
        return {
            "key": "trigger",
            "type": "source",
            "app": "schedule",
            "source": {
                "type": "cron",
                "name": f"{name} Schedule",
                "key": "schedule",
                "cron": trigger.schedule,
            },
        }
    return None


class WorkflowsAPI:
    """Workflows API for Pipedream.

    Usage:
        async with PipedreamClient(api_key) as pd:
            workflow_id = await pd.workflows.create("Daily sync", project_id, org_id)
            workflow = await pd.workflows.get(workflow_id, org_id=org_id)
            workflows = await pd.workflows.list_for_project(project_id)
    """

    def __init__(self, client: "PipedreamClient"):
        self._client = client

    @staticmethod
    def build_payload(
        name: str,
        project_id: str,
        org_id: str,
        template_id: str | None = None,
        description: str | None = None,
        trigger: TriggerSpec | None = None,
    ) -> dict[str, Any]:
        """Build the POST /workflows body."""
        settings: dict[str, Any] = {"name": name, "auto_deploy": True}
        if description:
            settings["description"] = description

        payload: dict[str, Any] = {
            "project_id": project_id,
            "org_id": org_id,
            "settings": settings,
        }
        if template_id:
            payload["template_id"] = template_id

        if trigger is not None:
            component = trigger_component(name, trigger)
            if component is None:
                logger.warning(
                    "Trigger type '%s' not yet implemented. Creating workflow without trigger.",
                    trigger.type,
                )
            else:
                payload["components"] = [component]

        return payload

    async def create(
        self,
        name: str,
        project_id: str,
        org_id: str,
        template_id: str | None = None,
        description: str | None = None,
        trigger: TriggerSpec | None = None,
    ) -> str:
        """Create a workflow and return its remote id."""
        payload = self.build_payload(name, project_id, org_id, template_id, description, trigger)
        result = await self._client._post("/workflows", payload)

        data = result.get("data") if isinstance(result, dict) else None
        workflow_id = data.get("id") if isinstance(data, dict) else None
        if not workflow_id:
            raise APIResponseError("Failed to create workflow: response has no id", response=result)
        return workflow_id

    async def get(self, workflow_id: str, org_id: str | None = None) -> dict[str, Any]:
        """Get workflow details.

        Returns:
            The ``data`` object, including ``components``/``steps`` and ``triggers``
        """
        result = await self._client._get(f"/workflows/{workflow_id}", org_id=org_id)
        if not isinstance(result, dict) or not isinstance(result.get("data"), dict):
            raise APIResponseError("Invalid response format from API", response=result)
        return result["data"]

    async def list_for_project(self, project_id: str, org_id: str | None = None) -> list[dict[str, Any]]:
        """List the workflows of a project."""
        result = await self._client._get(f"/projects/{project_id}/workflows", org_id=org_id)
        data = result.get("data") if isinstance(result, dict) else None
        if not isinstance(data, list):
            raise APIResponseError("Invalid response format from API", response=result)
        return data
