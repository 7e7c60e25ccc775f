"""Pipedream API client module.

Usage:
    from pipedream_assistant.api import PipedreamClient

    async with PipedreamClient(api_key) as pd:
        org_id = await pd.resolve_org_id()
        workflow_id = await pd.workflows.create("My workflow", project_id, org_id)
"""

from .client import PipedreamClient, PipedreamConfig, webhook_url, workflow_url
from .workflows import WorkflowsAPI, trigger_component

__all__ = [
    "PipedreamClient",
    "PipedreamConfig",
    "WorkflowsAPI",
    "trigger_component",
    "webhook_url",
    "workflow_url",
]
