"""Workflow use cases over the REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING

from ..api import webhook_url, workflow_url
from ..errors import APIError, WorkflowNotFoundError
from ..models import (
    TriggerSpec,
    WorkflowRecord,
    default_name,
    is_trigger,
)
from ..browser.urls import looks_like_project_id
from ..storage import find_local_workflow_id, load_project_config, write_workflow_record

if TYPE_CHECKING:
    from ..api import PipedreamClient
    from ..config import Settings


logger = logging.getLogger(__name__)


@dataclass
class CreatedWorkflow:
    id: str
    name: str
    url: str
    project_id: str
    org_id: str
    directory: Path
    trigger: TriggerSpec | None = None
    webhook_url: str | None = None


@dataclass
class WorkflowDetails:
    id: str
    name: str
    url: str
    components: list[dict[str, Any]] = field(default_factory=list)

    @property
    def triggers(self) -> list[dict[str, Any]]:
        return [c for c in self.components if is_trigger(c)]


@dataclass
class ProjectWorkflows:
    """Workflows of a project, shown when no single workflow was identified."""

    project_id: str
    workflows: list[dict[str, Any]]
    # True when the caller passed a project id where a workflow id was expected.
    from_project_id_hint: bool = False


async def create_workflow(
    client: "PipedreamClient",
    settings: "Settings",
    project_id: str,
    name: str | None = None,
    template: str | None = None,
    description: str | None = None,
    trigger: TriggerSpec | None = None,
    org_id: str | None = None,
    project_dir: str | Path | None = None,
) -> CreatedWorkflow:
    """Create a workflow remotely, then record it under ``workflows/<id>/``.

    Nothing is written locally when the remote call fails.
    """
    name = name or default_name("Workflow")
    org_id = await client.resolve_org_id(org_id)
    logger.info("Using workspace (org_id): %s", org_id)

    logger.info("Creating workflow: %s", name)
    workflow_id = await client.workflows.create(
        name,
        project_id,
        org_id,
        template_id=template,
        description=description,
        trigger=trigger,
    )

    record_trigger = trigger.to_dict() if trigger else None
    hook = None
    if trigger and trigger.type == "http":
        hook = webhook_url(workflow_id, settings.webhook_base_url)

    record = WorkflowRecord(
        id=workflow_id,
        name=name,
        project_id=project_id,
        description=description or "",
        trigger=record_trigger,
        webhook_url=hook,
    )
    directory = write_workflow_record(project_dir or Path.cwd(), record)

    return CreatedWorkflow(
        id=workflow_id,
        name=name,
        url=workflow_url(workflow_id, settings.app_base_url),
        project_id=project_id,
        org_id=org_id,
        directory=directory,
        trigger=trigger,
        webhook_url=hook,
    )


def resolve_workflow_target(
    workflow_id: str | None,
    project_id: str | None,
    cwd: str | Path | None = None,
) -> tuple[str | None, str | None]:
    """Return ``(workflow_id, project_id)`` for the list commands.

    Workflow id: option, then ``workflow.json`` / directory name. When it is
    still unknown, the project id (option, then config.ini) is returned so the
    caller can list that project's workflows instead.
    """
    workflow_id = workflow_id or find_local_workflow_id(cwd)
    if workflow_id:
        return workflow_id, None

    project_id = project_id or load_project_config(cwd).id
    if project_id:
        return None, project_id

    raise WorkflowNotFoundError(
        "Workflow ID is required. Please provide --workflow <id> or run this command "
        "from a workflow directory."
    )


async def list_project_workflows(
    client: "PipedreamClient",
    project_id: str,
    org_id: str | None = None,
    from_project_id_hint: bool = False,
) -> ProjectWorkflows:
    workflows = await client.workflows.list_for_project(project_id, org_id=org_id)
    return ProjectWorkflows(project_id, workflows, from_project_id_hint)


async def get_workflow_details(
    client: "PipedreamClient",
    settings: "Settings",
    workflow_id: str,
    org_id: str | None = None,
) -> WorkflowDetails | ProjectWorkflows:
    """Fetch a workflow's components.

    When the lookup fails and the id looks like a project id, that project's
    workflows are returned instead.
    """
    try:
        data = await client.workflows.get(workflow_id, org_id=org_id)
    except APIError:
        if not looks_like_project_id(workflow_id):
            raise
        logger.info("%s looks like a project ID; listing its workflows instead", workflow_id)
        return await list_project_workflows(client, workflow_id, org_id, from_project_id_hint=True)

    components = data.get("components") or data.get("steps") or []
    return WorkflowDetails(
        id=workflow_id,
        name=data.get("name") or "Unnamed Workflow",
        url=workflow_url(workflow_id, settings.app_base_url),
        components=list(components),
    )
