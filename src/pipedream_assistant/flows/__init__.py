"""Use cases shared by the CLI commands."""

from .projects import CreatedProject, OpenedProject, create_project, open_project
from .workflows import (
    CreatedWorkflow,
    ProjectWorkflows,
    WorkflowDetails,
    create_workflow,
    get_workflow_details,
    list_project_workflows,
    resolve_workflow_target,
)

__all__ = [
    "CreatedProject",
    "CreatedWorkflow",
    "OpenedProject",
    "ProjectWorkflows",
    "WorkflowDetails",
    "create_project",
    "create_workflow",
    "get_workflow_details",
    "list_project_workflows",
    "open_project",
    "resolve_workflow_target",
]
