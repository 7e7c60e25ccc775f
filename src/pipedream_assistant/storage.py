"""Flat local files: config.ini, workflow descriptors and the wizard's .env.

Everything here is written once by the command that creates it and read
back by later commands; nothing is cached or updated in place.
"""

from __future__ import annotations

import configparser
import json
from pathlib import Path

from dotenv import set_key

from .models import ProjectConfig, ProjectRecord, WorkflowRecord


CONFIG_FILENAME = "config.ini"
WORKFLOWS_DIRNAME = "workflows"
WORKFLOW_FILENAME = "workflow.json"
CODE_FILENAME = "code.js"


def write_project_config(
    project_dir: str | Path,
    record: ProjectRecord,
    api_key: str | None = None,
) -> Path:
    """Write ``<project_dir>/config.ini`` and create ``workflows/`` beside it."""
    project_dir = Path(project_dir)
    project_dir.mkdir(parents=True, exist_ok=True)
    (project_dir / WORKFLOWS_DIRNAME).mkdir(exist_ok=True)

    parser = configparser.ConfigParser()
    for section, values in record.to_sections().items():
        parser[section] = values
    if api_key:
        parser["api"] = {"key": api_key}

    path = project_dir / CONFIG_FILENAME
    with open(path, "w") as f:
        parser.write(f)
    return path


def find_project_config(start: str | Path | None = None) -> Path | None:
    """Look for config.ini in ``start`` (default cwd), then its parent."""
    start = Path(start) if start is not None else Path.cwd()
    for directory in (start, start.parent):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_project_config(path: str | Path) -> ProjectConfig:
    """Parse a config.ini; missing sections and keys come back as ``None``."""
    path = Path(path)
    parser = configparser.ConfigParser()
    parser.read(path)

    return ProjectConfig(
        id=parser.get("project", "id", fallback=None) or None,
        name=parser.get("project", "name", fallback=None) or None,
        created_at=parser.get("project", "created_at", fallback=None) or None,
        username=parser.get("pipedream", "username", fallback=None) or None,
        api_key=(
            parser.get("api", "key", fallback=None)
            or parser.get("pipedream", "apikey", fallback=None)
            or None
        ),
        path=path,
    )


def load_project_config(start: str | Path | None = None) -> ProjectConfig:
    """Find and read config.ini, or return an empty ``ProjectConfig``."""
    path = find_project_config(start)
    if path is None:
        return ProjectConfig()
    return read_project_config(path)


def workflow_dir(project_dir: str | Path, workflow_id: str) -> Path:
    return Path(project_dir) / WORKFLOWS_DIRNAME / workflow_id


def write_workflow_record(project_dir: str | Path, record: WorkflowRecord) -> Path:
    """Write ``workflows/<id>/workflow.json`` and a ``code.js`` placeholder.

    Returns the workflow directory.
    """
    target = workflow_dir(project_dir, record.id)
    target.mkdir(parents=True, exist_ok=True)

    with open(target / WORKFLOW_FILENAME, "w") as f:
        json.dump(record.to_dict(), f, indent=2)

    placeholder = (
        "// Placeholder for workflow code\n"
        f"// Workflow ID: {record.id}\n"
        f"// Name: {record.name}\n"
    )
    (target / CODE_FILENAME).write_text(placeholder)
    return target


def read_workflow_record(path: str | Path) -> WorkflowRecord:
    path = Path(path)
    if path.is_dir():
        path = path / WORKFLOW_FILENAME
    with open(path) as f:
        return WorkflowRecord.from_dict(json.load(f))


def find_local_workflow_id(cwd: str | Path | None = None) -> str | None:
    """Infer the workflow id when running inside ``workflows/<id>/``.

    ``./workflow.json`` wins; otherwise the directory name is used when the
    parent directory is called ``workflows``.
    """
    cwd = Path(cwd) if cwd is not None else Path.cwd()

    descriptor = cwd / WORKFLOW_FILENAME
    if descriptor.is_file():
        try:
            return read_workflow_record(descriptor).id or None
        except (OSError, ValueError, KeyError):
            pass

    if cwd.parent.name == WORKFLOWS_DIRNAME:
        return cwd.name
    return None


def write_env_file(project_dir: str | Path, values: dict[str, str | None]) -> Path:
    """Write the wizard's ``.env`` (skips empty values)."""
    path = Path(project_dir) / ".env"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)
    for key, value in values.items():
        if value:
            set_key(str(path), key, value, quote_mode="never")
    return path


def append_env_value(project_dir: str | Path, key: str, value: str) -> Path:
    """Add or update a single ``.env`` entry (e.g. ``PROJECT_ID`` after creation)."""
    return write_env_file(project_dir, {key: value})
