"""Local records for projects and workflows, plus workflow component helpers."""

from __future__ import annotations

import secrets
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


DEFAULT_SCHEDULE = "0 0 * * *"


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_name(prefix: str) -> str:
    """Date-stamped default name, e.g. ``Project_2024-01-15``."""
    return f"{prefix}_{datetime.now(timezone.utc).date().isoformat()}"


@dataclass
class ProjectRecord:
    """A project created through the web UI."""

    name: str
    id: str
    created_at: str = field(default_factory=utc_now_iso)
    username: str | None = None

    def to_sections(self) -> dict[str, dict[str, str]]:
        """INI sections for config.ini."""
        sections: dict[str, dict[str, str]] = {
            "project": {"name": self.name, "id": self.id, "created_at": self.created_at},
        }
        if self.username:
            sections["pipedream"] = {"username": self.username}
        return sections


@dataclass
class ProjectConfig:
    """What a command can learn from a config.ini (all fields optional)."""

    id: str | None = None
    name: str | None = None
    created_at: str | None = None
    username: str | None = None
    api_key: str | None = None
    path: Path | None = None


def clean_schedule(value: str | None) -> str:
    """Strip quotes that tend to survive .env parsing; fall back to daily at midnight."""
    if not value:
        return DEFAULT_SCHEDULE
    cleaned = value.replace('"', "").strip()
    return cleaned or DEFAULT_SCHEDULE


def generate_webhook_path() -> str:
    """Random 16-hex-character webhook path."""
    return secrets.token_hex(8)


@dataclass
class TriggerSpec:
    """Trigger requested for a new workflow."""

    type: str
    schedule: str | None = None
    path: str | None = None

    @classmethod
    def build(
        cls,
        trigger_type: str | None,
        *,
        schedule: str | None = None,
        path: str | None = None,
    ) -> "TriggerSpec | None":
        """Normalise CLI/env input into a trigger; ``None`` when no type given."""
        if not trigger_type:
            return None
        trigger_type = trigger_type.strip().lower()
        if trigger_type == "schedule":
            return cls(type="schedule", schedule=clean_schedule(schedule))
        if trigger_type == "http":
            return cls(type="http", path=path or generate_webhook_path())
        return cls(type=trigger_type)

    @property
    def is_supported(self) -> bool:
        return self.type in {"http", "schedule"}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.type == "schedule":
            data["schedule"] = self.schedule
        elif self.type == "http":
            data["path"] = self.path
        return data


@dataclass
class WorkflowRecord:
    """Workflow descriptor stored as workflows/<id>/workflow.json."""

    id: str
    name: str
    project_id: str
    description: str = ""
    created_at: str = field(default_factory=utc_now_iso)
    trigger: dict[str, Any] | None = None
    webhook_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.trigger is None:
            data.pop("trigger")
        if self.webhook_url is None:
            data.pop("webhook_url")
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkflowRecord":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            project_id=data.get("project_id", ""),
            description=data.get("description", ""),
            created_at=data.get("created_at", utc_now_iso()),
            trigger=data.get("trigger"),
            webhook_url=data.get("webhook_url"),
        )


# ---------------------------------------------------------------------------
# Workflow components (steps) as returned by GET /workflows/<id>
# ---------------------------------------------------------------------------


def component_display_name(component: dict[str, Any]) -> str:
    """Human name for a workflow component."""
    if component.get("name"):
        return component["name"]

    source = component.get("source") or {}
    if isinstance(source, dict) and source.get("name"):
        return source["name"]

    app = component.get("app") or ""
    if component.get("key"):
        return f"{app} {component['key']}".strip()

    ctype = component.get("type")
    if ctype in {"source", "trigger"}:
        return f"{app} Trigger".strip()
    if ctype == "action":
        return f"{app} Action".strip()

    return "Unnamed Component"


def component_type_display(component: dict[str, Any]) -> str:
    ctype = component.get("type")
    if ctype == "source" or component.get("key") == "trigger":
        return "Trigger"

    source = component.get("source")
    if source:
        source_type = source.get("type") if isinstance(source, dict) else None
        return f"Trigger ({source_type or 'unknown'})"

    if ctype == "action":
        return "Action"
    if ctype == "code":
        return "Code"

    return ctype or "Unknown"


def is_trigger(component: dict[str, Any]) -> bool:
    source = component.get("source")
    return (
        component.get("type") in {"source", "trigger"}
        or (isinstance(source, dict) and bool(source.get("type")))
    )


def trigger_schedule(component: dict[str, Any]) -> str | None:
    source = component.get("source") or {}
    options = component.get("options") or {}
    return source.get("cron") or options.get("cron")
