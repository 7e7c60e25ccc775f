"""Helpers for building/parsing Pipedream app URLs."""

from __future__ import annotations

import re


_PROJECT_ID_RE = re.compile(r"proj_[a-zA-Z0-9]+")

LOGIN_URL_MARKERS = ("login", "signin")
TITLE_SUFFIX = " | Pipedream"


def extract_project_id(url: object) -> str | None:
    """Extract the ``proj_...`` id from a project URL."""
    if not isinstance(url, str) or not url:
        return None
    match = _PROJECT_ID_RE.search(url)
    return match.group(0) if match else None


def is_login_url(url: object) -> bool:
    if not isinstance(url, str):
        return False
    lowered = url.lower()
    return any(marker in lowered for marker in LOGIN_URL_MARKERS)


def looks_like_project_id(value: str | None) -> bool:
    """Project ids start with ``p_`` or ``proj_``; workflow ids do not."""
    return bool(value) and value.startswith(("p_", "proj_"))


def workflow_page_url(app_base_url: str, workflow_id: str) -> str:
    # Projects open through the workflows route as well.
    return f"{app_base_url.rstrip('/')}/workflows/{workflow_id}"


def name_from_title(title: str | None) -> str | None:
    """Project name from a page title like ``My Project | Pipedream``."""
    if not title:
        return None
    name = title.replace(TITLE_SUFFIX, "").strip()
    return name or None
