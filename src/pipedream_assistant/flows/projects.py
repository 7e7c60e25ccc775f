"""Project use cases driven through the web UI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from ..api import PipedreamClient
from ..browser.clicker import CREATE_PROJECT, NEW_PROJECT, SETTINGS_LINK, HeuristicClicker
from ..browser.login import login_targeted
from ..browser.urls import extract_project_id, is_login_url, name_from_title, workflow_page_url
from ..errors import (
    AssistantError,
    AuthenticationError,
    ElementNotFoundError,
    LoginFailedError,
    ProjectNotFoundError,
)
from ..models import ProjectRecord
from ..storage import write_project_config

if TYPE_CHECKING:
    from ..browser.agent import BrowserAgent
    from ..config import Credentials, Settings
    from ..runlog import RunLog


logger = logging.getLogger(__name__)

PROJECT_NAME_SELECTORS = ('textarea[placeholder="Project Name"]', "textarea", 'input[placeholder*="Project"]')


@dataclass
class CreatedProject:
    record: ProjectRecord
    directory: Path
    config_path: Path


@dataclass
class OpenedProject:
    project_id: str
    name: str
    url: str
    auth_method: str


async def _login_or_raise(agent, credentials, run_log, settings) -> str:
    result = await login_targeted(agent, credentials, run_log, settings)
    if not result.success:
        raise LoginFailedError("Login failed")
    return result.final_url


async def _enter_project_name(agent: "BrowserAgent", name: str, run_log: "RunLog") -> None:
    await agent.wait_for_selector("textarea, input", timeout=5)
    for selector in PROJECT_NAME_SELECTORS:
        if await agent.fill(selector, name):
            run_log.log(f"Project name entered via {selector}")
            return

    run_log.warning("Could not set project name via JavaScript, trying keyboard input")
    await agent.click("textarea")
    await agent.type_text(name)


async def _find_project_id(agent: "BrowserAgent", run_log: "RunLog") -> str | None:
    url = await agent.current_url()
    run_log.log(f"Final URL: {url}")
    project_id = extract_project_id(url)
    if project_id:
        return project_id

    run_log.log("Project ID not in URL, trying the project settings page...")
    try:
        await HeuristicClicker(agent, run_log).click(SETTINGS_LINK)
    except ElementNotFoundError:
        return None
    await agent.wait_until(lambda: _url_has_project_id(agent), timeout=5)
    return extract_project_id(await agent.current_url())


async def _url_has_project_id(agent: "BrowserAgent") -> bool:
    return extract_project_id(await agent.current_url()) is not None


async def create_project(
    agent: "BrowserAgent",
    settings: "Settings",
    credentials: "Credentials",
    name: str,
    base_dir: str | Path,
    run_log: "RunLog",
    api_key: str | None = None,
) -> CreatedProject:
    """Log in, create a project through the UI and write its config.ini.

    Raises:
        LoginFailedError: still on the login page after submitting
        ElementNotFoundError: the New project / Create Project control was not found
        ProjectNotFoundError: the project id could not be read back; nothing is written
    """
    credentials.require("username", "password")
    run_log.log(f"Project name: {name}")

    url = await _login_or_raise(agent, credentials, run_log, settings)

    run_log.log("Step 2: Navigating to projects page...")
    if "/projects" not in url:
        run_log.log("Not on projects page, navigating there now")
        await agent.navigate(settings.projects_url)
    else:
        run_log.log("Already on projects page")
    await run_log.screenshot(agent, "projects-page")

    clicker = HeuristicClicker(agent, run_log)
    run_log.log("Step 3: Creating new project...")
    await clicker.click(NEW_PROJECT)
    await run_log.screenshot(agent, "new-project-modal")

    run_log.log(f"Step 4: Setting project name to: {name}")
    await _enter_project_name(agent, name, run_log)
    await run_log.screenshot(agent, "project-name-entered")

    run_log.log("Step 5: Clicking Create Project button...")
    before = await agent.current_url()
    await clicker.click(CREATE_PROJECT)

    run_log.log("Waiting for navigation to new project...")
    if not await agent.wait_for_navigation(before, timeout=settings.navigation_timeout_seconds):
        run_log.log("Navigation timeout - continuing anyway")
    await agent.wait_until(lambda: _url_has_project_id(agent), timeout=5)
    await run_log.screenshot(agent, "after-project-creation")

    project_id = await _find_project_id(agent, run_log)
    if not project_id:
        run_log.warning("Could not extract project ID from URL")
        raise ProjectNotFoundError("Project creation failed: could not determine the new project ID")
    run_log.log(f"Successfully extracted project ID: {project_id}")

    record = ProjectRecord(name=name, id=project_id, username=credentials.username)
    directory = Path(base_dir) / name
    config_path = write_project_config(directory, record, api_key=api_key)
    run_log.log(f"Created config file: {config_path}")
    return CreatedProject(record=record, directory=directory, config_path=config_path)


async def _open_with_api_key(
    agent: "BrowserAgent",
    settings: "Settings",
    api_key: str,
    project_id: str,
    run_log: "RunLog",
    client: PipedreamClient | None,
) -> None:
    run_log.log("Using API key authentication")
    client = client or PipedreamClient.from_settings(settings, api_key)
    async with client as pd:
        me = await pd.get_me()
    run_log.log(f"Authenticated as: {me.get('email')}")

    await agent.navigate(settings.app_base_url)
    await agent.set_local_storage("pd_api_key", api_key)
    await agent.navigate(workflow_page_url(settings.app_base_url, project_id))
    await run_log.screenshot(agent, "project-page")

    if "/auth/login" in await agent.current_url():
        run_log.warning("API key authentication failed, redirected to login page")
        raise AuthenticationError("API key authentication failed")


async def open_project(
    agent: "BrowserAgent",
    settings: "Settings",
    credentials: "Credentials",
    project_id: str,
    run_log: "RunLog",
    project_name: str | None = None,
    client: PipedreamClient | None = None,
) -> OpenedProject:
    """Open a project page, by API key first and username/password as fallback."""
    if not project_id:
        raise ProjectNotFoundError(
            "Project ID is required. Provide it via --project option or config.ini file"
        )
    run_log.log(f"Opening project with ID: {project_id}")

    can_fall_back = credentials.has("username")
    auth_method = None

    if credentials.api_key:
        try:
            await _open_with_api_key(agent, settings, credentials.api_key, project_id, run_log, client)
            auth_method = "api_key"
        except (AssistantError, httpx.HTTPError) as e:
            run_log.warning(f"API key authentication failed: {e}")
            if not can_fall_back:
                raise AuthenticationError(
                    "Authentication failed and no username/password fallback available"
                ) from e
            run_log.log("Falling back to username/password authentication")

    if auth_method is None:
        credentials.require("username", "password")
        await _login_or_raise(agent, credentials, run_log, settings)
        run_log.log(f"Navigating to project: {project_id}")
        await agent.navigate(workflow_page_url(settings.app_base_url, project_id))
        await run_log.screenshot(agent, "project-page")
        auth_method = "password"

    final_url = await agent.current_url()
    run_log.log(f"Final URL: {final_url}")
    if project_id not in final_url:
        run_log.warning("Final URL does not contain the project ID")
    if is_login_url(final_url):
        raise LoginFailedError("Redirected to the login page while opening the project")

    name = project_name or name_from_title(await agent.title()) or "Unknown Project"
    run_log.log("Project opened successfully!")
    return OpenedProject(project_id=project_id, name=name, url=final_url, auth_method=auth_method)
