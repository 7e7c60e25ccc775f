"""Pipedream Assistant CLI - Main entry point."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import Credentials, Settings, load_settings, resolve_credentials
from .errors import AssistantError, MissingCredentialError
from .models import (
    TriggerSpec,
    component_display_name,
    component_type_display,
    default_name,
    trigger_schedule,
)
from .runlog import RunLog, configure_logging
from .storage import append_env_value, load_project_config, write_env_file

app = typer.Typer(
    name="pdassist",
    help="Pipedream Assistant - manage Pipedream projects and workflows",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Pipedream Assistant - manage Pipedream projects and workflows."""
    configure_logging(logging.DEBUG if verbose else logging.INFO)


def _output_result(result: Any) -> None:
    console.print_json(json.dumps(result, default=str))


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def _credentials(
    settings: Settings,
    *required: str,
    api_key: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    org_id: Optional[str] = None,
) -> Credentials:
    """Resolve credentials and check the required ones before any I/O."""
    creds = resolve_credentials(
        settings,
        load_project_config(),
        api_key=api_key,
        username=username,
        password=password,
        org_id=org_id,
    )
    try:
        return creds.require(*required)
    except MissingCredentialError as e:
        _fail(e.message)


def _run(coro, interrupt_ok: bool = False) -> Any:
    """Run a coroutine, turning failures into exit code 1.

    With ``interrupt_ok`` Ctrl-C is the normal way to finish and exits 0.
    """
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        if interrupt_ok:
            console.print("\n[dim]Closing browser...[/dim]")
            raise typer.Exit(0)
        console.print("\n[yellow]Cancelled[/yellow]")
        raise typer.Exit(1)
    except (AssistantError, httpx.HTTPError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _run_log(settings: Settings, command: str) -> RunLog:
    run_log = RunLog(command, settings.log_path())
    run_log.log(f"Starting {command} (Run ID: {run_log.run_id})")
    return run_log


async def _hold(seconds: Optional[float]) -> None:
    """Keep the browser open for ``seconds``, or until Ctrl-C when ``None``."""
    if seconds is None:
        await asyncio.Event().wait()
    elif seconds > 0:
        await asyncio.sleep(seconds)


async def _with_error_screenshot(agent, run_log: RunLog, coro):
    try:
        return await coro
    except (AssistantError, httpx.HTTPError) as e:
        run_log.error(f"ERROR: {e}")
        await run_log.screenshot(agent, "error-state")
        raise


def _project_id_or_config(project: Optional[str]) -> str:
    project_id = project or load_project_config().id
    if not project_id:
        _fail(
            "Project ID is required. Provide via --project option or run this command "
            "from a project directory with config.ini"
        )
    return project_id


# ============================================================================
# Project Commands
# ============================================================================


@app.command("open")
def open_command(
    api_key: Optional[str] = typer.Option(None, "--api-key", "-k", help="Pipedream API key"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project ID to open"),
    username: Optional[str] = typer.Option(
        None, "--username", "-u", help="Pipedream username/email (fallback if API key fails)"
    ),
    password: Optional[str] = typer.Option(
        None, "--password", "-w", help="Pipedream password (fallback if API key fails)"
    ),
):
    """Open a Pipedream project in the browser and keep it open until Ctrl-C."""
    from .browser.agent import BrowserAgent
    from .flows.projects import open_project

    settings = load_settings()
    config = load_project_config()
    project_id = _project_id_or_config(project)
    creds = _credentials(settings, api_key=api_key, username=username, password=password)
    if not creds.api_key:
        try:
            creds.require("username", "password")
        except MissingCredentialError:
            _fail(
                "API key or username/password is required. Provide via --api-key or "
                "--username/--password, or set PIPEDREAM_API_KEY in .env file"
            )

    run_log = _run_log(settings, "open-project")

    async def _open():
        async with BrowserAgent.from_settings(settings) as agent:
            opened = await _with_error_screenshot(
                agent,
                run_log,
                open_project(
                    agent,
                    settings,
                    creds,
                    project_id,
                    run_log,
                    project_name=config.name if config.id == project_id else None,
                ),
            )
            console.print(
                Panel(
                    f"[bold green]Project \"{opened.name}\" opened successfully![/bold green]\n\n"
                    f"Project ID: {opened.project_id}\n"
                    f"Log file: {run_log.log_path}\n\n"
                    "[dim]Press Ctrl+C when you want to close the browser.[/dim]",
                    title="Project Open",
                )
            )
            await _hold(None)

    _run(_open(), interrupt_ok=True)


@app.command("create-project")
def create_project_command(
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Pipedream username/email"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Pipedream password"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Project name"),
):
    """Log in and create a new project through the web UI."""
    settings = load_settings()
    creds = _credentials(settings, "username", "password", username=username, password=password)
    _create_project(settings, creds, name or default_name("Project"), Path.cwd())


def _create_project(settings: Settings, creds: Credentials, name: str, base_dir: Path, api_key=None):
    from .browser.agent import BrowserAgent
    from .flows.projects import create_project

    run_log = _run_log(settings, "create-project")

    async def _create():
        async with BrowserAgent.from_settings(settings) as agent:
            return await _with_error_screenshot(
                agent,
                run_log,
                create_project(agent, settings, creds, name, base_dir, run_log, api_key=api_key),
            )

    try:
        created = _run(_create())
    except typer.Exit:
        console.print(f"[red]Project creation failed![/red] Log file: {run_log.log_path}")
        raise

    console.print(
        Panel(
            f"[bold green]Project \"{created.record.name}\" created successfully![/bold green]\n\n"
            f"Project ID: {created.record.id}\n"
            f"Directory: {created.directory}\n"
            f"Log file: {run_log.log_path}",
            title="Project Created",
        )
    )
    return created


@app.command("new-project")
def new_project():
    """Interactive wizard: prompt for details, write .env and create the project."""
    settings = load_settings()

    name = typer.prompt("Project name", default=default_name("Project"))
    base_dir = Path(typer.prompt("Project path", default=str(Path.cwd())))
    username = typer.prompt("Pipedream username", default=settings.username or "")
    password = typer.prompt("Pipedream password", hide_input=True)
    api_key = typer.prompt("Pipedream API key", default="", show_default=False) or None

    creds = _credentials(
        settings, "username", "password", api_key=api_key, username=username, password=password
    )

    project_dir = base_dir / name
    env_path = write_env_file(
        project_dir,
        {
            "PIPEDREAM_USERNAME": creds.username,
            "PIPEDREAM_PASSWORD": creds.password,
            "PIPEDREAM_API_KEY": creds.api_key,
            "PROJECT_NAME": name,
        },
    )
    console.print(f"[dim]Wrote {env_path}[/dim]")

    created = _create_project(settings, creds, name, base_dir, api_key=creds.api_key)
    append_env_value(created.directory, "PROJECT_ID", created.record.id)


# ============================================================================
# Login Commands
# ============================================================================


def _login(strategy: str, username: Optional[str], password: Optional[str], hold: float) -> None:
    from .browser.agent import BrowserAgent
    from .browser.login import STRATEGIES

    settings = load_settings()
    creds = _credentials(settings, "username", "password", username=username, password=password)
    run_log = _run_log(settings, f"login-{strategy}")
    login_fn = STRATEGIES[strategy]

    async def _do_login():
        async with BrowserAgent.from_settings(settings) as agent:
            result = await login_fn(agent, creds, run_log, settings)
            if result.success:
                console.print("[green]Successfully logged in to Pipedream![/green]")
            else:
                console.print("[red]Login failed. Check credentials and screenshots.[/red]")
            console.print(f"[dim]Final URL: {result.final_url}[/dim]")
            console.print(f"[dim]Log file: {run_log.log_path}[/dim]")
            if hold:
                console.print(f"[dim]Keeping browser open for {hold:g} seconds...[/dim]")
                await _hold(hold)
            return result

    result = _run(_do_login())
    if not result.success:
        raise typer.Exit(1)


_HOLD_HELP = "Seconds to keep the browser open afterwards"


@app.command("login")
def login(
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Pipedream username/email"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Pipedream password"),
    hold: float = typer.Option(30, "--hold", help=_HOLD_HELP),
):
    """Test login to Pipedream (keyboard navigation, DOM fill fallback)."""
    _login("keyboard", username, password, hold)


@app.command("login-simple")
def login_simple(
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Pipedream username/email"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Pipedream password"),
    hold: float = typer.Option(30, "--hold", help=_HOLD_HELP),
):
    """Simple login: reveal or inject the email field, then type."""
    _login("simple", username, password, hold)


@app.command("login-direct")
def login_direct(
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Pipedream username/email"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Pipedream password"),
    hold: float = typer.Option(30, "--hold", help=_HOLD_HELP),
):
    """Direct login with selector cascade and Auth0 support."""
    _login("direct", username, password, hold)


@app.command("login-targeted")
def login_targeted(
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Pipedream username/email"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Pipedream password"),
    hold: float = typer.Option(30, "--hold", help=_HOLD_HELP),
):
    """Targeted login based on page analysis (Email label + offset click)."""
    _login("targeted", username, password, hold)


# ============================================================================
# Analysis Commands
# ============================================================================


def _print_login_report(report: dict[str, Any]) -> None:
    console.print(
        Panel(
            f"URL: {report.get('url')}\n"
            f"Title: {report.get('title')}\n"
            f"Auth provider: {report.get('authProvider') or 'unknown'}",
            title="Login Page",
        )
    )

    inputs = Table(title=f"Inputs ({len(report.get('inputs') or [])})")
    inputs.add_column("Type", style="cyan")
    inputs.add_column("ID")
    inputs.add_column("Name")
    inputs.add_column("Placeholder")
    inputs.add_column("Visible", style="green")
    for item in report.get("inputs") or []:
        inputs.add_row(
            item.get("type") or "-",
            item.get("id") or "-",
            item.get("name") or "-",
            item.get("placeholder") or "-",
            "yes" if item.get("visible") else "no",
        )
    console.print(inputs)

    buttons = Table(title=f"Buttons ({len(report.get('buttons') or [])})")
    buttons.add_column("Type", style="cyan")
    buttons.add_column("Text")
    for item in report.get("buttons") or []:
        buttons.add_row(item.get("type") or "-", item.get("text") or "-")
    console.print(buttons)

    labels = [l.get("text") for l in report.get("labels") or [] if l.get("text")]
    if labels:
        console.print(f"[bold]Labels:[/bold] {', '.join(labels)}")
    emails = report.get("emailElements") or []
    console.print(f"[bold]Email-related elements:[/bold] {len(emails)}")
    for el in emails:
        console.print(f"  [dim]{el.get('domPath')}[/dim]")


@app.command("analyze-login")
def analyze_login(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Print the structure of the login page."""
    from .browser.agent import BrowserAgent
    from .browser.analysis import analyze_login_page

    settings = load_settings()
    run_log = _run_log(settings, "analyze-login")

    async def _analyze():
        async with BrowserAgent.from_settings(settings) as agent:
            await agent.navigate(settings.login_url)
            await run_log.screenshot(agent, "login-page", full_page=True)
            return await analyze_login_page(agent)

    report = _run(_analyze())
    if json_output:
        _output_result(report)
    else:
        _print_login_report(report)


@app.command("analyze-projects")
def analyze_projects(
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Pipedream username/email"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Pipedream password"),
    click: bool = typer.Option(False, "--click", help="Also click the New project control"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Log in and print where the New project control lives on the projects page."""
    from .browser.agent import BrowserAgent
    from .browser.analysis import analyze_projects_page, highlight_projects_page
    from .browser.clicker import NEW_PROJECT, HeuristicClicker
    from .browser.login import login_targeted as targeted
    from .errors import LoginFailedError

    settings = load_settings()
    creds = _credentials(settings, "username", "password", username=username, password=password)
    run_log = _run_log(settings, "analyze-projects")

    async def _analyze():
        async with BrowserAgent.from_settings(settings) as agent:
            result = await targeted(agent, creds, run_log, settings)
            if not result.success:
                raise LoginFailedError("Login failed")
            await agent.navigate(settings.projects_url)
            await run_log.screenshot(agent, "projects-page-analysis", full_page=True)

            report = await analyze_projects_page(agent)
            await highlight_projects_page(agent)
            await run_log.screenshot(agent, "projects-page-highlighted", full_page=True)

            if click:
                candidate = await HeuristicClicker(agent, run_log).click(NEW_PROJECT)
                report["click"] = {
                    "strategy": candidate.strategy.value,
                    "reason": candidate.reason,
                }
                await run_log.screenshot(agent, "after-click")
            return report

    report = _run(_analyze())
    if json_output:
        _output_result(report)
        return

    console.print(Panel(f"URL: {report.get('url')}", title="Projects Page"))
    console.print(f"Elements with label text: {len(report.get('labelledElements') or [])}")
    fp = report.get("fingerprintDiv")
    console.print(
        f"Fingerprint div: {'found' if fp else 'not found'}"
        + (f" (button: {fp.get('parentButtonPath')})" if fp else "")
    )

    table = Table(title="Relevant Buttons")
    table.add_column("Text", style="cyan")
    table.add_column("Label", style="green")
    table.add_column("Plus icon", style="green")
    table.add_column("Visible")
    for b in report.get("relevantButtons") or []:
        table.add_row(
            b.get("text") or "-",
            "yes" if b.get("hasLabel") else "no",
            "yes" if b.get("hasIcon") else "no",
            "yes" if b.get("visible") else "no",
        )
    console.print(table)
    console.print(f"Plus icon elements: {len(report.get('iconElements') or [])}")
    if report.get("click"):
        console.print(
            f"[green]Clicked via {report['click']['strategy']}[/green] ({report['click']['reason']})"
        )


@app.command("quick-test")
def quick_test(
    hold: float = typer.Option(0, "--hold", help=_HOLD_HELP),
):
    """Browser smoke test: two navigations with screenshots."""
    from .browser.agent import BrowserAgent

    settings = load_settings()
    run_log = _run_log(settings, "quick-test")

    async def _test():
        async with BrowserAgent.from_settings(settings) as agent:
            run_log.log("Browser opened successfully")
            for name, url in (("google-test", "https://www.google.com"), ("pipedream-home", settings.app_base_url)):
                run_log.log(f"Navigating to {url}...")
                await agent.navigate(url)
                await run_log.screenshot(agent, name)
            await _hold(hold)

    _run(_test())
    console.print(f"[green]Quick test completed.[/green] Log file: {run_log.log_path}")


# ============================================================================
# Workflow Commands
# ============================================================================


def _make_client(settings: Settings, api_key: str):
    from .api import PipedreamClient

    return PipedreamClient.from_settings(settings, api_key)


@app.command("create-workflow")
def create_workflow(
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Workflow name"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Template ID"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Workflow description"),
    trigger: Optional[str] = typer.Option(None, "--trigger", help="Trigger type: http, schedule"),
    schedule: Optional[str] = typer.Option(None, "--schedule", "-s", help="Cron schedule for schedule triggers"),
    trigger_path: Optional[str] = typer.Option(None, "--trigger-path", help="Path for HTTP webhook triggers"),
    api_key: Optional[str] = typer.Option(None, "--api-key", "-k", help="Pipedream API key"),
    org: Optional[str] = typer.Option(None, "--org", help="Workspace (org) ID"),
):
    """Create a workflow through the API and record it under workflows/<id>/."""
    from .flows.workflows import create_workflow as create

    settings = load_settings()
    creds = _credentials(settings, "api_key", api_key=api_key, org_id=org)
    if project:
        project_id, project_dir = project, Path.cwd()
    else:
        # workflows/ lives next to the config.ini the id came from
        config = load_project_config()
        project_id = _project_id_or_config(config.id)
        project_dir = config.path.parent

    trigger_spec = TriggerSpec.build(
        trigger or settings.default_trigger_type,
        schedule=schedule or settings.default_schedule,
        path=trigger_path,
    )

    async def _create():
        async with _make_client(settings, creds.api_key) as pd:
            return await create(
                pd,
                settings,
                project_id,
                name=name,
                template=template,
                description=description,
                trigger=trigger_spec,
                org_id=creds.org_id,
                project_dir=project_dir,
            )

    created = _run(_create())

    lines = [
        f"[bold green]Workflow \"{created.name}\" created successfully![/bold green]\n",
        f"Workflow ID: {created.id}",
        f"URL: {created.url}",
        f"Local directory: {created.directory}",
    ]
    if created.trigger:
        lines.append(f"Trigger type: {created.trigger.type}")
        if created.webhook_url:
            lines.append(f"Webhook URL: {created.webhook_url}")
        if created.trigger.schedule:
            lines.append(f"Schedule: {created.trigger.schedule}")
    console.print(Panel("\n".join(lines), title="Workflow Created"))


def _print_project_workflows(listing, verb: str) -> None:
    if listing.from_project_id_hint:
        console.print(
            f"[yellow]{listing.project_id} appears to be a project ID rather than a workflow ID.[/yellow]"
        )
    if not listing.workflows:
        console.print("No workflows found in the project.")
        return

    table = Table(title=f"Workflows in {listing.project_id} ({len(listing.workflows)})")
    table.add_column("#", style="dim")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    for i, w in enumerate(listing.workflows, 1):
        table.add_row(str(i), w.get("id", ""), w.get("name", "-"))
    console.print(table)
    console.print(f"[dim]Use --workflow <id> to choose which workflow to {verb}.[/dim]")


def _fetch_details(settings: Settings, creds: Credentials, workflow: Optional[str], project: Optional[str]):
    from .errors import WorkflowNotFoundError
    from .flows.workflows import get_workflow_details, list_project_workflows, resolve_workflow_target

    try:
        workflow_id, project_id = resolve_workflow_target(workflow, project)
    except WorkflowNotFoundError as e:
        _fail(e.message)

    async def _fetch():
        async with _make_client(settings, creds.api_key) as pd:
            org_id = await pd.resolve_org_id(creds.org_id)
            if workflow_id is None:
                return await list_project_workflows(pd, project_id, org_id)
            return await get_workflow_details(pd, settings, workflow_id, org_id)

    return _run(_fetch())


@app.command("list-workflows")
def list_workflows(
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project ID"),
    api_key: Optional[str] = typer.Option(None, "--api-key", "-k", help="Pipedream API key"),
    org: Optional[str] = typer.Option(None, "--org", help="Workspace (org) ID"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List the workflows of a project."""
    from .flows.workflows import list_project_workflows

    settings = load_settings()
    creds = _credentials(settings, "api_key", api_key=api_key, org_id=org)
    project_id = _project_id_or_config(project)

    async def _list():
        async with _make_client(settings, creds.api_key) as pd:
            org_id = await pd.resolve_org_id(creds.org_id)
            return await list_project_workflows(pd, project_id, org_id)

    listing = _run(_list())
    if json_output:
        _output_result(listing.workflows)
    else:
        _print_project_workflows(listing, "inspect")


@app.command("list-steps")
def list_steps(
    workflow: Optional[str] = typer.Option(None, "--workflow", "-w", help="Workflow ID"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project ID"),
    detailed: bool = typer.Option(False, "--detailed", "-d", help="Show source and options of each step"),
    api_key: Optional[str] = typer.Option(None, "--api-key", "-k", help="Pipedream API key"),
    org: Optional[str] = typer.Option(None, "--org", help="Workspace (org) ID"),
):
    """List the steps of a workflow."""
    from .flows.workflows import ProjectWorkflows

    settings = load_settings()
    creds = _credentials(settings, "api_key", api_key=api_key, org_id=org)
    result = _fetch_details(settings, creds, workflow, project)

    if isinstance(result, ProjectWorkflows):
        _print_project_workflows(result, "retrieve steps for")
        return

    console.print(f"[bold]Workflow:[/bold] {result.name} ({result.id})")
    console.print(f"[bold]URL:[/bold] {result.url}")
    if not result.components:
        console.print("No steps found for this workflow.")
        return

    table = Table(title=f"Steps ({len(result.components)} total)")
    table.add_column("#", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("App")
    table.add_column("Info")
    for i, component in enumerate(result.components, 1):
        type_display = component_type_display(component)
        app_name = component.get("app") or ""
        info = ""
        if "Trigger" in type_display:
            if app_name == "http":
                info = f"Webhook URL: {settings.webhook_base_url}/{result.id}/events"
            elif app_name == "schedule" and trigger_schedule(component):
                info = f"Schedule: {trigger_schedule(component)}"
        table.add_row(str(i), component_display_name(component), type_display, app_name, info)
    console.print(table)

    if detailed:
        for i, component in enumerate(result.components, 1):
            details = {k: component[k] for k in ("source", "options") if component.get(k)}
            if details:
                console.print(f"[bold]{i}. {component_display_name(component)}[/bold]")
                _output_result(details)


@app.command("list-triggers")
def list_triggers(
    workflow: Optional[str] = typer.Option(None, "--workflow", "-w", help="Workflow ID"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project ID"),
    api_key: Optional[str] = typer.Option(None, "--api-key", "-k", help="Pipedream API key"),
    org: Optional[str] = typer.Option(None, "--org", help="Workspace (org) ID"),
):
    """List the triggers of a workflow."""
    from .flows.workflows import ProjectWorkflows

    settings = load_settings()
    creds = _credentials(settings, "api_key", api_key=api_key, org_id=org)
    result = _fetch_details(settings, creds, workflow, project)

    if isinstance(result, ProjectWorkflows):
        _print_project_workflows(result, "retrieve triggers for")
        return

    console.print(f"[bold]Workflow:[/bold] {result.name} ({result.id})")
    triggers = result.triggers
    if not triggers:
        console.print("No triggers found for this workflow.")
        return

    for i, trigger in enumerate(triggers, 1):
        source = trigger.get("source") or {}
        trigger_type = source.get("type") or trigger.get("type")
        app_name = trigger.get("app") or "unknown"
        lines = [f"App: {app_name} ({trigger_type})"]
        if app_name == "http":
            lines.append(f"Webhook URL: {settings.webhook_base_url}/{result.id}/events")
        elif app_name == "schedule":
            lines.append(f"Schedule: {trigger_schedule(trigger) or 'unknown'}")
        config = trigger.get("source") or trigger.get("options")
        if config:
            lines.append("Configuration:\n" + json.dumps(config, indent=2))
        console.print(Panel("\n".join(lines), title=f"Trigger #{i}"))


@app.command()
def version():
    """Show version information."""
    from . import __version__

    console.print(f"Pipedream Assistant v{__version__}")


if __name__ == "__main__":
    app()
