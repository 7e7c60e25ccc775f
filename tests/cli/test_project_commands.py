"""Tests for the browser-driven CLI commands."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from dotenv import dotenv_values

from pipedream_assistant.browser.login import LoginResult
from pipedream_assistant.cli import app
from pipedream_assistant.errors import ProjectNotFoundError
from pipedream_assistant.flows.projects import CreatedProject
from pipedream_assistant.models import ProjectRecord
from tests.conftest import SAMPLE_PROJECT_ID


@pytest.fixture
def mock_browser():
    """Patch BrowserAgent so no browser is launched."""
    agent = MagicMock()
    agent.navigate = AsyncMock(return_value={})
    agent.screenshot = AsyncMock(return_value="shot.png")
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=agent)
    context.__aexit__ = AsyncMock(return_value=None)
    with patch("pipedream_assistant.browser.agent.BrowserAgent") as MockAgent:
        MockAgent.from_settings.return_value = context
        yield MockAgent


class TestMissingCredentials:
    """No browser is launched when credentials are missing."""

    @pytest.mark.parametrize(
        "command",
        [
            ["create-project"],
            ["create-project", "--username", "dev@example.com"],
            ["login"],
            ["login-simple"],
            ["login-direct"],
            ["login-targeted", "--password", "hunter2"],
            ["analyze-projects"],
        ],
    )
    def test_exit_before_browser(self, cli_runner, mock_browser, command):
        result = cli_runner.invoke(app, command)

        assert result.exit_code == 1
        assert "is required" in result.output
        mock_browser.from_settings.assert_not_called()

    def test_open_needs_project(self, cli_runner, mock_browser):
        result = cli_runner.invoke(app, ["open", "--api-key", "k"])

        assert result.exit_code == 1
        assert "Project ID is required" in result.output
        mock_browser.from_settings.assert_not_called()

    def test_open_needs_some_credential(self, cli_runner, mock_browser):
        result = cli_runner.invoke(app, ["open", "--project", SAMPLE_PROJECT_ID, "--username", "dev@example.com"])

        assert result.exit_code == 1
        assert "API key or username/password is required" in result.output
        mock_browser.from_settings.assert_not_called()


class TestCreateProjectCommand:
    def created(self, tmp_path):
        record = ProjectRecord(name="Demo", id=SAMPLE_PROJECT_ID)
        directory = tmp_path / "Demo"
        directory.mkdir(exist_ok=True)
        return CreatedProject(record=record, directory=directory, config_path=directory / "config.ini")

    def test_success(self, cli_runner, mock_browser, isolated_env):
        flow = AsyncMock(return_value=self.created(isolated_env))
        with patch("pipedream_assistant.flows.projects.create_project", flow):
            result = cli_runner.invoke(app, ["create-project", "-u", "dev@example.com", "-p", "hunter2", "-n", "Demo"])

        assert result.exit_code == 0, result.output
        assert "Project Created" in result.output
        assert SAMPLE_PROJECT_ID in result.output
        args = flow.call_args.args
        assert args[2].username == "dev@example.com"
        assert args[3] == "Demo"
        assert args[4] == isolated_env

    def test_failure_exits_1(self, cli_runner, mock_browser):
        flow = AsyncMock(side_effect=ProjectNotFoundError("Project creation failed: could not determine the new project ID"))
        with patch("pipedream_assistant.flows.projects.create_project", flow):
            result = cli_runner.invoke(app, ["create-project", "-u", "dev@example.com", "-p", "hunter2"])

        assert result.exit_code == 1
        assert "Project creation failed" in result.output

    def test_new_project_wizard(self, cli_runner, mock_browser, isolated_env):
        flow = AsyncMock(return_value=self.created(isolated_env))
        answers = "\n".join(["Demo", str(isolated_env), "dev@example.com", "hunter2", "key_123"]) + "\n"

        with patch("pipedream_assistant.flows.projects.create_project", flow):
            result = cli_runner.invoke(app, ["new-project"], input=answers)

        assert result.exit_code == 0, result.output
        values = dotenv_values(isolated_env / "Demo" / ".env")
        assert values["PIPEDREAM_USERNAME"] == "dev@example.com"
        assert values["PIPEDREAM_API_KEY"] == "key_123"
        assert values["PROJECT_NAME"] == "Demo"
        assert values["PROJECT_ID"] == SAMPLE_PROJECT_ID
        assert flow.call_args.kwargs["api_key"] == "key_123"


class TestLoginCommands:
    @pytest.mark.parametrize(
        "command,strategy",
        [
            ("login", "keyboard"),
            ("login-simple", "simple"),
            ("login-direct", "direct"),
            ("login-targeted", "targeted"),
        ],
    )
    def test_strategy_selected(self, cli_runner, mock_browser, command, strategy):
        login_fn = AsyncMock(return_value=LoginResult(True, "https://pipedream.com/projects", strategy))

        with patch.dict("pipedream_assistant.browser.login.STRATEGIES", {strategy: login_fn}):
            result = cli_runner.invoke(app, [command, "-u", "dev@example.com", "-p", "hunter2", "--hold", "0"])

        assert result.exit_code == 0, result.output
        assert "Successfully logged in" in result.output
        login_fn.assert_awaited_once()

    def test_failed_login_exits_1(self, cli_runner, mock_browser):
        login_fn = AsyncMock(return_value=LoginResult(False, "https://pipedream.com/auth/login", "keyboard"))

        with patch.dict("pipedream_assistant.browser.login.STRATEGIES", {"keyboard": login_fn}):
            result = cli_runner.invoke(app, ["login", "-u", "dev@example.com", "-p", "hunter2", "--hold", "0"])

        assert result.exit_code == 1
        assert "Login failed" in result.output


class TestOpenCommand:
    def test_ctrl_c_exits_cleanly(self, cli_runner, mock_browser):
        flow = AsyncMock(side_effect=KeyboardInterrupt)
        with patch("pipedream_assistant.flows.projects.open_project", flow):
            result = cli_runner.invoke(app, ["open", "-p", SAMPLE_PROJECT_ID, "-k", "key_123"])

        assert result.exit_code == 0
        assert flow.call_args.args[2].api_key == "key_123"


class TestAnalyzeLogin:
    def test_json(self, cli_runner, mock_browser):
        report = {"url": "https://pipedream.com/auth/login", "title": "Log in", "inputs": [], "buttons": []}
        with patch("pipedream_assistant.browser.analysis.analyze_login_page", AsyncMock(return_value=report)):
            result = cli_runner.invoke(app, ["analyze-login", "--json"])

        assert result.exit_code == 0, result.output
        assert '"Log in"' in result.output

    def test_table(self, cli_runner, mock_browser):
        report = {
            "url": "https://pipedream.com/auth/login",
            "title": "Log in",
            "authProvider": "auth0",
            "inputs": [{"type": "email", "id": "username", "visible": True}],
            "buttons": [{"type": "submit", "text": "Continue"}],
            "labels": [{"text": "Email"}],
            "emailElements": [],
        }
        with patch("pipedream_assistant.browser.analysis.analyze_login_page", AsyncMock(return_value=report)):
            result = cli_runner.invoke(app, ["analyze-login"])

        assert result.exit_code == 0, result.output
        assert "auth0" in result.output
        assert "Continue" in result.output
