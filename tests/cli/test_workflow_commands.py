"""Tests for the workflow CLI commands."""

import json

from unittest.mock import AsyncMock, patch

from pipedream_assistant.cli import app
from pipedream_assistant.errors import APIError
from pipedream_assistant.models import ProjectRecord
from pipedream_assistant.storage import write_project_config
from tests.conftest import SAMPLE_API_KEY, SAMPLE_ORG_ID, SAMPLE_PROJECT_ID, SAMPLE_WORKFLOW_ID


class TestCreateWorkflowCommand:
    """Tests for 'pdassist create-workflow'."""

    def test_missing_api_key(self, cli_runner):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            result = cli_runner.invoke(app, ["create-workflow", "--project", SAMPLE_PROJECT_ID])

            assert result.exit_code == 1
            assert "API key is required" in result.output
            MockClient.assert_not_called()
            MockClient.from_settings.assert_not_called()

    def test_missing_project(self, cli_runner):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            result = cli_runner.invoke(app, ["create-workflow", "--api-key", SAMPLE_API_KEY])

            assert result.exit_code == 1
            assert "Project ID is required" in result.output
            MockClient.from_settings.assert_not_called()

    def test_create(self, cli_runner, isolated_env, mock_pd_client_context, mock_client_factory):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(
                app,
                ["create-workflow", "-p", SAMPLE_PROJECT_ID, "-n", "Nightly", "-k", SAMPLE_API_KEY],
            )

            assert result.exit_code == 0, result.output
            assert "Workflow Created" in result.output
            assert SAMPLE_WORKFLOW_ID in result.output
            assert MockClient.from_settings.call_args.args[1] == SAMPLE_API_KEY

        descriptor = isolated_env / "workflows" / SAMPLE_WORKFLOW_ID / "workflow.json"
        data = json.loads(descriptor.read_text())
        assert data["id"] == SAMPLE_WORKFLOW_ID
        assert data["name"] == "Nightly"
        mock_pd_client_context.resolve_org_id.assert_awaited_once_with(None)

    def test_schedule_trigger(self, cli_runner, mock_pd_client_context, mock_client_factory):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(
                app,
                [
                    "create-workflow", "-p", SAMPLE_PROJECT_ID, "-k", SAMPLE_API_KEY,
                    "--trigger", "schedule", "--schedule", "*/10 * * * *", "--org", SAMPLE_ORG_ID,
                ],
            )

            assert result.exit_code == 0, result.output
            trigger = mock_pd_client_context.workflows.create.call_args.kwargs["trigger"]
            assert trigger.type == "schedule"
            assert trigger.schedule == "*/10 * * * *"
            mock_pd_client_context.resolve_org_id.assert_awaited_once_with(SAMPLE_ORG_ID)

    def test_default_trigger_from_env(self, cli_runner, monkeypatch, mock_pd_client_context, mock_client_factory):
        monkeypatch.setenv("DEFAULT_TRIGGER_TYPE", "http")
        monkeypatch.setenv("PIPEDREAM_API_KEY", SAMPLE_API_KEY)

        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["create-workflow", "-p", SAMPLE_PROJECT_ID])

            assert result.exit_code == 0, result.output
            assert "Webhook URL" in result.output
            trigger = mock_pd_client_context.workflows.create.call_args.kwargs["trigger"]
            assert trigger.type == "http"

    def test_project_from_config(self, cli_runner, isolated_env, mock_pd_client_context, mock_client_factory):
        write_project_config(
            isolated_env, ProjectRecord(name="Demo", id=SAMPLE_PROJECT_ID), api_key=SAMPLE_API_KEY
        )

        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["create-workflow", "-n", "From Config"])

            assert result.exit_code == 0, result.output
            assert mock_pd_client_context.workflows.create.call_args.args[1] == SAMPLE_PROJECT_ID

    def test_from_workflows_subdirectory(self, cli_runner, isolated_env, monkeypatch, mock_pd_client_context, mock_client_factory):
        project_dir = isolated_env / "Demo"
        write_project_config(project_dir, ProjectRecord(name="Demo", id=SAMPLE_PROJECT_ID))
        monkeypatch.chdir(project_dir / "workflows")

        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["create-workflow", "-n", "Nightly", "-k", SAMPLE_API_KEY])

            assert result.exit_code == 0, result.output

        assert (project_dir / "workflows" / SAMPLE_WORKFLOW_ID / "workflow.json").is_file()
        assert not (project_dir / "workflows" / "workflows").exists()

    def test_api_error(self, cli_runner, isolated_env, mock_pd_client_context, mock_client_factory):
        mock_pd_client_context.workflows.create = AsyncMock(
            side_effect=APIError("Request failed with status code 500: [internal]", status_code=500)
        )

        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["create-workflow", "-p", SAMPLE_PROJECT_ID, "-k", SAMPLE_API_KEY])

            assert result.exit_code == 1
            assert "status code 500" in result.output
        assert not (isolated_env / "workflows").exists()


class TestListCommands:
    """Tests for 'pdassist list-workflows', 'list-steps' and 'list-triggers'."""

    def test_list_workflows(self, cli_runner, mock_pd_client_context, mock_client_factory):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["list-workflows", "-p", SAMPLE_PROJECT_ID, "-k", SAMPLE_API_KEY])

            assert result.exit_code == 0, result.output
            assert "First" in result.output
            assert "Second" in result.output
            mock_pd_client_context.workflows.list_for_project.assert_awaited_once_with(
                SAMPLE_PROJECT_ID, org_id=SAMPLE_ORG_ID
            )

    def test_list_workflows_json(self, cli_runner, mock_client_factory):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(
                app, ["list-workflows", "-p", SAMPLE_PROJECT_ID, "-k", SAMPLE_API_KEY, "--json"]
            )

            assert result.exit_code == 0, result.output
            assert '"p_first1"' in result.output

    def test_list_steps(self, cli_runner, mock_pd_client_context, mock_client_factory):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["list-steps", "-w", SAMPLE_WORKFLOW_ID, "-k", SAMPLE_API_KEY])

            assert result.exit_code == 0, result.output
            assert "Nightly Sync" in result.output
            assert "Steps (2 total)" in result.output
            assert "send_email" in result.output
            mock_pd_client_context.workflows.get.assert_awaited_once_with(SAMPLE_WORKFLOW_ID, org_id=SAMPLE_ORG_ID)

    def test_list_steps_detailed(self, cli_runner, mock_client_factory):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(
                app, ["list-steps", "-w", SAMPLE_WORKFLOW_ID, "-k", SAMPLE_API_KEY, "--detailed"]
            )

            assert result.exit_code == 0, result.output
            assert '"cron"' in result.output

    def test_list_steps_from_workflow_directory(self, cli_runner, isolated_env, monkeypatch, mock_pd_client_context, mock_client_factory):
        directory = isolated_env / "workflows" / "p_local1"
        directory.mkdir(parents=True)
        monkeypatch.chdir(directory)

        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["list-steps", "-k", SAMPLE_API_KEY])

            assert result.exit_code == 0, result.output
            mock_pd_client_context.workflows.get.assert_awaited_once_with("p_local1", org_id=SAMPLE_ORG_ID)

    def test_list_steps_lists_project_when_no_workflow(self, cli_runner, mock_pd_client_context, mock_client_factory):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["list-steps", "-p", SAMPLE_PROJECT_ID, "-k", SAMPLE_API_KEY])

            assert result.exit_code == 0, result.output
            assert "First" in result.output
            mock_pd_client_context.workflows.get.assert_not_called()

    def test_list_steps_project_id_hint(self, cli_runner, mock_pd_client_context, mock_client_factory):
        mock_pd_client_context.workflows.get = AsyncMock(side_effect=APIError("not found", status_code=404))

        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["list-steps", "-w", SAMPLE_PROJECT_ID, "-k", SAMPLE_API_KEY])

            assert result.exit_code == 0, result.output
            assert "appears to be a project ID" in result.output
            assert "Second" in result.output

    def test_list_steps_without_target(self, cli_runner):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            result = cli_runner.invoke(app, ["list-steps", "-k", SAMPLE_API_KEY])

            assert result.exit_code == 1
            assert "Workflow ID is required" in result.output
            MockClient.from_settings.assert_not_called()

    def test_list_triggers(self, cli_runner, mock_client_factory):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            MockClient.from_settings.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["list-triggers", "-w", SAMPLE_WORKFLOW_ID, "-k", SAMPLE_API_KEY])

            assert result.exit_code == 0, result.output
            assert "Trigger #1" in result.output
            assert "Schedule: 0 0 * * *" in result.output
            assert "send_email" not in result.output

    def test_list_triggers_missing_api_key(self, cli_runner):
        with patch("pipedream_assistant.api.PipedreamClient") as MockClient:
            result = cli_runner.invoke(app, ["list-triggers", "-w", SAMPLE_WORKFLOW_ID])

            assert result.exit_code == 1
            MockClient.from_settings.assert_not_called()


def test_version(cli_runner):
    from pipedream_assistant import __version__

    result = cli_runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
