"""Shared test fixtures for the Pipedream Assistant test suite."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from typing import Any

# Sample IDs used across tests
SAMPLE_API_KEY = "pd_test_key_abc123"
SAMPLE_USER_ID = "u_test123"
SAMPLE_ORG_ID = "o_test456"
SAMPLE_PROJECT_ID = "proj_abc123"
SAMPLE_WORKFLOW_ID = "p_wf789"

ENV_VARS = (
    "PIPEDREAM_API_KEY",
    "PIPEDREAM_USERNAME",
    "PIPEDREAM_PASSWORD",
    "PIPEDREAM_ORG_ID",
    "PIPEDREAM_WORKSPACE_SLUG",
    "PIPEDREAM_HEADLESS",
    "PIPEDREAM_LOG_DIR",
    "PIPEDREAM_DEFAULT_TRIGGER_TYPE",
    "PIPEDREAM_DEFAULT_SCHEDULE",
    "DEFAULT_TRIGGER_TYPE",
    "DEFAULT_SCHEDULE",
)


# ============================================================================
# Environment isolation
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run every test in an empty directory with no Pipedream variables set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings(tmp_path):
    """Settings that ignore any .env file."""
    from pipedream_assistant.config import Settings
    return Settings(_env_file=None, log_dir=str(tmp_path / "logs"))


@pytest.fixture
def run_log(tmp_path):
    from pipedream_assistant.runlog import RunLog
    return RunLog("test", tmp_path / "logs", run_id="abcd1234")


# ============================================================================
# HTTP fixtures
# ============================================================================

@pytest.fixture
def mock_response():
    """Factory fixture to create mock httpx responses."""
    def _create_response(data: Any, status_code: int = 200):
        response = MagicMock()
        response.status_code = status_code
        response.is_success = 200 <= status_code < 300
        response.json.return_value = data
        response.text = str(data)
        return response
    return _create_response


@pytest.fixture
def mock_http_client(mock_response):
    """Create a mock httpx.AsyncClient."""
    client = AsyncMock()
    client.request = AsyncMock(return_value=mock_response({}))
    return client


@pytest.fixture
def mock_pd_client(mock_http_client):
    """A PipedreamClient with its httpx client swapped for a mock."""
    from pipedream_assistant.api.client import PipedreamClient
    from pipedream_assistant.api.workflows import WorkflowsAPI

    client = PipedreamClient(SAMPLE_API_KEY)
    client._client = mock_http_client
    client._workflows = WorkflowsAPI(client)
    return client


# ============================================================================
# CLI Testing Fixtures
# ============================================================================

@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()


@pytest.fixture
def mock_pd_client_context():
    """What ``async with PipedreamClient(...)`` yields in CLI tests."""
    mock_client = MagicMock()
    mock_client.resolve_org_id = AsyncMock(return_value=SAMPLE_ORG_ID)
    mock_client.get_me = AsyncMock(
        return_value={"id": SAMPLE_USER_ID, "email": "dev@example.com", "orgs": [{"id": SAMPLE_ORG_ID}]}
    )
    mock_client.workflows = MagicMock()
    mock_client.workflows.create = AsyncMock(return_value=SAMPLE_WORKFLOW_ID)
    mock_client.workflows.get = AsyncMock(
        return_value={
            "id": SAMPLE_WORKFLOW_ID,
            "name": "Nightly Sync",
            "components": [
                {
                    "key": "trigger",
                    "type": "source",
                    "app": "schedule",
                    "source": {"type": "cron", "name": "Nightly Schedule", "cron": "0 0 * * *"},
                },
                {"name": "send_email", "type": "action", "app": "email"},
            ],
        }
    )
    mock_client.workflows.list_for_project = AsyncMock(
        return_value=[
            {"id": "p_first1", "name": "First"},
            {"id": "p_second2", "name": "Second"},
        ]
    )
    return mock_client


@pytest.fixture
def mock_client_factory(mock_pd_client_context):
    """Create a factory that produces mock PipedreamClient context managers."""
    def _create():
        mock_instance = MagicMock()
        mock_instance.__aenter__ = AsyncMock(return_value=mock_pd_client_context)
        mock_instance.__aexit__ = AsyncMock(return_value=None)
        return mock_instance
    return _create


# ============================================================================
# Browser fixtures
# ============================================================================

@pytest.fixture
def mock_agent():
    """A BrowserAgent stand-in: every browser call is an AsyncMock."""
    agent = MagicMock()
    agent.navigate = AsyncMock(return_value={})
    agent.current_url = AsyncMock(return_value="https://pipedream.com/projects")
    agent.title = AsyncMock(return_value="")
    agent.evaluate = AsyncMock(return_value=None)
    agent.evaluate_json = AsyncMock(return_value={})
    agent.screenshot = AsyncMock(return_value="shot.png")
    agent.click = AsyncMock(return_value={"success": True})
    agent.click_at = AsyncMock()
    agent.fill = AsyncMock(return_value=True)
    agent.type_text = AsyncMock()
    agent.press_key = AsyncMock()
    agent.set_local_storage = AsyncMock()
    agent.wait_until = AsyncMock(return_value=True)
    agent.wait_for_navigation = AsyncMock(return_value=True)
    agent.wait_for_selector = AsyncMock(return_value=True)
    agent.wait_for_load = AsyncMock(return_value=True)
    return agent
