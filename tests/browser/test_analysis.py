"""Tests for login/projects page analysis."""

import pytest
from unittest.mock import AsyncMock

from pipedream_assistant.browser.analysis import (
    analyze_login_page,
    analyze_projects_page,
    highlight_projects_page,
    summarize_login_analysis,
)


@pytest.mark.asyncio
async def test_analyze_login_page(mock_agent):
    mock_agent.evaluate_json = AsyncMock(return_value={"url": "https://pipedream.com/auth/login", "inputs": []})

    report = await analyze_login_page(mock_agent)

    assert report["url"].endswith("/auth/login")
    js = mock_agent.evaluate_json.call_args.args[0]
    assert "%(helpers)s" not in js
    assert "JSON.stringify" in js


@pytest.mark.asyncio
async def test_analyze_projects_page_injects_targets(mock_agent):
    await analyze_projects_page(mock_agent, label="New project", icon_class="i-mdi-plus-thick")

    js = mock_agent.evaluate_json.call_args.args[0]
    assert 'const label = "New project";' in js
    assert 'const iconClass = "i-mdi-plus-thick";' in js


@pytest.mark.asyncio
async def test_highlight(mock_agent):
    await highlight_projects_page(mock_agent, icon_class=None)
    assert "const iconClass = null;" in mock_agent.evaluate.call_args.args[0]


def test_summarize_login_analysis():
    report = {
        "forms": [{}],
        "inputs": [{"visible": True}, {"visible": False}],
        "buttons": [{}, {}],
        "emailElements": [{}],
    }
    assert summarize_login_analysis(report) == {
        "forms": 1,
        "inputs": 2,
        "visible_inputs": 1,
        "buttons": 2,
        "email_elements": 1,
    }
