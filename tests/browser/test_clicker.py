"""Tests for the heuristic clicker."""

import json

import pytest
from unittest.mock import AsyncMock, patch

from pipedream_assistant.browser.clicker import CREATE_PROJECT, NEW_PROJECT, HeuristicClicker
from pipedream_assistant.browser.locator import Strategy
from pipedream_assistant.errors import ElementNotFoundError


def page_json(*elements):
    return json.dumps(list(elements))


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("pipedream_assistant.browser.clicker.asyncio.sleep", new=AsyncMock()):
        yield


@pytest.mark.asyncio
async def test_clicks_best_candidate(mock_agent, run_log):
    mock_agent.evaluate = AsyncMock(
        return_value=page_json(
            {"i": 0, "tag": "button", "text": "New project"},
            {"i": 1, "tag": "i", "parent": 0, "classes": ["i-mdi-plus-thick"]},
        )
    )

    candidate = await HeuristicClicker(mock_agent, run_log).click(NEW_PROJECT)

    assert candidate.strategy == Strategy.TEXT
    mock_agent.click.assert_awaited_once_with('[data-pda-idx="0"]')
    assert "Clicked New project via text strategy" in run_log.log_path.read_text()


@pytest.mark.asyncio
async def test_falls_through_to_next_candidate(mock_agent, run_log):
    mock_agent.evaluate = AsyncMock(
        return_value=page_json(
            {"i": 0, "tag": "div", "isModal": True},
            {"i": 1, "tag": "button", "text": "Create", "parent": 0, "modal": 0},
            {"i": 2, "tag": "button", "text": "Cancel", "parent": 0, "modal": 0},
        )
    )
    mock_agent.click = AsyncMock(side_effect=[{"success": False}, {"success": True}])

    candidate = await HeuristicClicker(mock_agent, run_log).click(CREATE_PROJECT)

    assert candidate.index == 2
    assert mock_agent.click.await_count == 2


@pytest.mark.asyncio
async def test_nothing_found(mock_agent, run_log):
    mock_agent.evaluate = AsyncMock(return_value=page_json({"i": 0, "tag": "div", "text": "Welcome"}))

    with pytest.raises(ElementNotFoundError) as exc_info:
        await HeuristicClicker(mock_agent, run_log).click(NEW_PROJECT)

    assert str(exc_info.value) == "Could not find New project"
    mock_agent.click.assert_not_called()


@pytest.mark.asyncio
async def test_click_label_offset(mock_agent, run_log):
    mock_agent.evaluate = AsyncMock(
        return_value=page_json(
            {"i": 0, "tag": "label", "text": "Email", "rect": {"x": 10, "y": 50, "width": 80, "height": 20}},
        )
    )

    point = await HeuristicClicker(mock_agent, run_log).click_label_offset("Email", dy=25)

    assert point == (50.0, 95.0)
    mock_agent.click_at.assert_awaited_once_with(50.0, 95.0)


@pytest.mark.asyncio
async def test_click_label_offset_missing(mock_agent):
    mock_agent.evaluate = AsyncMock(return_value=page_json())
    with pytest.raises(ElementNotFoundError):
        await HeuristicClicker(mock_agent).click_label_offset("Email")
