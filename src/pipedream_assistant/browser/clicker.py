"""Heuristic clicker: snapshot the page, rank candidates, click the best one."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..errors import ElementNotFoundError
from .locator import (
    SNAPSHOT_JS,
    Candidate,
    ClickTarget,
    Snapshot,
    locate_candidates,
    point_from_label,
)

if TYPE_CHECKING:
    from ..runlog import RunLog
    from .agent import BrowserAgent


logger = logging.getLogger(__name__)


# Targets observed on the Pipedream projects page.
NEW_PROJECT = ClickTarget(
    label="New project",
    fingerprint=("h-full", "flex", "items-center", "justify-center", "gap-x-1.5"),
    icon_class="i-mdi-plus-thick",
)
CREATE_PROJECT = ClickTarget(
    label="Create Project",
    fingerprint=("h-full", "flex", "items-center", "justify-center", "w-full", "gap-x-1.5"),
    modal_keywords=("create",),
    modal_fallback=True,
)
SETTINGS_LINK = ClickTarget(label="Settings")


class HeuristicClicker:
    """Click labelled controls whose markup is not stable.

    Usage:
        clicker = HeuristicClicker(agent, run_log)
        candidate = await clicker.click(NEW_PROJECT)
    """

    def __init__(self, agent: "BrowserAgent", run_log: "RunLog | None" = None):
        self.agent = agent
        self.run_log = run_log

    def _log(self, message: str) -> None:
        if self.run_log is not None:
            self.run_log.log(message)
        else:
            logger.info(message)

    async def snapshot(self) -> Snapshot:
        raw = await self.agent.evaluate(SNAPSHOT_JS)
        return Snapshot.from_json(raw)

    async def candidates(self, target: ClickTarget) -> list[Candidate]:
        return locate_candidates(await self.snapshot(), target)

    async def _click_candidate(self, candidate: Candidate) -> bool:
        if candidate.point is not None:
            await self.agent.click_at(*candidate.point)
            await asyncio.sleep(0.5)
            return True
        result = await self.agent.click(candidate.selector)
        return bool(result.get("success"))

    async def click(self, target: ClickTarget) -> Candidate:
        """Click the best-ranked candidate for ``target``.

        Raises:
            ElementNotFoundError: no strategy produced a clickable candidate
        """
        ranked = await self.candidates(target)
        for candidate in ranked:
            if await self._click_candidate(candidate):
                self._log(
                    f"Clicked {target.label} via {candidate.strategy.value} strategy ({candidate.reason})"
                )
                return candidate
            logger.debug("Candidate %s for %s could not be clicked", candidate.index, target.label)

        self._log(f"ERROR: Could not find or click {target.label} button")
        raise ElementNotFoundError(target.label)

    async def click_label_offset(self, label: str, dy: float = 25.0, dx: float = 0.0) -> tuple[float, float]:
        """Click ``dy`` px below a ``<label>``, where its input usually sits."""
        located = point_from_label(await self.snapshot(), label, dx, dy)
        if located is None:
            raise ElementNotFoundError(f"{label} label")
        _, (x, y) = located
        await self.agent.click_at(x, y)
        self._log(f"Clicked below the {label} label at ({x:.0f}, {y:.0f})")
        return x, y
