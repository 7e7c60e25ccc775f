"""Per-run log files, screenshots and console logging with Rich."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .browser.agent import BrowserAgent


logger = logging.getLogger("pipedream_assistant")


def configure_logging(level: int = logging.INFO, console: Optional[Console] = None) -> None:
    """Configure standard logging with a Rich handler."""
    handler = RichHandler(console=console or Console(stderr=True), show_time=True, show_path=False)
    logging.basicConfig(level=level, handlers=[handler], format="%(message)s", force=True)


def new_run_id() -> str:
    """Short run id: the first 8 hex characters of a uuid4."""
    return uuid.uuid4().hex[:8]


class RunLog:
    """Append-only log file plus a screenshot directory for one command run.

    Layout::

        <log_dir>/<command>-<run_id>.log
        <log_dir>/screens/<run_id>/<name>.png
    """

    def __init__(self, command: str, log_dir: str | Path = "logs", run_id: str | None = None):
        self.command = command
        self.run_id = run_id or new_run_id()
        self.log_dir = Path(log_dir)
        self.log_path = self.log_dir / f"{command}-{self.run_id}.log"
        self.screens_dir = self.log_dir / "screens" / self.run_id
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.screens_dir.mkdir(parents=True, exist_ok=True)

    def log(self, message: str, level: int = logging.INFO) -> None:
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(f"[{timestamp}] {message}\n")
        except OSError as e:
            logger.error("Error writing to log: %s", e)
        logger.log(level, message)

    def warning(self, message: str) -> None:
        self.log(message, logging.WARNING)

    def error(self, message: str) -> None:
        self.log(message, logging.ERROR)

    def screenshot_path(self, name: str) -> Path:
        return self.screens_dir / f"{name}.png"

    async def screenshot(self, agent: "BrowserAgent", name: str, full_page: bool = False) -> Path | None:
        """Save a screenshot through the agent; failures are logged, not raised."""
        path = self.screenshot_path(name)
        try:
            await agent.screenshot(path, full_page=full_page)
        except Exception as e:
            self.error(f"Error saving screenshot: {e}")
            return None
        self.log(f"Screenshot saved: {name}.png")
        return path
