"""Browser automation agent on top of nodriver."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable

import nodriver as uc
import nodriver.cdp.input_ as input_cdp

from .screenshots import take_screenshot

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/112.0.0.0 Safari/537.36"
)

# key -> (code, windows virtual key code, text emitted on keyDown)
_KEYS: dict[str, tuple[str, int, str | None]] = {
    "Enter": ("Enter", 13, "\r"),
    "Tab": ("Tab", 9, None),
    "Escape": ("Escape", 27, None),
    "Backspace": ("Backspace", 8, None),
    "Delete": ("Delete", 46, None),
}


class BrowserAgent:
    """One browser session for one command invocation.

    Usage:
        async with BrowserAgent(headless=False) as agent:
            await agent.navigate("https://pipedream.com/auth/login")
            state = await agent.get_page_state()
            print(state)

    Readiness is expressed with bounded predicates (``wait_until`` and
    friends) that return ``False`` on timeout instead of raising.
    """

    def __init__(
        self,
        headless: bool = False,
        user_agent: str | None = DEFAULT_USER_AGENT,
        navigation_timeout: float = 30.0,
    ):
        self.headless = headless
        self.user_agent = user_agent
        self.navigation_timeout = navigation_timeout

        self.browser = None
        self.page = None
        self.screenshots: list[str] = []

    @classmethod
    def from_settings(cls, settings) -> "BrowserAgent":
        return cls(
            headless=settings.headless,
            user_agent=settings.user_agent,
            navigation_timeout=settings.navigation_timeout_seconds,
        )

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, *args):
        await self.stop()

    async def start(self):
        """Start the browser and open a blank tab."""
        config = uc.Config()
        config.sandbox = False  # Adds --no-sandbox when False.
        config.headless = self.headless
        config.add_argument("--start-maximized")
        if self.user_agent:
            config.add_argument(f"--user-agent={self.user_agent}")

        self.browser = await uc.start(config=config)
        self.page = await self.browser.get("about:blank")
        logger.debug("Browser started (headless=%s)", self.headless)

    async def stop(self):
        """Stop the browser."""
        if self.browser:
            self.browser.stop()
            self.browser = None
            self.page = None
            logger.debug("Browser stopped")

    # ------------------------------------------------------------------
    # Navigation and page state
    # ------------------------------------------------------------------

    async def navigate(self, url: str, wait: bool = True) -> dict:
        """Navigate to a URL and return page state."""
        logger.debug("Navigating to: %s", url)
        # Reuse the existing tab so the session keeps one page.
        if self.page is not None:
            await self.page.get(url)
        else:
            self.page = await self.browser.get(url)

        if wait and not await self.wait_for_load():
            logger.debug("Page did not finish loading: %s", url)
        return await self.get_page_state()

    async def current_url(self) -> str:
        url = await self.evaluate("window.location.href")
        return url if isinstance(url, str) else ""

    async def title(self) -> str:
        title = await self.evaluate("document.title")
        return title if isinstance(title, str) else ""

    async def get_page_state(self) -> dict:
        """Get current page state."""
        try:
            return {
                "url": await self.current_url(),
                "title": await self.title(),
                "timestamp": datetime.now().isoformat(),
            }
        except Exception as e:
            return {"error": str(e)}

    async def evaluate(self, js_code: str) -> Any:
        """Execute JavaScript and return result."""
        value = await self.page.evaluate(js_code)
        return self._unwrap_eval_value(value)

    async def evaluate_json(self, js_code: str) -> Any:
        """Evaluate JS that returns ``JSON.stringify(...)`` and decode it."""
        raw = await self.evaluate(js_code)
        if isinstance(raw, str):
            return json.loads(raw)
        return raw

    @staticmethod
    def _unwrap_eval_value(value: Any) -> Any:
        """Best-effort normalization of nodriver's evaluate return values.

        nodriver returns primitives as Python values, but represents:
        - Arrays as lists of {"type": ..., "value": ...} items
        - Objects as lists of [key, {"type": ..., "value": ...}] pairs
        """
        if isinstance(value, dict):
            if value.get("type") in {"null", "undefined"} and "value" not in value:
                return None
            if "type" in value and "value" in value and len(value) <= 4:
                return BrowserAgent._unwrap_eval_value(value.get("value"))
            return {k: BrowserAgent._unwrap_eval_value(v) for k, v in value.items()}

        if isinstance(value, list):
            if value and all(
                isinstance(item, (list, tuple))
                and len(item) == 2
                and isinstance(item[0], str)
                for item in value
            ):
                return {item[0]: BrowserAgent._unwrap_eval_value(item[1]) for item in value}
            return [BrowserAgent._unwrap_eval_value(item) for item in value]

        return value

    async def set_local_storage(self, key: str, value: str) -> None:
        await self.evaluate(
            f"window.localStorage.setItem({json.dumps(key)}, {json.dumps(value)})"
        )

    async def screenshot(self, path: str | Path, full_page: bool = False) -> str:
        """Save a PNG screenshot to ``path`` and return it."""
        saved = await take_screenshot(self.page, path, full_page=full_page)
        self.screenshots.append(saved)
        return saved

    # ------------------------------------------------------------------
    # Readiness predicates
    # ------------------------------------------------------------------

    async def wait_until(
        self,
        predicate: Callable[[], Awaitable[bool]],
        timeout: float | None = None,
        interval: float = 0.25,
    ) -> bool:
        """Poll ``predicate`` until it is true or ``timeout`` elapses."""
        timeout = self.navigation_timeout if timeout is None else timeout
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            try:
                if await predicate():
                    return True
            except Exception as e:
                # Pages in transition can reject evaluation; keep polling.
                logger.debug("Readiness check raised: %s", e)
            if loop.time() >= deadline:
                return False
            await asyncio.sleep(interval)

    async def _document_complete(self) -> bool:
        return await self.evaluate("document.readyState") == "complete"

    async def wait_for_load(self, timeout: float | None = None) -> bool:
        """Wait for ``document.readyState == "complete"``."""
        return await self.wait_until(self._document_complete, timeout)

    async def wait_for_navigation(self, from_url: str, timeout: float | None = None) -> bool:
        """Wait for the URL to move away from ``from_url`` and the page to load."""

        async def _navigated() -> bool:
            url = await self.current_url()
            return bool(url) and url != from_url and await self._document_complete()

        return await self.wait_until(_navigated, timeout)

    async def wait_for_selector(self, selector: str, timeout: float | None = None) -> bool:
        """Wait for an element matching ``selector`` to exist."""
        js = f"!!document.querySelector({json.dumps(selector)})"

        async def _present() -> bool:
            return bool(await self.evaluate(js))

        return await self.wait_until(_present, timeout)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    async def click(self, selector: str) -> dict:
        """Click an element by CSS selector."""
        js = f"""
        (() => {{
            const el = document.querySelector({json.dumps(selector)});
            if (!el) return false;
            try {{ el.scrollIntoView({{ block: "center" }}); }} catch (e) {{}}
            el.click();
            return true;
        }})()
        """
        try:
            clicked = await self.evaluate(js)
        except Exception as e:
            return {"success": False, "error": str(e)}
        if clicked:
            await asyncio.sleep(0.5)  # Wait for any reactions
            return {"success": True, "selector": selector}
        return {"success": False, "error": f"Element not found: {selector}"}

    async def fill(self, selector: str, text: str) -> bool:
        """Set an input's value and fire input/change events."""
        js = f"""
        (() => {{
            const el = document.querySelector({json.dumps(selector)});
            if (!el) return false;
            el.focus();
            el.value = {json.dumps(text)};
            el.dispatchEvent(new Event("input", {{ bubbles: true }}));
            el.dispatchEvent(new Event("change", {{ bubbles: true }}));
            return true;
        }})()
        """
        return bool(await self.evaluate(js))

    async def type_text(self, text: str) -> None:
        """Type into whatever element currently has focus."""
        await self.page.send(input_cdp.insert_text(text=text))

    async def press_key(self, key: str) -> None:
        """Press and release a named key (Enter, Tab, Escape, ...)."""
        code, vk, text = _KEYS.get(key, (key, 0, None))
        await self.page.send(
            input_cdp.dispatch_key_event(
                type_="keyDown",
                key=key,
                code=code,
                windows_virtual_key_code=vk,
                text=text,
            )
        )
        await self.page.send(
            input_cdp.dispatch_key_event(
                type_="keyUp",
                key=key,
                code=code,
                windows_virtual_key_code=vk,
            )
        )

    async def click_at(self, x: float, y: float) -> None:
        """Left-click at viewport coordinates."""
        await self.page.send(input_cdp.dispatch_mouse_event(type_="mouseMoved", x=x, y=y))
        for event_type in ("mousePressed", "mouseReleased"):
            await self.page.send(
                input_cdp.dispatch_mouse_event(
                    type_=event_type,
                    x=x,
                    y=y,
                    button=input_cdp.MouseButton.LEFT,
                    click_count=1,
                )
            )
