"""Login strategies for the Pipedream web app.

Every strategy has the same shape::

    result = await login_targeted(agent, credentials, run_log, settings)

and returns a ``LoginResult``; none of them raise on a failed login. Callers
that need a session turn ``success=False`` into ``LoginFailedError``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable

from ..errors import ElementNotFoundError
from .analysis import analyze_login_page, summarize_login_analysis
from .clicker import HeuristicClicker
from .urls import is_login_url

if TYPE_CHECKING:
    from ..config import Credentials, Settings
    from ..runlog import RunLog
    from .agent import BrowserAgent


POST_LOGIN_MARKERS = (
    '.sidebar, nav, [role="navigation"]',
    '[data-test="workspace-nav"]',
    'button[aria-label="User menu"]',
    ".avatar, .user-menu",
)


@dataclass
class LoginResult:
    success: bool
    final_url: str
    strategy: str


async def is_logged_in(agent: "BrowserAgent") -> bool:
    """Off the login page, or the login URL lingers but the app shell rendered."""
    url = await agent.current_url()
    if not is_login_url(url):
        return True
    js = "(() => %s.some((sel) => !!document.querySelector(sel)))()" % json.dumps(
        list(POST_LOGIN_MARKERS)
    )
    return bool(await agent.evaluate(js))


async def _await_submit(
    agent: "BrowserAgent",
    run_log: "RunLog",
    from_url: str,
    timeout: float | None = None,
) -> str:
    run_log.log("Login form submitted, waiting for navigation...")
    if not await agent.wait_for_navigation(from_url, timeout):
        run_log.log("Navigation timeout - continuing anyway")
    url = await agent.current_url()
    run_log.log(f"Current URL after login: {url}")
    return url


async def _finish(agent: "BrowserAgent", run_log: "RunLog", strategy: str) -> LoginResult:
    url = await agent.current_url()
    await run_log.screenshot(agent, "after-login")
    success = await is_logged_in(agent)
    if success and is_login_url(url):
        run_log.log("URL still shows login page but UI elements indicate successful login")
    if success:
        run_log.log("Login successful")
    else:
        run_log.warning("Still on login page, login may have failed")
    return LoginResult(success=success, final_url=url, strategy=strategy)


async def _type_credentials(agent: "BrowserAgent", username: str, password: str, submit_tabs: int) -> None:
    await agent.type_text(username)
    await agent.press_key("Tab")
    await agent.type_text(password)
    for _ in range(submit_tabs):
        await agent.press_key("Tab")
    await agent.press_key("Enter")


# ---------------------------------------------------------------------------
# targeted: label click, offset click, keyboard
# ---------------------------------------------------------------------------

_CLICK_LABEL_JS = """
(() => {
    const wanted = %s;
    const label = Array.from(document.querySelectorAll("label"))
        .find((l) => (l.textContent || "").trim().toLowerCase() === wanted);
    if (!label) return false;
    label.click();
    return true;
})()
"""


async def login_targeted(
    agent: "BrowserAgent",
    credentials: "Credentials",
    run_log: "RunLog",
    settings: "Settings",
) -> LoginResult:
    """Click the Email label, click where its input sits, then type and tab."""
    credentials.require("username", "password")
    run_log.log("Step 1: Logging in to Pipedream...")
    await agent.navigate(settings.login_url)
    await run_log.screenshot(agent, "login-page")
    start_url = await agent.current_url()

    clicker = HeuristicClicker(agent, run_log)
    if await agent.evaluate(_CLICK_LABEL_JS % json.dumps("email")):
        try:
            await clicker.click_label_offset("Email", dy=25)
        except ElementNotFoundError:
            run_log.warning("Email label vanished after click; typing into the focused field")
    else:
        run_log.warning("No Email label found; clicking the form area instead")
        await _click_form_area(agent)

    await _type_credentials(agent, credentials.username, credentials.password, submit_tabs=1)
    await _await_submit(agent, run_log, start_url, timeout=settings.navigation_timeout_seconds)
    return await _finish(agent, run_log, "targeted")


# ---------------------------------------------------------------------------
# keyboard: form area + typing, console fill fallback
# ---------------------------------------------------------------------------

_CONSOLE_FILL_JS = """
(() => {
    const email = %(email)s;
    const pass = %(password)s;
    const fire = (el) => {
        el.dispatchEvent(new Event("input", { bubbles: true }));
        el.dispatchEvent(new Event("change", { bubbles: true }));
    };
    const inputs = Array.from(document.querySelectorAll("input"));
    let emailInput = inputs.find((i) => i.type === "email" || (i.id || "").includes("email") || (i.name || "").includes("email"));
    const passwordInput = inputs.find((i) => i.type === "password");
    if (!emailInput && inputs.length >= 2) emailInput = inputs[0];
    if (emailInput) { emailInput.value = email; fire(emailInput); }
    if (passwordInput) { passwordInput.value = pass; fire(passwordInput); }

    const buttons = Array.from(document.querySelectorAll("button"));
    const submit = buttons.find((b) => {
        const t = (b.textContent || "").toLowerCase();
        return b.type === "submit" || t.includes("sign in") || t.includes("log in") || t.includes("login");
    });
    if (submit) { submit.click(); return "submit"; }
    if (buttons.length) { buttons[buttons.length - 1].click(); return "last-button"; }
    const form = document.querySelector("form");
    if (form) { form.submit(); return "form"; }
    return "none";
})()
"""


async def _click_form_area(agent: "BrowserAgent") -> None:
    for selector in ("form", 'div[role="form"]', "body"):
        if (await agent.click(selector)).get("success"):
            return


async def login_keyboard(
    agent: "BrowserAgent",
    credentials: "Credentials",
    run_log: "RunLog",
    settings: "Settings",
) -> LoginResult:
    """Focus the form, type with Tab between fields; fill by DOM if that fails."""
    credentials.require("username", "password")
    await agent.navigate(settings.login_url)
    await run_log.screenshot(agent, "login-initial")
    start_url = await agent.current_url()

    run_log.log("Trying focused input and keyboard navigation approach...")
    await _click_form_area(agent)
    await _type_credentials(agent, credentials.username, credentials.password, submit_tabs=0)
    url = await _await_submit(agent, run_log, start_url, timeout=settings.navigation_timeout_seconds)

    if is_login_url(url):
        run_log.log("Still on login page. Trying alternative approach with browser console...")
        used = await agent.evaluate(
            _CONSOLE_FILL_JS
            % {"email": json.dumps(credentials.username), "password": json.dumps(credentials.password)}
        )
        run_log.log(f"Console fill submitted via: {used}")
        await _await_submit(agent, run_log, url, timeout=settings.navigation_timeout_seconds)

    return await _finish(agent, run_log, "keyboard")


# ---------------------------------------------------------------------------
# direct: selector cascade, then Auth0 ids
# ---------------------------------------------------------------------------

EMAIL_SELECTORS = (
    'input[type="email"]',
    'input[name="email"]',
    'input[id="email"]',
    'input[name="username"]',
    'input[id="username"]',
    'input[placeholder*="email" i]',
    'input[placeholder*="username" i]',
    'input:not([type="password"])',
)

_DIRECT_FILL_JS = """
(() => {
    const username = %(username)s;
    const password = %(password)s;
    const selectors = %(selectors)s;
    const fire = (el) => {
        el.dispatchEvent(new Event("input", { bubbles: true }));
        el.dispatchEvent(new Event("change", { bubbles: true }));
    };
    let emailFound = false;
    for (const sel of selectors) {
        const el = document.querySelector(sel);
        if (el) { el.value = username; fire(el); emailFound = true; break; }
    }
    const pw = document.querySelector('input[type="password"]');
    if (pw) { pw.value = password; fire(pw); }
    const submit = document.querySelector('button[type="submit"], input[type="submit"]');
    if (submit) { submit.click(); return { clicked: true, emailFound, passwordFound: !!pw }; }
    if (emailFound || pw) {
        const form = document.querySelector("form");
        if (form) { form.submit(); return { submitted: true, emailFound, passwordFound: !!pw }; }
    }
    return { emailFound, passwordFound: !!pw };
})()
"""

_AUTH0_FILL_JS = """
(() => {
    const fire = (el) => {
        el.dispatchEvent(new Event("input", { bubbles: true }));
        el.dispatchEvent(new Event("change", { bubbles: true }));
    };
    const u = document.querySelector("#username");
    const p = document.querySelector("#password");
    const s = document.querySelector('button[type="submit"]');
    if (u) { u.value = %(username)s; fire(u); }
    if (p) { p.value = %(password)s; fire(p); }
    if (s) s.click();
    return !!(u || p);
})()
"""


async def login_direct(
    agent: "BrowserAgent",
    credentials: "Credentials",
    run_log: "RunLog",
    settings: "Settings",
) -> LoginResult:
    """Fill by selector cascade on the sign-in page, then retry with Auth0 ids."""
    credentials.require("username", "password")
    await agent.navigate(settings.login_url)
    await run_log.screenshot(agent, "login-page-full", full_page=True)

    report = await analyze_login_page(agent)
    run_log.log(f"Login page analysis: {summarize_login_analysis(report)}")

    run_log.log("Trying direct navigation to sign-in page...")
    await agent.navigate(settings.signin_url)
    await run_log.screenshot(agent, "signin-page", full_page=True)
    start_url = await agent.current_url()

    values = {
        "username": json.dumps(credentials.username),
        "password": json.dumps(credentials.password),
        "selectors": json.dumps(list(EMAIL_SELECTORS)),
    }
    outcome = await agent.evaluate(_DIRECT_FILL_JS % values)
    run_log.log(f"Form interaction result: {outcome}")
    url = await _await_submit(agent, run_log, start_url, timeout=10)

    if is_login_url(url):
        run_log.log("Trying Auth0 specific login approach...")
        await agent.evaluate(_AUTH0_FILL_JS % values)
        await _await_submit(agent, run_log, url, timeout=10)

    return await _finish(agent, run_log, "direct")


# ---------------------------------------------------------------------------
# simple: reveal hidden inputs, inject an email field when missing
# ---------------------------------------------------------------------------

_REVEAL_JS = """
(() => {
    document.querySelectorAll("input").forEach((input) => {
        if (input.style.display === "none" || input.type === "hidden") {
            input.style.display = "block";
            input.type = "text";
        }
    });
    if (document.querySelector('input[type="email"]')) return "existing";
    const pw = document.querySelector('input[type="password"]');
    if (pw && pw.parentNode) {
        const email = document.createElement("input");
        email.type = "email";
        email.id = "email-field";
        email.placeholder = "Email";
        email.style.marginBottom = "10px";
        email.style.padding = "8px";
        email.style.width = "100%";
        pw.parentNode.insertBefore(email, pw);
        return "injected";
    }
    return "none";
})()
"""


async def login_simple(
    agent: "BrowserAgent",
    credentials: "Credentials",
    run_log: "RunLog",
    settings: "Settings",
) -> LoginResult:
    """Make sure an email input exists, then type into it and the password field."""
    credentials.require("username", "password")
    await agent.navigate(settings.login_url)
    await run_log.screenshot(agent, "login-initial")
    start_url = await agent.current_url()

    state = await agent.evaluate(_REVEAL_JS)
    run_log.log(f"Email input: {state}")
    await run_log.screenshot(agent, "login-after-reveal")

    for selector in ("#email-field", 'input[type="email"]'):
        if (await agent.click(selector)).get("success"):
            await agent.type_text(credentials.username)
            break
    else:
        await agent.fill('input[type="email"]', credentials.username)

    if (await agent.click('input[type="password"]')).get("success"):
        await agent.type_text(credentials.password)

    if not (await agent.click('button[type="submit"]')).get("success"):
        await agent.press_key("Enter")

    await _await_submit(agent, run_log, start_url, timeout=10)
    return await _finish(agent, run_log, "simple")


LoginStrategy = Callable[
    ["BrowserAgent", "Credentials", "RunLog", "Settings"],
    Awaitable[LoginResult],
]

STRATEGIES: dict[str, LoginStrategy] = {
    "targeted": login_targeted,
    "keyboard": login_keyboard,
    "direct": login_direct,
    "simple": login_simple,
}
