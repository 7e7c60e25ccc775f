"""Page structure reports for the login and projects pages.

Each report is a plain dict built by a single JS evaluation; the CLI renders
it as tables or JSON.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .agent import BrowserAgent


_DOM_PATH_JS = """
    const domPath = (el) => {
        const stack = [];
        while (el && el.parentNode && el !== document.body) {
            let sibCount = 0;
            let sibIndex = 0;
            for (const sib of el.parentNode.childNodes) {
                if (sib.nodeName === el.nodeName) {
                    if (sib === el) sibIndex = sibCount;
                    sibCount++;
                }
            }
            const name = el.nodeName.toLowerCase();
            const id = el.id ? `#${el.id}` : "";
            const cls = typeof el.className === "string" && el.className.trim()
                ? "." + el.className.trim().replace(/\\s+/g, ".") : "";
            const nameAttr = el.getAttribute && el.getAttribute("name") ? `[name="${el.getAttribute("name")}"]` : "";
            stack.unshift(sibCount > 1 ? `${name}${id}${cls}${nameAttr}:nth-child(${sibIndex + 1})` : `${name}${id}${cls}${nameAttr}`);
            el = el.parentNode;
        }
        return stack.join(" > ");
    };
    const attrs = (el) => {
        const out = {};
        if (!el || !el.attributes) return out;
        for (const a of el.attributes) out[a.name] = a.value;
        return out;
    };
    const visible = (el) => el.offsetParent !== null;
"""


LOGIN_PAGE_JS = """
(() => {
    %(helpers)s
    const inputs = Array.from(document.querySelectorAll("input"));
    const emailElements = Array.from(document.querySelectorAll(
        '[name*="email"], [id*="email"], [placeholder*="email" i], [type="email"]'
    ));
    const textElements = Array.from(document.querySelectorAll("body *"))
        .filter((el) => el.children.length === 0)
        .map((el) => (el.textContent || "").trim())
        .filter((t) => /email|password|sign in|log in|continue/i.test(t) && t.length < 80);
    const html = document.documentElement.outerHTML.toLowerCase();
    let provider = null;
    if (location.hostname.includes("auth0") || html.includes("auth0")) provider = "auth0";
    else if (html.includes("clerk")) provider = "clerk";
    else if (document.querySelector('[data-provider="google"]')) provider = "google";

    return JSON.stringify({
        url: location.href,
        title: document.title,
        authProvider: provider,
        forms: Array.from(document.forms).map((f) => ({
            id: f.id || null,
            action: f.action || null,
            method: f.method || null,
            elements: Array.from(f.elements).map((el) => ({
                tag: el.tagName.toLowerCase(),
                type: el.type || null,
                id: el.id || null,
                name: el.name || null,
                placeholder: el.placeholder || null,
            })),
        })),
        inputs: inputs.map((i) => ({
            id: i.id || null,
            name: i.name || null,
            type: i.type || null,
            placeholder: i.placeholder || null,
            visible: visible(i),
            domPath: domPath(i),
        })),
        buttons: Array.from(document.querySelectorAll('button, input[type="submit"]')).map((b) => ({
            type: b.type || null,
            text: (b.textContent || b.value || "").trim(),
            visible: visible(b),
        })),
        labels: Array.from(document.querySelectorAll("label")).map((l) => ({
            text: (l.textContent || "").trim(),
            for: l.htmlFor || null,
        })),
        textElements: Array.from(new Set(textElements)).slice(0, 50),
        emailElements: emailElements.map((el) => ({
            tag: el.tagName.toLowerCase(),
            id: el.id || null,
            name: el.getAttribute("name"),
            type: el.getAttribute("type"),
            placeholder: el.getAttribute("placeholder"),
            domPath: domPath(el),
        })),
    });
})()
"""


PROJECTS_PAGE_JS = """
(() => {
    %(helpers)s
    const label = %(label)s;
    const fingerprint = %(fingerprint)s;
    const iconClass = %(icon)s;
    const rect = (el) => {
        const r = el.getBoundingClientRect();
        return { x: r.left, y: r.top, width: r.width, height: r.height };
    };
    const parentButton = (el) => {
        let cur = el;
        while (cur && cur !== document.body) {
            if (cur.tagName.toLowerCase() === "button") return cur;
            cur = cur.parentElement;
        }
        return null;
    };

    const labelled = Array.from(document.querySelectorAll("*"))
        .filter((el) => (el.textContent || "").trim() === label)
        .map((el) => ({
            tag: el.tagName.toLowerCase(),
            path: domPath(el),
            attributes: attrs(el),
            parentTag: el.parentElement ? el.parentElement.tagName.toLowerCase() : null,
            parentAttributes: attrs(el.parentElement),
            rect: rect(el),
            visible: visible(el),
        }));

    let fingerprintDiv = null;
    const fpSelector = "div" + fingerprint.map((c) => "." + CSS.escape(c)).join("");
    const fpEl = fingerprint.length ? document.querySelector(fpSelector) : null;
    if (fpEl) {
        const btn = parentButton(fpEl);
        fingerprintDiv = {
            path: domPath(fpEl),
            parentButtonPath: btn ? domPath(btn) : null,
            parentButtonAttributes: btn ? attrs(btn) : {},
            children: Array.from(fpEl.children).map((c) => ({
                tag: c.tagName.toLowerCase(),
                class: typeof c.className === "string" ? c.className : "",
                text: (c.textContent || "").trim(),
            })),
        };
    }

    const buttons = Array.from(document.querySelectorAll("button")).map((b) => ({
        text: (b.textContent || "").trim(),
        path: domPath(b),
        hasLabel: (b.textContent || "").includes(label),
        hasIcon: iconClass ? !!b.querySelector("." + CSS.escape(iconClass)) : false,
        visible: visible(b),
        rect: rect(b),
    }));

    const icons = iconClass ? Array.from(document.querySelectorAll("." + CSS.escape(iconClass))).map((el) => ({
        tag: el.tagName.toLowerCase(),
        path: domPath(el),
        parentTag: el.parentElement ? el.parentElement.tagName.toLowerCase() : null,
        parentText: el.parentElement ? (el.parentElement.textContent || "").trim() : "",
        visible: visible(el),
    })) : [];

    return JSON.stringify({
        url: location.href,
        title: document.title,
        labelledElements: labelled,
        fingerprintDiv: fingerprintDiv,
        relevantButtons: buttons.filter((b) => b.hasLabel || b.hasIcon),
        buttons: buttons,
        iconElements: icons,
    });
})()
"""


HIGHLIGHT_JS = """
(() => {
    const label = %(label)s;
    const iconClass = %(icon)s;
    const paint = (el, color, width) => {
        el.style.border = `${width}px solid ${color}`;
        el.style.backgroundColor = `${color}44`;
    };
    if (iconClass) document.querySelectorAll("." + CSS.escape(iconClass)).forEach((el) => paint(el, "blue", 3));
    document.querySelectorAll("div.h-full.flex.items-center.justify-center").forEach((el) => paint(el, "green", 3));
    document.querySelectorAll("button").forEach((b) => {
        if ((b.textContent || "").includes(label)) b.style.border = "5px solid purple";
    });
    return true;
})()
"""


async def analyze_login_page(agent: "BrowserAgent") -> dict[str, Any]:
    """Forms, inputs, buttons, labels and e-mail related elements of the current page."""
    return await agent.evaluate_json(LOGIN_PAGE_JS % {"helpers": _DOM_PATH_JS})


async def analyze_projects_page(
    agent: "BrowserAgent",
    label: str = "New project",
    fingerprint: tuple[str, ...] = ("h-full", "flex", "items-center", "justify-center", "gap-x-1.5"),
    icon_class: str | None = "i-mdi-plus-thick",
) -> dict[str, Any]:
    """Where the "New project" control lives on the projects page."""
    js = PROJECTS_PAGE_JS % {
        "helpers": _DOM_PATH_JS,
        "label": json.dumps(label),
        "fingerprint": json.dumps(list(fingerprint)),
        "icon": json.dumps(icon_class),
    }
    return await agent.evaluate_json(js)


async def highlight_projects_page(
    agent: "BrowserAgent",
    label: str = "New project",
    icon_class: str | None = "i-mdi-plus-thick",
) -> None:
    """Outline candidate controls in place, for a follow-up screenshot."""
    await agent.evaluate(HIGHLIGHT_JS % {"label": json.dumps(label), "icon": json.dumps(icon_class)})


def summarize_login_analysis(report: dict[str, Any]) -> dict[str, int]:
    inputs = report.get("inputs") or []
    return {
        "forms": len(report.get("forms") or []),
        "inputs": len(inputs),
        "visible_inputs": sum(1 for i in inputs if i.get("visible")),
        "buttons": len(report.get("buttons") or []),
        "email_elements": len(report.get("emailElements") or []),
    }
