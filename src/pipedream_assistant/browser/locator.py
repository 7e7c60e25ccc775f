"""Rank click candidates for a labelled UI control from a DOM snapshot.

The snapshot is taken once in the page (``SNAPSHOT_JS``); every element is
tagged with ``data-pda-idx`` so a ranked candidate can be clicked later.
Nothing in this module touches the browser.

Strategies, in priority order:

1. ``text``        exact text match, resolved to the nearest clickable ancestor
2. ``fingerprint`` class fingerprint observed on the real page + label text
3. ``icon``        icon marker class, ascended to its button
4. ``fallback``    buttons in an open modal, then a point offset from a label
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


class Strategy(str, Enum):
    TEXT = "text"
    FINGERPRINT = "fingerprint"
    ICON = "icon"
    FALLBACK = "fallback"


STRATEGY_PRIORITY: list[Strategy] = [
    Strategy.TEXT,
    Strategy.FINGERPRINT,
    Strategy.ICON,
    Strategy.FALLBACK,
]

# Each strategy owns a band of 100 points so an earlier strategy always wins.
_BASE_SCORE = {strategy: 100 * (len(STRATEGY_PRIORITY) - i) for i, strategy in enumerate(STRATEGY_PRIORITY)}

CLICKABLE_TAGS = {"button", "a"}
MODAL_SELECTOR = '.modal, .dialog, [role="dialog"], [aria-modal="true"]'
EXCLUDED_SELECTORS = ('[data-provider="google"]',)


@dataclass
class Rect:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class ElementInfo:
    """One element of a DOM snapshot."""

    index: int
    tag: str
    text: str = ""
    role: str | None = None
    classes: tuple[str, ...] = ()
    parent: int | None = None
    onclick: bool = False
    type: str | None = None
    rect: Rect = field(default_factory=Rect)
    is_modal: bool = False
    modal: int | None = None
    visible: bool = True
    disabled: bool = False
    excluded: bool = False

    @property
    def clickable(self) -> bool:
        return (
            self.tag in CLICKABLE_TAGS
            or self.role == "button"
            or self.onclick
            or any("button" in c or "btn" in c for c in self.classes)
        )

    @property
    def is_button(self) -> bool:
        return self.tag == "button" or self.role == "button"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ElementInfo":
        rect = data.get("rect") or {}
        return cls(
            index=int(data["i"]),
            tag=(data.get("tag") or "").lower(),
            text=data.get("text") or "",
            role=data.get("role") or None,
            classes=tuple(data.get("classes") or ()),
            parent=data.get("parent"),
            onclick=bool(data.get("onclick")),
            type=data.get("type") or None,
            rect=Rect(
                x=float(rect.get("x", 0)),
                y=float(rect.get("y", 0)),
                width=float(rect.get("width", 0)),
                height=float(rect.get("height", 0)),
            ),
            is_modal=bool(data.get("isModal")),
            modal=data.get("modal"),
            visible=bool(data.get("visible", True)),
            disabled=bool(data.get("disabled")),
            excluded=bool(data.get("excluded")),
        )


@dataclass
class ClickTarget:
    """What to click, and which fallbacks are allowed to find it."""

    label: str
    case_sensitive: bool = False
    fingerprint: tuple[str, ...] = ()
    icon_class: str | None = None
    modal_keywords: tuple[str, ...] = ()
    modal_fallback: bool = False
    label_offset: tuple[float, float] | None = None
    max_depth: int = 5


@dataclass
class Candidate:
    index: int
    strategy: Strategy
    score: int
    reason: str
    point: tuple[float, float] | None = None

    @property
    def selector(self) -> str:
        return f'[data-pda-idx="{self.index}"]'


class Snapshot:
    """Indexed view over a list of ``ElementInfo``."""

    def __init__(self, elements: Iterable[ElementInfo]):
        self.elements = list(elements)
        self._by_index = {el.index: el for el in self.elements}

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def get(self, index: int | None) -> ElementInfo | None:
        if index is None:
            return None
        return self._by_index.get(index)

    def ancestors(self, element: ElementInfo, max_depth: int | None = None):
        """Yield ``element`` and then its ancestors, nearest first."""
        current: ElementInfo | None = element
        depth = 0
        while current is not None:
            yield current
            if max_depth is not None and depth >= max_depth:
                return
            current = self.get(current.parent)
            depth += 1

    def clickable_ancestor(self, element: ElementInfo, max_depth: int = 5) -> ElementInfo | None:
        for node in self.ancestors(element, max_depth):
            if node.clickable:
                return node
        return None

    def button_ancestor(self, element: ElementInfo) -> ElementInfo | None:
        for node in self.ancestors(element):
            if node.tag == "button":
                return node
        return None

    def modals(self) -> list[ElementInfo]:
        return [el for el in self.elements if el.is_modal and not el.excluded]

    @classmethod
    def from_json(cls, raw: str | list) -> "Snapshot":
        data = json.loads(raw) if isinstance(raw, str) else raw
        return cls(ElementInfo.from_dict(item) for item in data)


def normalize_text(text: str, case_sensitive: bool = False) -> str:
    text = " ".join(text.split())
    return text if case_sensitive else text.lower()


def _matches_exact(element: ElementInfo, target: ClickTarget) -> bool:
    return normalize_text(element.text, target.case_sensitive) == normalize_text(
        target.label, target.case_sensitive
    )


def _contains_label(element: ElementInfo, target: ClickTarget) -> bool:
    return normalize_text(target.label, target.case_sensitive) in normalize_text(
        element.text, target.case_sensitive
    )


def _usable(element: ElementInfo) -> bool:
    return not element.excluded and not element.disabled


def _score(strategy: Strategy, element: ElementInfo, bonus: int = 0) -> int:
    score = _BASE_SCORE[strategy] + bonus
    if element.visible:
        score += 10
    return score


def _resolve_clickable(
    snapshot: Snapshot,
    element: ElementInfo,
    strategy: Strategy,
    max_depth: int,
    what: str,
) -> Candidate | None:
    owner = snapshot.clickable_ancestor(element, max_depth)
    if owner is not None and _usable(owner):
        reason = f"{what} on <{element.tag}>"
        if owner.index != element.index:
            reason += f", clickable ancestor <{owner.tag}>"
        return Candidate(owner.index, strategy, _score(strategy, owner, 5), reason)
    if owner is None:
        return Candidate(
            element.index,
            strategy,
            _score(strategy, element),
            f"{what} on <{element.tag}>, no clickable ancestor",
        )
    return None


def point_from_label(
    snapshot: Snapshot,
    label: str,
    dx: float = 0.0,
    dy: float = 25.0,
) -> tuple[ElementInfo, tuple[float, float]] | None:
    """Point ``dy`` px below the bottom of a ``<label>`` with the given text."""
    wanted = normalize_text(label)
    for element in snapshot:
        if element.tag == "label" and not element.excluded and normalize_text(element.text) == wanted:
            cx, _ = element.rect.center
            return element, (cx + dx, element.rect.bottom + dy)
    return None


def _text_candidates(snapshot: Snapshot, target: ClickTarget) -> list[Candidate]:
    found = []
    for element in snapshot:
        if element.excluded or not _matches_exact(element, target):
            continue
        candidate = _resolve_clickable(snapshot, element, Strategy.TEXT, target.max_depth, "exact text")
        if candidate:
            found.append(candidate)
    return found


def _fingerprint_candidates(snapshot: Snapshot, target: ClickTarget) -> list[Candidate]:
    if not target.fingerprint:
        return []
    wanted = set(target.fingerprint)
    found = []
    for element in snapshot:
        if element.excluded or not wanted.issubset(element.classes):
            continue
        if not _contains_label(element, target):
            continue
        candidate = _resolve_clickable(
            snapshot, element, Strategy.FINGERPRINT, target.max_depth, "class fingerprint"
        )
        if candidate:
            found.append(candidate)
    return found


def _icon_candidates(snapshot: Snapshot, target: ClickTarget) -> list[Candidate]:
    if not target.icon_class:
        return []
    found = []
    for element in snapshot:
        if element.excluded or target.icon_class not in element.classes:
            continue
        button = snapshot.button_ancestor(element)
        if button is not None and _usable(button):
            found.append(
                Candidate(
                    button.index,
                    Strategy.ICON,
                    _score(Strategy.ICON, button, 5),
                    f"button containing .{target.icon_class}",
                )
            )
        elif button is None:
            found.append(
                Candidate(
                    element.index,
                    Strategy.ICON,
                    _score(Strategy.ICON, element),
                    f".{target.icon_class} without a button",
                )
            )
    return found


def _fallback_candidates(snapshot: Snapshot, target: ClickTarget) -> list[Candidate]:
    found = []

    if target.modal_fallback:
        modals = snapshot.modals()
        if modals:
            modal = modals[0]
            buttons = [
                el for el in snapshot
                if el.modal == modal.index and el.is_button and _usable(el)
            ]
            keywords = [k.lower() for k in target.modal_keywords]
            for button in buttons:
                text = normalize_text(button.text)
                if any(k in text for k in keywords) or button.type == "submit":
                    found.append(
                        Candidate(
                            button.index,
                            Strategy.FALLBACK,
                            _score(Strategy.FALLBACK, button, 20),
                            "modal button matching keyword or submit",
                        )
                    )
            if buttons:
                last = buttons[-1]
                found.append(
                    Candidate(
                        last.index,
                        Strategy.FALLBACK,
                        _score(Strategy.FALLBACK, last, 10),
                        "last button in modal",
                    )
                )

    if target.label_offset is not None:
        dx, dy = target.label_offset
        located = point_from_label(snapshot, target.label, dx, dy)
        if located:
            label, point = located
            found.append(
                Candidate(
                    label.index,
                    Strategy.FALLBACK,
                    _BASE_SCORE[Strategy.FALLBACK],
                    f"offset ({dx:g}, {dy:g}) from label",
                    point=point,
                )
            )

    return found


_STRATEGY_FUNCS = {
    Strategy.TEXT: _text_candidates,
    Strategy.FINGERPRINT: _fingerprint_candidates,
    Strategy.ICON: _icon_candidates,
    Strategy.FALLBACK: _fallback_candidates,
}


def locate_candidates(snapshot: Snapshot, target: ClickTarget) -> list[Candidate]:
    """Return every candidate for ``target``, best first.

    An element reached by several strategies keeps its best rank.
    """
    ranked: list[Candidate] = []
    seen: set[tuple[int, bool]] = set()

    for strategy in STRATEGY_PRIORITY:
        batch = sorted(_STRATEGY_FUNCS[strategy](snapshot, target), key=lambda c: -c.score)
        for candidate in batch:
            key = (candidate.index, candidate.point is not None)
            if key in seen:
                continue
            seen.add(key)
            ranked.append(candidate)

    return ranked


SNAPSHOT_JS = """
(() => {
    const excludedSelectors = %(excluded)s;
    const modalSelector = %(modal)s;
    const all = Array.from(document.body ? document.body.querySelectorAll("*") : []);
    const indexOf = new Map();
    all.forEach((el, i) => {
        el.setAttribute("data-pda-idx", String(i));
        indexOf.set(el, i);
    });
    const modalRoots = new Set(Array.from(document.querySelectorAll(modalSelector)));
    const nearestModal = (el) => {
        let cur = el.parentElement;
        while (cur) {
            if (modalRoots.has(cur)) return indexOf.has(cur) ? indexOf.get(cur) : null;
            cur = cur.parentElement;
        }
        return null;
    };
    const excluded = (el) => excludedSelectors.some((sel) => {
        try { return !!el.closest(sel); } catch (e) { return false; }
    });
    const out = all.map((el, i) => {
        const rect = el.getBoundingClientRect();
        const cls = typeof el.className === "string" ? el.className : (el.getAttribute("class") || "");
        return {
            i: i,
            tag: el.tagName.toLowerCase(),
            text: (el.textContent || "").trim().slice(0, 200),
            role: el.getAttribute("role"),
            classes: cls.split(/\\s+/).filter(Boolean),
            parent: el.parentElement && indexOf.has(el.parentElement) ? indexOf.get(el.parentElement) : null,
            onclick: typeof el.onclick === "function" || el.hasAttribute("onclick"),
            type: el.getAttribute("type"),
            rect: { x: rect.left, y: rect.top, width: rect.width, height: rect.height },
            isModal: modalRoots.has(el),
            modal: nearestModal(el),
            visible: el.offsetParent !== null || el.tagName.toLowerCase() === "body",
            disabled: !!el.disabled || el.getAttribute("aria-disabled") === "true",
            excluded: excluded(el),
        };
    });
    return JSON.stringify(out);
})()
""" % {
    "excluded": json.dumps(list(EXCLUDED_SELECTORS)),
    "modal": json.dumps(MODAL_SELECTOR),
}
