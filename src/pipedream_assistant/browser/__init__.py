"""Browser automation: nodriver session, heuristic clicking and login strategies."""

from .agent import BrowserAgent
from .clicker import CREATE_PROJECT, NEW_PROJECT, HeuristicClicker
from .locator import Candidate, ClickTarget, Snapshot, Strategy, locate_candidates
from .login import STRATEGIES, LoginResult, is_logged_in
from .urls import extract_project_id, is_login_url, looks_like_project_id

__all__ = [
    "BrowserAgent",
    "CREATE_PROJECT",
    "Candidate",
    "ClickTarget",
    "HeuristicClicker",
    "LoginResult",
    "NEW_PROJECT",
    "STRATEGIES",
    "Snapshot",
    "Strategy",
    "extract_project_id",
    "is_logged_in",
    "is_login_url",
    "locate_candidates",
    "looks_like_project_id",
]
