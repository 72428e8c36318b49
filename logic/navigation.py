"""Screen navigation state machine.

Navigation is pure in-memory state. It is never persisted, so every process
starts on the welcome screen.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Tuple

from closet_app.logging_config import get_logger, log_event
from models.state import WardrobeState
from models.taxonomy import ALL_CATEGORIES, CATEGORY_FILTERS, validate_category_filter

logger = get_logger(__name__)


class Screen(str, Enum):
    WELCOME = "welcome"
    LOGIN = "login"
    HOME = "home"
    CLOSET = "closet"
    OUTFITS = "outfits"
    PROFILE = "profile"

    @classmethod
    def parse(cls, value: Any) -> "Screen":
        """Map a raw screen name onto a Screen; anything unknown lands on home."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.HOME


class NavAction(str, Enum):
    CONTINUE = "continue"
    BACK = "back"
    LOGIN_SUCCEEDED = "login_succeeded"
    OPEN_CLOSET = "open_closet"
    OPEN_OUTFITS = "open_outfits"
    OPEN_PROFILE = "open_profile"


INITIAL_SCREEN = Screen.WELCOME

TRANSITIONS: Dict[Tuple[Screen, NavAction], Screen] = {
    (Screen.WELCOME, NavAction.CONTINUE): Screen.LOGIN,
    (Screen.LOGIN, NavAction.BACK): Screen.WELCOME,
    (Screen.LOGIN, NavAction.LOGIN_SUCCEEDED): Screen.HOME,
    (Screen.HOME, NavAction.OPEN_CLOSET): Screen.CLOSET,
    (Screen.HOME, NavAction.OPEN_OUTFITS): Screen.OUTFITS,
    (Screen.HOME, NavAction.OPEN_PROFILE): Screen.PROFILE,
    (Screen.CLOSET, NavAction.BACK): Screen.HOME,
    (Screen.OUTFITS, NavAction.BACK): Screen.HOME,
    (Screen.PROFILE, NavAction.BACK): Screen.HOME,
}

_MENU_ACTIONS: Dict[Screen, NavAction] = {
    Screen.CLOSET: NavAction.OPEN_CLOSET,
    Screen.OUTFITS: NavAction.OPEN_OUTFITS,
    Screen.PROFILE: NavAction.OPEN_PROFILE,
}


class Navigator:
    """Tracks the active screen and applies the allowed transitions."""

    def __init__(self) -> None:
        self.screen = INITIAL_SCREEN

    def dispatch(self, action: NavAction | str) -> Screen:
        """Apply ``action``; actions with no edge from the current screen are ignored."""

        try:
            action = NavAction(action)
        except ValueError:
            log_event(logger, logging.DEBUG, "navigation_ignored", screen=self.screen.value, action=str(action))
            return self.screen
        target = TRANSITIONS.get((self.screen, action))
        if target is None:
            log_event(
                logger,
                logging.DEBUG,
                "navigation_ignored",
                screen=self.screen.value,
                action=action.value,
            )
            return self.screen
        log_event(
            logger,
            logging.DEBUG,
            "navigation_changed",
            source=self.screen.value,
            target=target.value,
            action=action.value,
        )
        self.screen = target
        return self.screen

    def proceed(self) -> Screen:
        return self.dispatch(NavAction.CONTINUE)

    def back(self) -> Screen:
        return self.dispatch(NavAction.BACK)

    def login_succeeded(self) -> Screen:
        return self.dispatch(NavAction.LOGIN_SUCCEEDED)

    def select(self, value: Any) -> Screen:
        """Handle a home-menu pick given as a raw screen name."""

        action = _MENU_ACTIONS.get(Screen.parse(value))
        if action is None:
            return self.screen
        return self.dispatch(action)


def _no_params(state: WardrobeState, **_: Any) -> Dict[str, Any]:
    return {}


def _home_params(state: WardrobeState, **_: Any) -> Dict[str, Any]:
    return {
        "username": state.user.username if state.user else None,
        "menu": [Screen.CLOSET.value, Screen.OUTFITS.value, Screen.PROFILE.value],
    }


def _closet_params(state: WardrobeState, category: str = ALL_CATEGORIES, **_: Any) -> Dict[str, Any]:
    category = validate_category_filter(category)
    if category == ALL_CATEGORIES:
        items = list(state.items)
    else:
        items = [item for item in state.items if item.category.value == category]
    return {"items": items, "categories": list(CATEGORY_FILTERS), "selected_category": category}


def _outfits_params(state: WardrobeState, **_: Any) -> Dict[str, Any]:
    return {"outfits": list(state.outfits), "wardrobe_items": list(state.items)}


def _profile_params(state: WardrobeState, **_: Any) -> Dict[str, Any]:
    user = state.user
    return {
        "username": user.username if user else None,
        "member_since": user.member_since.date() if user else None,
        "status": "Active",
    }


_RENDERERS: Dict[Screen, Callable[..., Dict[str, Any]]] = {
    Screen.WELCOME: _no_params,
    Screen.LOGIN: _no_params,
    Screen.HOME: _home_params,
    Screen.CLOSET: _closet_params,
    Screen.OUTFITS: _outfits_params,
    Screen.PROFILE: _profile_params,
}

_missing = set(Screen) - set(_RENDERERS)
if _missing:
    raise RuntimeError(f"No render parameters defined for screens: {sorted(s.value for s in _missing)}")


def render_params(screen: Screen | str, state: WardrobeState, **options: Any) -> Dict[str, Any]:
    """Return what the view for ``screen`` needs, plus the resolved screen name."""

    resolved = Screen.parse(screen)
    params = _RENDERERS[resolved](state, **options)
    return {"screen": resolved.value, **params}


__all__ = ["INITIAL_SCREEN", "NavAction", "Navigator", "Screen", "TRANSITIONS", "render_params"]
