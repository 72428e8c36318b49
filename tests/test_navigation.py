"""Navigation state machine and render parameter tests."""

from pathlib import Path
import logging
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.navigation import INITIAL_SCREEN, TRANSITIONS, NavAction, Navigator, Screen, render_params
from models.outfit import Outfit, User
from models.state import WardrobeState
from models.wardrobe_item import WardrobeItem


def _at_home() -> Navigator:
    navigator = Navigator()
    navigator.proceed()
    navigator.login_succeeded()
    assert navigator.screen is Screen.HOME
    return navigator


def test_fresh_navigator_starts_on_welcome() -> None:
    assert INITIAL_SCREEN is Screen.WELCOME
    assert Navigator().screen is Screen.WELCOME


def test_welcome_login_and_back() -> None:
    navigator = Navigator()

    assert navigator.proceed() is Screen.LOGIN
    assert navigator.back() is Screen.WELCOME
    assert navigator.proceed() is Screen.LOGIN
    assert navigator.login_succeeded() is Screen.HOME


@pytest.mark.parametrize("target", [Screen.CLOSET, Screen.OUTFITS, Screen.PROFILE])
def test_home_menu_and_back(target: Screen) -> None:
    navigator = _at_home()

    assert navigator.select(target.value) is target
    assert navigator.back() is Screen.HOME


def test_undefined_edges_leave_screen_unchanged() -> None:
    navigator = Navigator()

    assert navigator.back() is Screen.WELCOME
    assert navigator.login_succeeded() is Screen.WELCOME
    assert navigator.select("closet") is Screen.WELCOME

    navigator = _at_home()
    navigator.select("closet")
    assert navigator.select("profile") is Screen.CLOSET
    assert navigator.dispatch(NavAction.CONTINUE) is Screen.CLOSET


def test_home_menu_ignores_unknown_and_non_menu_values() -> None:
    navigator = _at_home()

    assert navigator.select("wishlist") is Screen.HOME
    assert navigator.select("welcome") is Screen.HOME


@pytest.mark.parametrize("raw, expected", [("closet", Screen.CLOSET), (" Profile ", Screen.PROFILE), ("bogus", Screen.HOME), (None, Screen.HOME)])
def test_parse_falls_back_to_home(raw, expected: Screen) -> None:
    assert Screen.parse(raw) is expected


def test_every_transition_targets_a_known_screen() -> None:
    assert all(isinstance(target, Screen) for target in TRANSITIONS.values())


def test_render_params_cover_every_screen() -> None:
    user = User(username="alice", join_date="2024-03-01T09:30:00.000+00:00")
    tee = WardrobeItem(id=1, name="Tee", category="tops")
    boots = WardrobeItem(id=2, name="Boots", category="shoes")
    state = WardrobeState(user=user, items=[tee, boots], outfits=[Outfit(id=3, name="Casual", items=[tee])])

    for screen in Screen:
        assert render_params(screen, state)["screen"] == screen.value

    assert render_params("home", state)["username"] == "alice"
    assert render_params("closet", state, category="shoes")["items"] == [boots]
    assert render_params("closet", state)["items"] == [tee, boots]
    assert render_params("outfits", state)["outfits"][0].name == "Casual"
    profile = render_params("profile", state)
    assert profile["member_since"].isoformat() == "2024-03-01"
    assert render_params("corrupt", state)["screen"] == "home"


def test_unknown_action_is_ignored(caplog: pytest.LogCaptureFixture) -> None:
    navigator = _at_home()

    with caplog.at_level(logging.DEBUG):
        assert navigator.dispatch("bogus") is Screen.HOME

    ignored = [record for record in caplog.records if getattr(record, "event", None) == "navigation_ignored"]
    assert ignored and ignored[-1].action == "bogus"
    assert navigator.screen is Screen.HOME
