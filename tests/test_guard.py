import pytest

from notebrowser.guard import (
    ALLOW,
    DecisionToken,
    NavigationGuard,
    NavigationState,
    note_id_from_url,
    redirect,
    transition,
)
from notebrowser.outcomes import Outcome


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("note:/z", "note:/z"),
        ("note://notebrowser/0f8e-11", "note://notebrowser/0f8e-11"),
        ("NOTE://notebrowser/a%20b", "NOTE://notebrowser/a b"),
        ("file:///home/me/Notes/note%3A%2Fz", "note:/z"),
        ("file:///home/me/Notes/", None),
        ("https://example.com/page", None),
        ("data:text/html;charset=UTF-8,%3Chtml%3E", None),
        ("", None),
    ],
)
def test_note_id_from_url(url: str, expected) -> None:
    assert note_id_from_url(url) == expected


def test_idle_redirects_to_target() -> None:
    state, decision = transition(NavigationState.IDLE, "note:/z")
    assert state is NavigationState.IDLE
    assert decision == redirect("note:/z")
    assert not decision.allow


def test_programmatic_load_allows_once_and_returns_to_idle() -> None:
    state, decision = transition(NavigationState.PROGRAMMATIC_LOAD, "data:text/html,whatever")
    assert state is NavigationState.IDLE
    assert decision is ALLOW


def test_guard_single_shot() -> None:
    guard = NavigationGuard()
    guard.arm()
    assert guard.state is NavigationState.PROGRAMMATIC_LOAD
    assert guard.decide("file:///notes/").allow
    assert guard.state is NavigationState.IDLE
    second = guard.decide("note:/y")
    assert not second.allow
    assert second.target == "note:/y"


def test_unresolvable_navigation_redirects_to_empty_target() -> None:
    guard = NavigationGuard()
    decision = guard.decide("https://example.com/")
    assert not decision.allow
    assert decision.target == ""
    assert decision.outcome is Outcome.UNRESOLVABLE_NAVIGATION


def test_disarm_returns_to_idle() -> None:
    guard = NavigationGuard()
    guard.arm()
    guard.disarm()
    assert not guard.decide("note:/x").allow


def test_decision_token_resolves_exactly_once() -> None:
    token = DecisionToken()
    assert not token.resolved
    token.resolve(ALLOW)
    assert token.resolved
    assert token.allowed
    with pytest.raises(RuntimeError):
        token.ignore()


def test_decision_token_ignore() -> None:
    token = DecisionToken()
    token.ignore()
    assert token.resolved
    assert not token.allowed
