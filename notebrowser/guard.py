"""Navigation guard for the note content view.

Every navigation the content view wants to make is either allowed to proceed
natively or redirected into the note-loading pipeline. The only navigation
ever allowed is the one caused by the controller injecting a rendered note;
everything else (a clicked link, a typed URL) becomes a note load.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote, urlsplit

from .notes import NOTE_URI_SCHEME
from .outcomes import Outcome

logger = logging.getLogger("notebrowser.guard")


class NavigationState(Enum):
    IDLE = "idle"
    PROGRAMMATIC_LOAD = "programmatic_load"


@dataclass(frozen=True)
class Decision:
    allow: bool
    target: str = ""

    @property
    def outcome(self) -> Outcome:
        if not self.allow and not self.target:
            return Outcome.UNRESOLVABLE_NAVIGATION
        return Outcome.OK


ALLOW = Decision(allow=True)


def redirect(target: str) -> Decision:
    return Decision(allow=False, target=target)


def note_id_from_url(url: str) -> str | None:
    """Extract the note id a navigation request points at.

    ``note:`` URIs are note ids themselves. Any other URL may carry a quoted
    note id as its last path segment (a link resolved against the base URL).
    """
    raw = (url or "").strip()
    if not raw:
        return None
    try:
        parts = urlsplit(raw)
        if parts.scheme.lower() == NOTE_URI_SCHEME:
            return unquote(raw)
        segment = unquote(parts.path.rstrip("/").rsplit("/", 1)[-1])
        if urlsplit(segment).scheme.lower() == NOTE_URI_SCHEME:
            return segment
    except ValueError:
        return None
    return None


def transition(state: NavigationState, url: str) -> tuple[NavigationState, Decision]:
    """Decide one navigation intent. Pure: returns the next state and the decision."""
    if state is NavigationState.PROGRAMMATIC_LOAD:
        # Single shot: the injection's own navigation goes through, then idle.
        return NavigationState.IDLE, ALLOW
    return NavigationState.IDLE, redirect(note_id_from_url(url) or "")


class NavigationGuard:
    def __init__(self) -> None:
        self._state = NavigationState.IDLE

    @property
    def state(self) -> NavigationState:
        return self._state

    def arm(self) -> None:
        """Let the next navigation intent through (the controller is about to inject)."""
        self._state = NavigationState.PROGRAMMATIC_LOAD

    def disarm(self) -> None:
        self._state = NavigationState.IDLE

    def decide(self, url: str) -> Decision:
        previous = self._state
        self._state, decision = transition(previous, url)
        if decision.outcome is Outcome.UNRESOLVABLE_NAVIGATION:
            logger.warning("navigation_unresolvable", extra={"url": url})
        else:
            logger.debug(
                "navigation_decided",
                extra={"url": url, "state": previous.value, "allow": decision.allow, "target": decision.target},
            )
        return decision


class DecisionToken:
    """Handle for one navigation request; must be resolved exactly once."""

    def __init__(self) -> None:
        self._allowed: bool | None = None

    @property
    def resolved(self) -> bool:
        return self._allowed is not None

    @property
    def allowed(self) -> bool:
        return bool(self._allowed)

    def use(self) -> None:
        self._resolve(True)

    def ignore(self) -> None:
        self._resolve(False)

    def resolve(self, decision: Decision) -> None:
        self._resolve(decision.allow)

    def _resolve(self, allowed: bool) -> None:
        if self._allowed is not None:
            raise RuntimeError("navigation decision already resolved")
        self._allowed = allowed
