"""Session controller: loads, saves and navigates notes in one content view."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Union

from .guard import DecisionToken, NavigationGuard
from .history import HistoryStack
from .notes import Note
from .outcomes import Outcome
from .ports import Chrome, ContentView, NoteStore
from .translate import extract_title, from_edited, render_document, to_renderable

logger = logging.getLogger("notebrowser.session")

RESTORABLE_NOTE_KEY = "saved_note_id"


@dataclass(frozen=True)
class NavigationRequested:
    url: str
    token: DecisionToken


@dataclass(frozen=True)
class LoadFinished:
    note_id: str
    ok: bool = True


@dataclass(frozen=True)
class OpenNote:
    note_id: str
    with_history: bool = True


Message = Union[NavigationRequested, LoadFinished, OpenNote]


class SessionController:
    """Owns the current note, the history stack and the navigation guard.

    Content-view events arrive as messages through ``post`` and are handled one
    at a time in arrival order, even when handling one message (an injection)
    makes the view raise the next.
    """

    def __init__(
        self,
        store: NoteStore,
        view: ContentView,
        *,
        base_url: str,
        chrome: Chrome | None = None,
        schedule: Callable[[Callable[[], None]], None] | None = None,
    ) -> None:
        self.store = store
        self.view = view
        self.base_url = base_url
        self.chrome = chrome
        # Runs redirected loads; the Qt shell defers them out of the navigation callback.
        self._schedule = schedule
        self.guard = NavigationGuard()
        self.history = HistoryStack()
        self._current_note: Note | None = None
        self._current_id: str | None = None
        self._restorable: dict[str, str] | None = None
        self._mailbox: deque[Message] = deque()
        self._draining = False

    @property
    def current_id(self) -> str | None:
        return self._current_id

    @property
    def current_note(self) -> Note | None:
        return self._current_note

    def current_title(self) -> str:
        if self._current_note is None:
            return ""
        return self._current_note.title

    def can_go_back(self) -> bool:
        return self.history.can_go_back() or self._on_blank_page_after_history()

    def _on_blank_page_after_history(self) -> bool:
        # The blank page is not a history entry; the cursor still names the last note.
        return self._current_id is None and self.history.current is not None

    def can_go_forward(self) -> bool:
        return self.history.can_go_forward()

    # Messages

    def post(self, message: Message) -> None:
        self._mailbox.append(message)
        if self._draining:
            return
        self._draining = True
        try:
            while self._mailbox:
                self._handle(self._mailbox.popleft())
        finally:
            self._draining = False

    def _handle(self, message: Message) -> None:
        if isinstance(message, NavigationRequested):
            self._on_navigation_requested(message)
        elif isinstance(message, LoadFinished):
            self._on_load_finished(message)
        elif isinstance(message, OpenNote):
            self.load_note(message.note_id, message.with_history)
        else:
            raise TypeError(f"unsupported message: {message!r}")

    def decide_navigation(self, url: str, main_frame: bool = True) -> bool:
        """Decide a navigation raised by the content view; True lets it proceed.

        Sub-frame requests never reach the guard.
        """
        if not main_frame:
            logger.debug("navigation_subframe", extra={"url": url})
            return True
        token = DecisionToken()
        self.post(NavigationRequested(url, token))
        return token.allowed

    def _on_navigation_requested(self, message: NavigationRequested) -> None:
        decision = self.guard.decide(message.url)
        message.token.resolve(decision)
        if decision.allow or not decision.target:
            return
        follow_up = OpenNote(decision.target, with_history=True)
        if self._schedule is None:
            self.post(follow_up)
        else:
            self._schedule(lambda: self.post(follow_up))

    def _on_load_finished(self, message: LoadFinished) -> None:
        if message.note_id != (self._current_id or ""):
            logger.debug("load_finished_stale", extra={"note_id": message.note_id, "current_id": self._current_id})
            return
        if not message.ok:
            logger.warning("note_render_failed", extra={"note_id": message.note_id})
            return
        if self.chrome is not None:
            self.chrome.show_title(self._current_note.display_title if self._current_note else "Untitled")

    # Entry points

    def load_note(self, note_id: str, with_history: bool = True) -> Outcome:
        self.guard.arm()
        logger.info("note_load", extra={"note_id": note_id, "with_history": with_history})
        note = self.store.fetch(note_id) if note_id else None
        if note is None:
            self.guard.disarm()
            logger.warning("note_not_found", extra={"note_id": note_id})
            return Outcome.NOT_FOUND

        self._current_note = note
        self._current_id = note_id
        self._restorable = None

        fragment = to_renderable(note.text)
        self.view.inject(render_document(fragment, title=note.display_title, note_id=note_id), self.base_url)
        self.view.set_editable(True)

        if with_history:
            self.history.push(note_id)
        self._publish_navigation()
        if self.chrome is not None:
            self.chrome.close_transient()
        return Outcome.OK

    def new_note(self) -> None:
        """Show an empty editable page; the next save creates a note from it."""
        self._current_note = None
        self._current_id = None
        self._restorable = None
        self.guard.arm()
        self.view.inject(render_document("", title="", note_id=""), self.base_url)
        self.view.set_editable(True)
        self._publish_navigation()
        if self.chrome is not None:
            self.chrome.close_transient()

    def save_current(self) -> Outcome:
        markup = self.view.current_body_markup()
        translation = from_edited(markup)
        if translation.error is not None:
            logger.warning("note_untitled", extra={"note_id": self._current_id, "error": translation.error})

        if self._current_note is None:
            if not translation.text.strip():
                logger.warning("note_create_skipped_empty")
                return Outcome.MALFORMED_CONTENT
            note = self.store.create()
            note.text = translation.text
            self.store.save(note)
            logger.info("note_create", extra={"note_id": note.id, "title": extract_title(markup)})
            self.load_note(note.id, with_history=True)
        else:
            self._current_note.text = translation.text
            self.store.save(self._current_note)
            logger.info("note_save", extra={"note_id": self._current_id})
            if self.chrome is not None:
                self.chrome.show_title(self._current_note.display_title)

        if translation.error is not None:
            return Outcome.MALFORMED_CONTENT
        return Outcome.OK

    def delete_current(self) -> Outcome:
        if self._current_note is None:
            return Outcome.NOT_FOUND
        note = self._current_note
        self.store.delete(note)
        logger.info("note_delete", extra={"note_id": note.id})
        self.new_note()
        return Outcome.OK

    def back(self) -> Outcome:
        if self._on_blank_page_after_history():
            outcome = self.load_note(self.history.current, with_history=False)
            if outcome is not Outcome.NOT_FOUND:
                return outcome
        return self._replay(self.history.back(), undo=self.history.forward)

    def forward(self) -> Outcome:
        return self._replay(self.history.forward(), undo=self.history.back)

    def _replay(self, entry: str | None, undo: Callable[[], str | None]) -> Outcome:
        if entry is None:
            logger.debug("history_boundary", extra={"cursor": self.history.cursor})
            return Outcome.HISTORY_BOUNDARY
        outcome = self.load_note(entry, with_history=False)
        if outcome is Outcome.NOT_FOUND:
            # Keep the cursor on the note that is still on screen.
            undo()
            self._publish_navigation()
        return outcome

    def search(self, query: str) -> list[Note]:
        if not query.strip():
            return []
        return self.store.search(query)

    def all_notes(self) -> list[Note]:
        return self.store.all_notes()

    def restorable_state(self) -> dict[str, str]:
        if self._restorable is None:
            self._restorable = {RESTORABLE_NOTE_KEY: self._current_id} if self._current_id else {}
        return dict(self._restorable)

    def restore_state(self, state: dict[str, str]) -> Outcome:
        note_id = state.get(RESTORABLE_NOTE_KEY)
        if not note_id:
            return Outcome.NOT_FOUND
        return self.load_note(note_id, with_history=False)

    def start(self, state: dict[str, str] | None = None) -> Outcome:
        """Show the restored note, or the blank page when there is nothing to restore."""
        outcome = self.restore_state(state or {})
        if outcome is Outcome.NOT_FOUND:
            if state:
                logger.warning("startup_note_not_found", extra={"note_id": state.get(RESTORABLE_NOTE_KEY)})
            self.new_note()
        return outcome

    def _publish_navigation(self) -> None:
        if self.chrome is not None:
            self.chrome.update_navigation(self.can_go_back(), self.can_go_forward())
