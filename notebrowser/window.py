from __future__ import annotations

import logging

from PySide6.QtCore import QPoint, QTimer
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLineEdit,
    QMainWindow,
    QMenu,
    QMessageBox,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from .config import Settings
from .outcomes import Outcome
from .ports import NoteStore
from .session import RESTORABLE_NOTE_KEY, SessionController
from .webview import NoteWebView

logger = logging.getLogger("notebrowser.window")

APP_NAME = "notebrowser"
SEARCH_RESULTS_LIMIT = 30


class NoteWindow(QMainWindow):
    """Main window: a note view with back/forward, search and a notes picker."""

    def __init__(self, settings: Settings, store: NoteStore, open_id: str | None = None):
        super().__init__()
        self.settings = settings
        self._popover: QMenu | None = None

        self.setWindowTitle(APP_NAME)
        self.resize(980, 760)

        self.view = NoteWebView(self)
        self.controller = SessionController(
            store,
            self.view,
            base_url=settings.base_url,
            chrome=self,
            schedule=lambda fn: QTimer.singleShot(0, fn),
        )
        self.view.attach(self.controller)

        self.back_btn = QPushButton("<")
        self.back_btn.setToolTip("Back")
        self.back_btn.clicked.connect(self._go_back)
        self.forward_btn = QPushButton(">")
        self.forward_btn.setToolTip("Forward")
        self.forward_btn.clicked.connect(self._go_forward)

        new_btn = QPushButton("New")
        new_btn.clicked.connect(self._new_note)
        save_btn = QPushButton("Save")
        save_btn.clicked.connect(self._save_note)
        delete_btn = QPushButton("Delete")
        delete_btn.clicked.connect(self._delete_note)
        self.notes_btn = QPushButton("Notes")
        self.notes_btn.clicked.connect(self._show_notes)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search notes")
        self.search_input.setClearButtonEnabled(True)
        self.search_input.setMinimumWidth(220)
        self.search_input.returnPressed.connect(self._start_search)

        top_bar = QHBoxLayout()
        top_bar.setContentsMargins(0, 0, 0, 0)
        top_bar.addWidget(self.back_btn)
        top_bar.addWidget(self.forward_btn)
        top_bar.addWidget(new_btn)
        top_bar.addWidget(save_btn)
        top_bar.addWidget(delete_btn)
        top_bar.addWidget(self.notes_btn)
        top_bar.addStretch(1)
        top_bar.addWidget(self.search_input)

        top_bar_widget = QWidget()
        top_bar_widget.setLayout(top_bar)
        top_bar_widget.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addWidget(top_bar_widget)
        layout.addWidget(self.view, 1)
        self.setCentralWidget(central)

        self.statusBar().showMessage(f"Notes in {settings.notes_dir}")
        self._add_shortcuts()
        self.update_navigation(False, False)
        self.controller.start({RESTORABLE_NOTE_KEY: open_id} if open_id else None)

    def _add_shortcuts(self) -> None:
        for text, shortcut, slot in (
            ("Save", QKeySequence.StandardKey.Save, self._save_note),
            ("New", QKeySequence.StandardKey.New, self._new_note),
            ("Back", QKeySequence.StandardKey.Back, self._go_back),
            ("Forward", QKeySequence.StandardKey.Forward, self._go_forward),
            ("Find", QKeySequence.StandardKey.Find, lambda: self.search_input.setFocus()),
        ):
            action = QAction(text, self)
            action.setShortcut(shortcut)
            action.triggered.connect(slot)
            self.addAction(action)

    # Chrome

    def update_navigation(self, can_go_back: bool, can_go_forward: bool) -> None:
        self.back_btn.setEnabled(can_go_back)
        self.forward_btn.setEnabled(can_go_forward)

    def close_transient(self) -> None:
        if self._popover is not None:
            self._popover.close()
            self._popover = None

    def show_title(self, title: str) -> None:
        self.setWindowTitle(f"{title} - {APP_NAME}")

    # Actions

    def _go_back(self) -> None:
        self._report_replay(self.controller.back())

    def _go_forward(self) -> None:
        self._report_replay(self.controller.forward())

    def _report_replay(self, outcome: Outcome) -> None:
        if outcome is Outcome.NOT_FOUND:
            self.statusBar().showMessage("That note no longer exists", 4000)

    def _new_note(self) -> None:
        self.controller.new_note()
        self.view.setFocus()

    def _save_note(self) -> None:
        try:
            outcome = self.controller.save_current()
        except OSError as exc:
            logger.exception("note_save_failed")
            QMessageBox.critical(self, "Could not save note", str(exc))
            return
        if outcome is Outcome.MALFORMED_CONTENT:
            self.statusBar().showMessage("Saved without a title: the first line becomes the title", 5000)
        else:
            self.statusBar().showMessage("Saved", 2000)

    def _delete_note(self) -> None:
        if self.controller.current_note is None:
            self.statusBar().showMessage("Nothing to delete", 3000)
            return
        answer = QMessageBox.warning(
            self,
            "Really delete this note?",
            "You are about to delete this note, this operation cannot be undone",
            QMessageBox.StandardButton.Ok | QMessageBox.StandardButton.Cancel,
            QMessageBox.StandardButton.Cancel,
        )
        if answer != QMessageBox.StandardButton.Ok:
            return
        try:
            self.controller.delete_current()
        except OSError as exc:
            logger.exception("note_delete_failed")
            QMessageBox.critical(self, "Could not delete note", str(exc))
            return
        self.statusBar().showMessage("Note deleted", 3000)

    def _show_notes(self) -> None:
        """Pop up every note under the Notes button; picking one opens it."""
        notes = self.controller.all_notes()
        menu = QMenu(self)
        if not notes:
            empty = menu.addAction("No notes yet")
            empty.setEnabled(False)
        for note in notes:
            action = menu.addAction(note.display_title)
            action.triggered.connect(lambda _checked=False, note_id=note.id: self._open_note(note_id))
        self._popover = menu
        menu.popup(self.notes_btn.mapToGlobal(QPoint(0, self.notes_btn.height())))

    def _start_search(self) -> None:
        query = self.search_input.text().strip()
        results = self.controller.search(query)[:SEARCH_RESULTS_LIMIT]
        menu = QMenu("Search Results", self)
        if not results:
            empty = menu.addAction(f"No notes match {query!r}" if query else "Type something to search")
            empty.setEnabled(False)
        for note in results:
            action = menu.addAction(note.display_title)
            action.triggered.connect(lambda _checked=False, note_id=note.id: self._open_note(note_id))
        self._popover = menu
        menu.popup(self.search_input.mapToGlobal(QPoint(0, self.search_input.height())))

    def _open_note(self, note_id: str) -> None:
        if self.controller.load_note(note_id, with_history=True) is Outcome.NOT_FOUND:
            self.statusBar().showMessage("That note no longer exists", 4000)
