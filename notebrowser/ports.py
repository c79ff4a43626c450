from __future__ import annotations

from typing import Protocol, runtime_checkable

from .notes import Note


@runtime_checkable
class NoteStore(Protocol):
    def fetch(self, note_id: str) -> Note | None:
        ...

    def create(self) -> Note:
        ...

    def save(self, note: Note) -> None:
        ...

    def delete(self, note: Note) -> None:
        ...

    def search(self, query: str) -> list[Note]:
        ...

    def all_notes(self) -> list[Note]:
        ...


@runtime_checkable
class ContentView(Protocol):
    def inject(self, html: str, base_url: str) -> None:
        ...

    def set_editable(self, editable: bool) -> None:
        ...

    def current_body_markup(self) -> str:
        ...


@runtime_checkable
class Chrome(Protocol):
    def update_navigation(self, can_go_back: bool, can_go_forward: bool) -> None:
        ...

    def close_transient(self) -> None:
        ...

    def show_title(self, title: str) -> None:
        ...
