from __future__ import annotations

import logging
import os
import re
import uuid
from pathlib import Path

from .notes import Note, normalize_newlines

logger = logging.getLogger("notebrowser.store")

NOTE_ID_PREFIX = "note://notebrowser/"
NOTE_SUFFIX = ".note"
TITLE_MATCH_WEIGHT = 10

_GUID_RE = re.compile(r"^[0-9a-fA-F-]{1,64}$")


def atomic_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp.{os.getpid()}")
    tmp_path.write_text(content, encoding="utf-8")
    tmp_path.replace(path)


def note_id_for_guid(guid: str) -> str:
    return NOTE_ID_PREFIX + guid


def guid_for_note_id(note_id: str) -> str | None:
    if not note_id.startswith(NOTE_ID_PREFIX):
        return None
    guid = note_id[len(NOTE_ID_PREFIX) :].strip("/")
    if not _GUID_RE.match(guid):
        return None
    return guid


class NoteDirectoryStore:
    """Notes kept as ``<guid>.note`` files of canonical text in one directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _path_for(self, note_id: str) -> Path | None:
        guid = guid_for_note_id(note_id)
        if guid is None:
            return None
        return self.root / f"{guid}{NOTE_SUFFIX}"

    def _read(self, path: Path) -> Note:
        text = path.read_text(encoding="utf-8", errors="replace")
        return Note(id=note_id_for_guid(path.stem), text=normalize_newlines(text))

    def fetch(self, note_id: str) -> Note | None:
        path = self._path_for(note_id)
        if path is None or not path.is_file():
            return None
        return self._read(path)

    def create(self) -> Note:
        return Note(id=note_id_for_guid(str(uuid.uuid4())))

    def save(self, note: Note) -> None:
        path = self._path_for(note.id)
        if path is None:
            raise ValueError(f"not a note id for this store: {note.id!r}")
        atomic_write_text(path, note.text)
        logger.debug("note_written", extra={"note_id": note.id, "path": str(path)})

    def delete(self, note: Note) -> None:
        path = self._path_for(note.id)
        if path is not None and path.exists():
            path.unlink()

    def all_notes(self) -> list[Note]:
        if not self.root.is_dir():
            return []
        notes: list[Note] = []
        for path in sorted(self.root.glob(f"*{NOTE_SUFFIX}")):
            if not _GUID_RE.match(path.stem):
                continue
            try:
                notes.append(self._read(path))
            except OSError:
                # A note deleted or locked mid-scan should not break listing.
                logger.warning("note_unreadable", extra={"path": str(path)})
        notes.sort(key=lambda n: (n.display_title.lower(), n.id))
        return notes

    def search(self, query: str) -> list[Note]:
        """Notes containing every query word, best match first.

        Hits in the title count ``TITLE_MATCH_WEIGHT`` times a hit in the text;
        equal scores keep note id order.
        """
        words = [w for w in query.lower().split() if w]
        if not words:
            return []
        scored: list[tuple[int, str, Note]] = []
        for note in self.all_notes():
            title = note.title.lower()
            text = note.text.lower()
            if not all(w in text for w in words):
                continue
            score = sum(TITLE_MATCH_WEIGHT * title.count(w) + text.count(w) for w in words)
            scored.append((-score, note.id, note))
        scored.sort(key=lambda item: (item[0], item[1]))
        return [note for _score, _id, note in scored]
