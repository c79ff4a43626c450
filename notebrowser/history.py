from __future__ import annotations

import logging

logger = logging.getLogger("notebrowser.history")


class HistoryStack:
    """Browser-style navigation log of note ids with a current-position cursor.

    Pushing while the cursor is behind the end discards the forward (redo)
    branch first. ``back`` and ``forward`` only move the cursor; they return
    ``None`` at the edges and leave the cursor where it was.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []
        self._cursor: int | None = None

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def cursor(self) -> int | None:
        return self._cursor

    @property
    def current(self) -> str | None:
        if self._cursor is None:
            return None
        return self._entries[self._cursor]

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, entry: str) -> None:
        if self._cursor is not None and self._cursor < len(self._entries) - 1:
            dropped = len(self._entries) - (self._cursor + 1)
            del self._entries[self._cursor + 1 :]
            logger.debug("history_branch_truncated", extra={"dropped": dropped})
        self._entries.append(entry)
        self._cursor = len(self._entries) - 1

    def can_go_back(self) -> bool:
        return self._cursor is not None and self._cursor > 0

    def can_go_forward(self) -> bool:
        return self._cursor is not None and self._cursor < len(self._entries) - 1

    def back(self) -> str | None:
        if not self.can_go_back():
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def forward(self) -> str | None:
        if not self.can_go_forward():
            return None
        self._cursor += 1
        return self._entries[self._cursor]
