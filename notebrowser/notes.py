from __future__ import annotations

import html
import re
from dataclasses import dataclass

NOTE_URI_SCHEME = "note"
TITLE_SEPARATOR = "\n"

_TAG_RE = re.compile(r"<[^>]*>")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def title_from_text(text: str) -> str:
    """First line of canonical text, or "" when the text has no newline."""
    indx = text.find(TITLE_SEPARATOR)
    if indx == -1:
        return ""
    return text[:indx]


@dataclass
class Note:
    id: str
    text: str = ""

    @property
    def title(self) -> str:
        # Derived on every read so it can never drift from the stored text.
        return title_from_text(self.text)

    @property
    def display_title(self) -> str:
        """Title as plain text for window titles and menus: tags dropped, entities decoded."""
        plain = html.unescape(_TAG_RE.sub("", self.title))
        return plain.strip() or "Untitled"
