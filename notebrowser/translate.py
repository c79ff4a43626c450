"""Conversion between canonical note text and the HTML shown in the editor."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass

from .notes import TITLE_SEPARATOR, normalize_newlines

LINE_BREAK = "<br>"
NO_TITLE_FOUND = "no_title_found"

# Elements an editable web view uses to split lines. Anything else (links,
# spans, emphasis) is inline and kept verbatim in the line text.
BLOCK_TAGS = frozenset(
    {"body", "html", "div", "p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "ul", "ol", "blockquote", "pre"}
)
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

_TAG_RE = re.compile(r"<(/?)([A-Za-z][A-Za-z0-9]*)\b[^>]*?>")
_NBSP_RE = re.compile(r"&nbsp;|&#160;|&#xa0;|\u00a0", re.IGNORECASE)
# Escaped angle brackets stay escaped: unescaped they would turn typed text into markup.
_MARKUP_ENTITY_RE = re.compile(r"&(?:lt|gt|#0*6[02]|#x0*3[ce]);", re.IGNORECASE)


@dataclass(frozen=True)
class Translation:
    text: str
    title: str
    error: str | None


def to_renderable(text: str) -> str:
    """Render canonical text as an HTML fragment: heading for line one, <br> for the rest."""
    text = normalize_newlines(text)
    indx = text.find(TITLE_SEPARATOR)
    if indx == -1:
        return text
    title = text[:indx]
    remainder = text[indx + 1 :]
    return f"<h1>{title}</h1>" + remainder.replace(TITLE_SEPARATOR, LINE_BREAK)


def _decode_text(segment: str) -> str:
    """Unescape the entities an editor serializes text with, except angle brackets."""
    parts: list[str] = []
    pos = 0
    for match in _MARKUP_ENTITY_RE.finditer(segment):
        parts.append(html.unescape(segment[pos : match.start()]))
        parts.append(match.group(0))
        pos = match.end()
    parts.append(html.unescape(segment[pos:]))
    return "".join(parts)


def _split_rendered_lines(markup: str) -> tuple[list[str], bool]:
    """Split edited body markup into visual lines.

    Returns the lines and whether any line-break marker was seen at all.
    """
    markup = _NBSP_RE.sub(" ", markup.replace("\r", "").replace("\n", ""))
    lines: list[str] = []
    current: list[str] = []
    saw_marker = False
    ended_with_break = False
    pos = 0

    def flush() -> None:
        lines.append("".join(current))
        current.clear()

    for match in _TAG_RE.finditer(markup):
        if match.start() > pos:
            current.append(_decode_text(markup[pos : match.start()]))
            ended_with_break = False
        pos = match.end()
        closing = match.group(1) == "/"
        name = match.group(2).lower()

        if name == "br":
            saw_marker = True
            flush()
            ended_with_break = True
            continue

        if name in BLOCK_TAGS:
            saw_marker = True
            # A closed heading is always a line of its own, even when empty.
            if current or (closing and name in HEADING_TAGS):
                flush()
            ended_with_break = False
            continue

        current.append(match.group(0))
        ended_with_break = False

    if pos < len(markup):
        current.append(_decode_text(markup[pos:]))
        ended_with_break = False
    if current:
        flush()
    elif ended_with_break:
        # A trailing <br> stands for a trailing newline in the canonical text.
        lines.append("")
    return lines, saw_marker


def from_edited(dom_body: str) -> Translation:
    """Rebuild canonical text from the body markup of the editor.

    The first rendered line is the title. When the markup holds no line-break
    marker there is no title boundary; the whole body comes back as an untitled
    note with ``error`` set to ``NO_TITLE_FOUND``.
    """
    lines, saw_marker = _split_rendered_lines(dom_body or "")
    if not saw_marker or not lines:
        return Translation(text="".join(lines), title="", error=NO_TITLE_FOUND)
    title = lines[0]
    remainder = TITLE_SEPARATOR.join(lines[1:])
    return Translation(text=title + TITLE_SEPARATOR + remainder, title=title, error=None)


def extract_title(dom_body: str) -> str:
    return from_edited(dom_body).title


def render_document(fragment: str, *, title: str, note_id: str) -> str:
    """Wrap a rendered fragment into the page loaded by the content view."""
    escaped_title = html.escape(title or "Untitled")
    escaped_id = html.escape(note_id, quote=True)
    # The body must contain the fragment and nothing else: the editor reads
    # body.innerHTML back verbatim on save.
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8"/>
  <title>{escaped_title}</title>
  <style>
    :root {{
      color-scheme: light dark;
      --fg: #1f2937;
      --bg: #f9fafb;
      --link: #0b57d0;
    }}
    @media (prefers-color-scheme: dark) {{
      :root {{
        --fg: #e5e7eb;
        --bg: #111827;
        --link: #8ab4f8;
      }}
    }}
    body {{
      margin: 1.2rem 1.6rem;
      color: var(--fg);
      background: var(--bg);
      font-family: "Noto Sans", "DejaVu Sans", sans-serif;
      line-height: 1.5;
      word-wrap: break-word;
      outline: none;
    }}
    h1 {{ font-size: 1.5rem; margin: 0 0 0.6rem 0; }}
    a {{ color: var(--link); }}
  </style>
</head>
<body data-note-id="{escaped_id}">{fragment}</body>
</html>
"""
