"""Heading outline for markdown documents.

Headings inside fenced code blocks are not part of the outline: command and
agent definitions routinely carry example documents in fences, and those
examples must not show up as sections of the file that contains them.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from ccm.models import Section

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_FENCE_RE = re.compile(r"^(`{3,}|~{3,})")


def _closes(run: str, stripped: str, opening: str, strict: bool) -> bool:
    if run[0] != opening[0]:
        return False
    if not strict:
        return True
    # Closing fence: at least as long as the opening one, nothing after it.
    return len(run) >= len(opening) and stripped == run


def iter_sections(text: str | None, *, strict_fences: bool = False) -> Iterator[Section]:
    """Yield the document's headings in source order.

    A line whose stripped content starts with three or more backticks or tildes
    opens a fence; only a run of the same character closes it. With
    ``strict_fences`` the closing run must also be at least as long as the
    opening one and carry no info string.
    """
    if not text:
        return

    fence: str | None = None
    # Split on "\n" only so line numbers match what an editor shows.
    for line_number, line in enumerate(text.split("\n"), start=1):
        stripped = line.strip()
        match = _FENCE_RE.match(stripped)
        if match:
            run = match.group(1)
            if fence is None:
                fence = run
            elif _closes(run, stripped, fence, strict_fences):
                fence = None
            continue
        if fence is not None:
            continue

        heading = _HEADING_RE.match(line)
        if not heading:
            continue
        title = heading.group(2).strip()
        if title:
            yield Section(title=title, level=len(heading.group(1)), line_number=line_number)


def extract_outline(text: str | None, *, strict_fences: bool = False) -> list[Section]:
    """Return every heading of ``text`` outside fenced blocks."""
    return list(iter_sections(text, strict_fences=strict_fences))
