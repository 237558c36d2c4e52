"""Multipart boundary discovery.

Boundaries are collected from the top-level header block and from every
nested multipart header anywhere in the message, so parts of inner
multiparts can be split as well.
"""

from __future__ import annotations

import re

# Nested multipart headers are searched this far for their boundary parameter
NESTED_SEARCH_LIMIT = 500

_BOUNDARY_PARAM = re.compile(r"boundary\s*=\s*", re.IGNORECASE)
_BLANK_LINE = re.compile(r"\r?\n\r?\n")


def _is_multipart_header(line: str) -> bool:
    lowered = line.lower()
    return "content-type:" in lowered and "multipart" in lowered


def _boundary_value(text: str) -> str | None:
    """Extract the boundary parameter value from header text."""
    match = _BOUNDARY_PARAM.search(text)
    if not match:
        return None
    rest = text[match.end():]
    if rest.startswith('"'):
        end = rest.find('"', 1)
        value = rest[1:end] if end != -1 else rest[1:]
    else:
        value = re.split(r"[;\s]", rest, maxsplit=1)[0]
    value = "".join(value.split()).strip("\"'").rstrip(";")
    return value or None


def _header_boundary(raw: str) -> str | None:
    """Find the boundary declared in the top-level header block."""
    folded: str | None = None
    for line in raw.split("\n"):
        if not line.strip():
            break
        if folded is None:
            if _is_multipart_header(line):
                folded = line
        else:
            folded += " " + line.strip()
        if folded is not None and _BOUNDARY_PARAM.search(folded):
            return _boundary_value(folded)
    if folded is not None:
        return _boundary_value(folded)
    return None


def _nested_boundaries(raw: str) -> list[str]:
    """Find boundaries declared by any multipart header in the whole message."""
    found: list[str] = []
    offset = 0
    for line in raw.split("\n"):
        if _is_multipart_header(line):
            limit = offset + NESTED_SEARCH_LIMIT
            blank = _BLANK_LINE.search(raw, offset, limit)
            window = raw[offset:blank.start() if blank else limit]
            value = _boundary_value(window)
            if value:
                found.append(value)
        offset += len(line) + 1
    return found


def resolve_boundaries(raw: str) -> list[str]:
    """Return every distinct boundary token in ``raw``, in discovery order.

    An empty list means the message is not multipart.
    """
    boundaries: list[str] = []
    top = _header_boundary(raw)
    if top:
        boundaries.append(top)
    for value in _nested_boundaries(raw):
        if value not in boundaries:
            boundaries.append(value)
    return boundaries
