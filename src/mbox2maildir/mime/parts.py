"""Splitting a multipart message into parts and reading part headers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import unquote

# Shorter parts are leftovers between adjacent delimiters
MIN_PART_LENGTH = 10

_FILENAME_PARAM = re.compile(
    r"""filename\*?\s*=\s*(?:"([^"]*)"|'([^']*)'|([^;\s]+))""", re.IGNORECASE
)
_RFC2231_PREFIX = re.compile(r"^[\w-]*'[\w-]*'")


@dataclass
class Part:
    """One segment of a multipart body with its recognised headers."""

    text: str
    body: str
    content_type: str = ""
    disposition: str = ""
    transfer_encoding: str = ""
    content_id: str = ""
    filename: str = ""
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class SplitMessage:
    """Top-level header block plus the parts found after it, in document order."""

    header: str
    parts: list[str]


def find_delimiter(text: str, boundary: str, start: int = 0) -> int:
    """Find the next ``--boundary`` delimiter at or after ``start``.

    The delimiter must be followed by ``--``, whitespace or the end of the
    text so that a boundary which prefixes another one does not match inside
    it. Returns -1 when there is none.
    """
    marker = "--" + boundary
    pos = text.find(marker, start)
    while pos != -1:
        after = pos + len(marker)
        if after == len(text) or text[after].isspace() or text.startswith("--", after):
            return pos
        pos = text.find(marker, pos + 1)
    return -1


def _is_closing(text: str, pos: int, boundary: str) -> bool:
    return text.startswith("--", pos + 2 + len(boundary))


def _next_delimiter(text: str, boundaries: list[str], start: int) -> int:
    """Position of the nearest delimiter of any boundary after ``start``."""
    positions = [find_delimiter(text, b, start) for b in boundaries]
    found = [p for p in positions if p != -1]
    return min(found) if found else len(text)


def split_parts(raw: str, boundaries: list[str]) -> SplitMessage:
    """Partition ``raw`` along every known boundary.

    Each part runs from the line after its opening delimiter to the nearest
    following delimiter of any boundary, which keeps nested multiparts from
    swallowing their siblings.
    """
    header_end = _next_delimiter(raw, boundaries, 0)
    header = raw[:header_end]

    starts: set[int] = set()
    for boundary in boundaries:
        pos = find_delimiter(raw, boundary, header_end)
        while pos != -1:
            end_of_marker = pos + 2 + len(boundary)
            if not _is_closing(raw, pos, boundary):
                line_end = raw.find("\n", end_of_marker)
                content_start = len(raw) if line_end == -1 else line_end + 1
                starts.add(content_start)
            pos = find_delimiter(raw, boundary, end_of_marker)

    parts: list[str] = []
    for content_start in sorted(starts):
        content_end = _next_delimiter(raw, boundaries, content_start)
        content = raw[content_start:content_end]
        if len(content) >= MIN_PART_LENGTH:
            parts.append(content)
    return SplitMessage(header=header, parts=parts)


def filename_from_disposition(disposition: str) -> str:
    """Extract the filename parameter of a Content-Disposition value."""
    match = _FILENAME_PARAM.search(disposition)
    if not match:
        return ""
    value = next(g for g in match.groups() if g is not None)
    # RFC 2231 form: charset'language'percent-encoded-name
    if "*" in match.group(0).split("=", 1)[0]:
        prefix = _RFC2231_PREFIX.match(value)
        if prefix:
            value = unquote(value[prefix.end():], encoding="latin-1")
    return value.strip()


def parse_part(text: str) -> Part:
    """Read a part's header block and separate it from its body."""
    lines = text.split("\n")
    headers: dict[str, str] = {}
    current: str | None = None
    body_index = len(lines)

    for i, line in enumerate(lines):
        stripped = line.rstrip("\r")
        if not stripped.strip():
            body_index = i + 1
            break
        if stripped[0] in " \t" and current is not None:
            headers[current] += " " + stripped.strip()
            continue
        name, sep, value = stripped.partition(":")
        if not sep:
            # Not a header line, the body starts here
            body_index = i
            break
        current = name.strip().lower()
        headers[current] = value.strip()

    disposition = headers.get("content-disposition", "")
    return Part(
        text=text,
        body="\n".join(lines[body_index:]),
        content_type=headers.get("content-type", ""),
        disposition=disposition,
        transfer_encoding=headers.get("content-transfer-encoding", ""),
        content_id=headers.get("content-id", ""),
        filename=filename_from_disposition(disposition),
        headers=headers,
    )
