"""Attachment classification rules.

Rules are evaluated top to bottom and the first match wins. Each rule is a
name and a predicate over a parsed Part, so the policy can be edited or
tested one rule at a time.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from mbox2maildir.mime.parts import Part

INLINE_TYPES = ("text/plain", "text/html")

# Bodies at or below this length are not extracted on base64 encoding alone
BASE64_MIN_BODY = 100


@dataclass(frozen=True)
class Rule:
    """A named attachment predicate."""

    name: str
    matches: Callable[[Part], bool]


def _non_inline_type(part: Part) -> bool:
    ctype = part.content_type.lower()
    if not ctype:
        return False
    return not (ctype.startswith(INLINE_TYPES) or ctype.startswith("multipart/"))


RULES: list[Rule] = [
    Rule("disposition", lambda p: "attachment" in p.disposition.lower()),
    Rule("content-id", lambda p: bool(p.content_id)),
    Rule("image", lambda p: "image/" in p.content_type.lower()),
    Rule(
        "base64-body",
        lambda p: "base64" in p.transfer_encoding.lower() and len(p.body) > BASE64_MIN_BODY,
    ),
    Rule("non-inline-type", _non_inline_type),
    Rule(
        "binary-type",
        lambda p: any(t in p.content_type.lower() for t in ("application/", "video/", "audio/")),
    ),
    Rule("filename", lambda p: bool(p.filename)),
]


def attachment_rule(part: Part, rules: list[Rule] = RULES) -> str | None:
    """Return the name of the first rule that marks ``part`` as an attachment."""
    for rule in rules:
        if rule.matches(part):
            return rule.name
    return None


def is_inline_text(part: Part) -> bool:
    """Whether a non-attachment part is kept in the rewritten body."""
    ctype = part.content_type.lower()
    return "text/" in ctype or "multipart" in ctype
