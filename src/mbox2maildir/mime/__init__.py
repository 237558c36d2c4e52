"""Delimiter-based MIME extraction.

``extract_message`` is the only entry point the rest of the tool uses, so the
boundary scanning and part splitting behind it can be replaced without
touching classification or persistence.
"""

from mbox2maildir.mime.boundaries import resolve_boundaries
from mbox2maildir.mime.classify import RULES, Rule, attachment_rule, is_inline_text
from mbox2maildir.mime.extract import extract_message, placeholder_filename
from mbox2maildir.mime.parts import Part, parse_part, split_parts
from mbox2maildir.mime.transcode import decode_base64, decode_body

__all__ = [
    "RULES",
    "Part",
    "Rule",
    "attachment_rule",
    "decode_base64",
    "decode_body",
    "extract_message",
    "is_inline_text",
    "parse_part",
    "placeholder_filename",
    "resolve_boundaries",
    "split_parts",
]
