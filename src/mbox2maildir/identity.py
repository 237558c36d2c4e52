"""Output file names for messages and attachments."""

from __future__ import annotations

import re
from datetime import datetime

# Maildir info segment: version 2, flag S (seen)
SEEN_INFO = ":2,S"


def sanitize_filename(name: str) -> str:
    """Make an attachment name safe to use as a single path component."""
    name = re.sub(r'[<>:"/\\|?*]', "_", name)
    name = re.sub(r"[\x00-\x1f\x7f]", "", name)
    name = name.strip().lstrip(".")
    if len(name) > 200:
        name = name[:200]
    return name or "attachment"


def message_filename(
    timestamp: datetime,
    sequence: int,
    pid: int,
    tool_tag: str,
    eml_suffix: bool = True,
) -> str:
    """Maildir unique name: ``<secs>.M<seq>P<pid>_<tag>:2,S[.eml]``."""
    name = f"{int(timestamp.timestamp())}.M{sequence}P{pid}_{tool_tag}{SEEN_INFO}"
    if eml_suffix:
        name += ".eml"
    return name


def attachment_filename(
    sequence: int, index: int, original: str, compressed: bool = False
) -> str:
    """``email_<seq:09>_attachment_<index>_<name>[.gz]``."""
    name = f"email_{sequence:09d}_attachment_{index}_{sanitize_filename(original)}"
    if compressed:
        name += ".gz"
    return name
