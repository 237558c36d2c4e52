"""Rebuilding a reduced message body once attachments are taken out."""

from __future__ import annotations

from collections.abc import Callable

from mbox2maildir.models import Attachment

# Maps (attachment index, attachment) to the file name it is stored under
AttachmentNamer = Callable[[int, Attachment], str]


def line_ending(raw: str) -> str:
    """The line ending convention used by a message."""
    return "\r\n" if "\r\n" in raw else "\n"


def attachment_marker(index: int, attachment: Attachment, stored_as: str) -> str:
    """Human-readable line describing one extracted attachment."""
    return (
        f"[Attachment {index}: {attachment.filename} "
        f"({attachment.size} bytes) saved as {stored_as}]"
    )


def rewrite_body(
    header: str,
    text_parts: list[str],
    attachments: list[Attachment],
    boundary: str,
    namer: AttachmentNamer,
    newline: str = "\n",
) -> str:
    """Reassemble headers, kept text parts and an attachment summary part."""
    delimiter = f"--{boundary}"
    pieces = [header]

    for part in text_parts:
        pieces.append(delimiter + newline)
        pieces.append(part)
        if not part.endswith("\n"):
            pieces.append(newline)

    if attachments:
        pieces.append(delimiter + newline)
        pieces.append(f'Content-Type: text/plain; charset="utf-8"{newline}{newline}')
        for index, attachment in enumerate(attachments):
            pieces.append(attachment_marker(index, attachment, namer(index, attachment)))
            pieces.append(newline)

    pieces.append(f"{delimiter}--{newline}")
    return "".join(pieces)
