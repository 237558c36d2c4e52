"""Turning one raw mbox record into a Message."""

from __future__ import annotations

import logging

from mbox2maildir.dates import message_date
from mbox2maildir.mime.boundaries import resolve_boundaries
from mbox2maildir.mime.classify import attachment_rule, is_inline_text
from mbox2maildir.mime.parts import parse_part, split_parts
from mbox2maildir.mime.rewrite import AttachmentNamer, line_ending, rewrite_body
from mbox2maildir.mime.transcode import decode_body
from mbox2maildir.models import Attachment, Message

logger = logging.getLogger(__name__)


def _keep_filename(index: int, attachment: Attachment) -> str:
    return attachment.filename


def placeholder_filename(index: int) -> str:
    """Name given to an attachment whose headers carry no filename."""
    return f"attachment_{index}.bin"


def extract_message(raw: str, namer: AttachmentNamer | None = None) -> Message:
    """Parse a raw record into its timestamp, stripped body and attachments.

    ``namer`` supplies the stored file name shown in the attachment summary.
    Non-multipart messages come back with ``stripped`` equal to ``raw``.
    """
    timestamp = message_date(raw)
    boundaries = resolve_boundaries(raw)
    if not boundaries:
        return Message(raw=raw, timestamp=timestamp, stripped=raw)

    split = split_parts(raw, boundaries)
    if len(split.header) == len(raw):
        # Declared multipart but no delimiter in the body
        return Message(raw=raw, timestamp=timestamp, stripped=raw, boundaries=boundaries)

    text_parts: list[str] = []
    attachments: list[Attachment] = []

    for text in split.parts:
        part = parse_part(text)
        rule = attachment_rule(part)
        if rule is not None:
            data = decode_body(part.body, part.transfer_encoding)
            if not data:
                logger.debug(f"Skipping empty attachment part (rule: {rule})")
                continue
            attachments.append(
                Attachment(
                    filename=part.filename or placeholder_filename(len(attachments)),
                    content_type=part.content_type,
                    data=data,
                )
            )
        elif is_inline_text(part):
            text_parts.append(text)
        else:
            logger.debug("Dropping part without a text content type")

    stripped = rewrite_body(
        split.header,
        text_parts,
        attachments,
        boundaries[0],
        namer or _keep_filename,
        newline=line_ending(raw),
    )
    return Message(
        raw=raw,
        timestamp=timestamp,
        stripped=stripped,
        attachments=attachments,
        boundaries=boundaries,
    )
