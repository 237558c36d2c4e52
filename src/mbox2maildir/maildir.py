"""Maildir output structure and per-message file writing."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from mbox2maildir.config import Settings
from mbox2maildir.identity import attachment_filename, message_filename
from mbox2maildir.mbox import MBOX_ENCODING
from mbox2maildir.models import Attachment, Message
from mbox2maildir.persist import (
    CompressionError,
    attachment_payload,
    compress,
    should_compress,
)

logger = logging.getLogger(__name__)

MAILDIR_SUBDIRS = ("cur", "new", "tmp")
ATTACHMENTS_SUBDIR = "attachments"


class MaildirError(Exception):
    """The output directory structure could not be created."""

    pass


def ensure_maildir(root: Path, attachments: bool = True) -> None:
    """Create cur/, new/, tmp/ and optionally attachments/ under ``root``."""
    subdirs = list(MAILDIR_SUBDIRS)
    if attachments:
        subdirs.append(ATTACHMENTS_SUBDIR)
    try:
        for name in subdirs:
            (root / name).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MaildirError(f"Cannot create output directory {root}: {e}") from e


@dataclass
class SaveResult:
    """What was written for one message."""

    path: Path
    attachments_written: int = 0
    attachment_failures: int = 0


class MaildirWriter:
    """Writes messages and their attachments into a Maildir tree."""

    def __init__(self, root: Path, settings: Settings, pid: int | None = None):
        self.root = root
        self.settings = settings
        self.pid = os.getpid() if pid is None else pid

    @property
    def attachments_path(self) -> Path:
        if self.settings.attachments_dir:
            return self.root / ATTACHMENTS_SUBDIR
        return self.root / "cur"

    def prepare(self) -> None:
        ensure_maildir(self.root, attachments=self.settings.attachments_dir)

    def attachment_name(self, sequence: int, index: int, attachment: Attachment) -> str:
        """Final on-disk name of an attachment, ``.gz`` included when compressed."""
        compressed = should_compress(attachment, self.settings.compress_attachments)
        return attachment_filename(sequence, index, attachment.filename, compressed)

    def message_name(self, message: Message, sequence: int) -> str:
        name = message_filename(
            message.timestamp,
            sequence,
            self.pid,
            self.settings.tool_tag,
            eml_suffix=self.settings.eml_suffix,
        )
        if self.settings.compress_messages:
            name += ".gz"
        return name

    def save(self, message: Message, sequence: int) -> SaveResult:
        """Write one message, then its attachments.

        OSError from the message file propagates. Attachment failures are
        logged and counted so the remaining attachments are still written.
        """
        content = message.stripped if self.settings.extract_attachments else message.raw
        data = content.encode(MBOX_ENCODING, errors="replace")
        if self.settings.compress_messages:
            data = compress(data, self.settings.compression_level)

        name = self.message_name(message, sequence)
        tmp_path = self.root / "tmp" / name
        path = self.root / "cur" / name
        try:
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

        result = SaveResult(path=path)
        if not self.settings.extract_attachments:
            return result

        for index, attachment in enumerate(message.attachments):
            try:
                self._save_attachment(attachment, sequence, index)
                result.attachments_written += 1
            except (OSError, CompressionError) as e:
                result.attachment_failures += 1
                logger.error(
                    f"Failed to save attachment {index} of message {sequence}: {e}"
                )
        return result

    def _save_attachment(self, attachment: Attachment, sequence: int, index: int) -> Path:
        payload, _ = attachment_payload(
            attachment,
            enabled=self.settings.compress_attachments,
            level=self.settings.compression_level,
        )
        path = self.attachments_path / self.attachment_name(sequence, index, attachment)
        path.write_bytes(payload)
        logger.debug(f"Saved {path.name} ({len(payload)} bytes)")
        return path
