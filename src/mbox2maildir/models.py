"""Message and attachment records produced by the extraction engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Attachment:
    """One extracted non-text part.

    Identity is positional: the index within Message.attachments names both
    the marker in the stripped body and the file on disk.
    """

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Message:
    """One mbox record, split into a reduced body and its attachments."""

    raw: str
    timestamp: datetime
    stripped: str
    attachments: list[Attachment] = field(default_factory=list)
    boundaries: list[str] = field(default_factory=list)

    @property
    def is_multipart(self) -> bool:
        return bool(self.boundaries)
