"""Attachment compression decisions."""

from __future__ import annotations

import gzip
import zlib
from pathlib import PurePath

from mbox2maildir.models import Attachment

COMPRESSED_EXTENSIONS = frozenset(
    {
        # images
        "jpg", "jpeg", "png", "gif", "webp", "bmp",
        # archives
        "zip", "rar", "7z", "gz", "bz2", "xz",
        # media
        "mp4", "avi", "mkv", "mp3", "flac", "ogg",
    }
)

COMPRESSED_CONTENT_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/zip",
    "application/x-zip",
    "application/gzip",
)


class CompressionError(Exception):
    """Compressing an attachment failed."""

    pass


def is_precompressed(filename: str, content_type: str) -> bool:
    """Whether the payload is already in a compressed format."""
    extension = PurePath(filename).suffix.lower().lstrip(".")
    if extension in COMPRESSED_EXTENSIONS:
        return True
    ctype = content_type.lower()
    return any(t in ctype for t in COMPRESSED_CONTENT_TYPES)


def should_compress(attachment: Attachment, enabled: bool = True) -> bool:
    return enabled and not is_precompressed(attachment.filename, attachment.content_type)


def compress(data: bytes, level: int = 1) -> bytes:
    """Gzip ``data`` with a reproducible header."""
    try:
        return gzip.compress(data, compresslevel=level, mtime=0)
    except (zlib.error, ValueError, OSError) as e:
        raise CompressionError(str(e)) from e


def attachment_payload(
    attachment: Attachment, enabled: bool = True, level: int = 1
) -> tuple[bytes, bool]:
    """Bytes to store for ``attachment`` and whether they were compressed."""
    if not should_compress(attachment, enabled):
        return attachment.data, False
    return compress(attachment.data, level), True
