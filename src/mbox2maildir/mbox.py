"""Mbox chunk discovery and record splitting."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

# latin-1 maps every byte to one code point, so decode/encode is lossless
MBOX_ENCODING = "latin-1"

ENVELOPE = "From "


class NoInputError(Exception):
    """No input chunk files were found."""

    pass


def split_mbox(lines: Iterable[str]) -> list[str]:
    """Split mbox lines into raw records, each starting with its envelope line.

    Text ahead of the first envelope line is dropped.
    """
    records: list[str] = []
    current: list[str] = []
    dropped = 0

    for line in lines:
        if not line.endswith("\n"):
            line += "\n"
        if line.startswith(ENVELOPE):
            if current:
                records.append("".join(current))
            current = [line]
        elif current:
            current.append(line)
        else:
            dropped += 1

    if current:
        records.append("".join(current))

    if dropped:
        logger.warning(f"Dropped {dropped} line(s) before the first envelope line")
    return records


def read_chunk(path: Path) -> list[str]:
    """Read one chunk file and split it into raw records."""
    with open(path, encoding=MBOX_ENCODING, newline="\n") as f:
        return split_mbox(f)


def discover_chunks(inputs: Sequence[Path], pattern: str) -> list[Path]:
    """Resolve input paths into an ordered list of chunk files.

    Files are taken as given. Directories contribute every file whose name
    matches ``pattern``, ordered by the integer in its first capture group.
    """
    regex = re.compile(pattern)
    chunks: list[Path] = []

    for path in inputs:
        if path.is_dir():
            numbered: list[tuple[int, Path]] = []
            for child in path.iterdir():
                if not child.is_file():
                    continue
                match = regex.match(child.name)
                if match:
                    numbered.append((int(match.group(1)), child))
            numbered.sort(key=lambda item: (item[0], item[1].name))
            chunks.extend(p for _, p in numbered)
        elif path.is_file():
            chunks.append(path)
        else:
            logger.warning(f"Input not found: {path}")

    if not chunks:
        raise NoInputError(
            "No input chunk files found in: " + ", ".join(str(p) for p in inputs)
        )
    return chunks
