"""Tolerant base64 decoding.

Anything outside the base64 alphabet (line breaks, stray whitespace,
garbage) is skipped instead of rejected, and a trailing group that is too
short to carry a byte is dropped.
"""

from __future__ import annotations

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

PAD = 64
INVALID = -1

_TABLE = [INVALID] * 256
for _i, _c in enumerate(ALPHABET):
    _TABLE[ord(_c)] = _i
_TABLE[ord("=")] = PAD


def decode_base64(text: str | bytes) -> bytes:
    """Decode base64 content, ignoring characters outside the alphabet."""
    if isinstance(text, str):
        text = text.encode("latin-1", errors="ignore")

    values = [v for v in (_TABLE[b] for b in text) if v != INVALID]
    out = bytearray()

    for i in range(0, len(values), 4):
        group = values[i:i + 4]
        if len(group) < 2:
            break
        # Everything from the first pad on is padding
        if PAD in group:
            group = group[:group.index(PAD)]
            if len(group) < 2:
                break
        group = group + [0] * (4 - len(group))
        chunk = (group[0] << 18) | (group[1] << 12) | (group[2] << 6) | group[3]
        data = chunk.to_bytes(3, "big")
        out += data[:_output_length(values[i:i + 4])]

    return bytes(out)


def _output_length(group: list[int]) -> int:
    """Number of bytes a 4-character group carries."""
    significant = len(group)
    if PAD in group:
        significant = group.index(PAD)
    return max(significant - 1, 0)


def decode_body(body: str, transfer_encoding: str) -> bytes:
    """Decode a part body according to its Content-Transfer-Encoding.

    Only base64 is decoded, every other encoding passes through as raw bytes
    with the line break that precedes the next delimiter removed.
    """
    if "base64" in transfer_encoding.lower():
        return decode_base64(body)
    if body.endswith("\r\n"):
        body = body[:-2]
    elif body.endswith("\n"):
        body = body[:-1]
    return body.encode("latin-1")
