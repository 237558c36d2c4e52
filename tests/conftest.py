"""Shared fixtures for mbox2maildir tests."""

from __future__ import annotations

import base64
from collections.abc import Callable
from pathlib import Path

import pytest

from mbox2maildir.config import Settings

PDF_BYTES = b"%PDF-1.4\n" + bytes(range(256)) * 4 + b"\n%%EOF\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(200))


def b64(data: bytes) -> str:
    return base64.encodebytes(data).decode("ascii")


PLAIN_MESSAGE = """\
From alice@example.com Mon Jan  1 10:00:00 2024
From: Alice <alice@example.com>
To: bob@example.com
Subject: Hello
Date: Mon, 01 Jan 2024 10:00:00 +0000

Just a plain text message.
"""

MIXED_MESSAGE = f"""\
From alice@example.com Tue Jan  2 11:30:00 2024
From: Alice <alice@example.com>
To: bob@example.com
Subject: Report
Date: Tue, 02 Jan 2024 12:30:00 +0100
MIME-Version: 1.0
Content-Type: multipart/mixed; boundary="XYZ"

This is a multi-part message in MIME format.
--XYZ
Content-Type: text/plain; charset="utf-8"

Please find the report attached.
--XYZ
Content-Type: application/pdf; name="report.pdf"
Content-Disposition: attachment; filename="report.pdf"
Content-Transfer-Encoding: base64

{b64(PDF_BYTES)}--XYZ--
"""

NESTED_MESSAGE = f"""\
From bob@example.com Wed Jan  3 08:00:00 2024
From: Bob <bob@example.com>
To: alice@example.com
Subject: Nested
Date: Wed, 03 Jan 2024 08:00:00 +0000
MIME-Version: 1.0
Content-Type: multipart/mixed;
 boundary="outer-boundary"

--outer-boundary
Content-Type: multipart/alternative; boundary="inner-boundary"

--inner-boundary
Content-Type: text/plain; charset="utf-8"

Plain body text.
--inner-boundary
Content-Type: text/html; charset="utf-8"

<p>HTML body text.</p>
--inner-boundary--

--outer-boundary
Content-Type: image/png
Content-Disposition: inline; filename="logo.png"
Content-ID: <logo@example.com>
Content-Transfer-Encoding: base64

{b64(PNG_BYTES)}--outer-boundary--
"""

TEXT_ONLY_MULTIPART = """\
From carol@example.com Thu Jan  4 09:00:00 2024
From: Carol <carol@example.com>
Subject: Alternatives
Date: Thu, 04 Jan 2024 09:00:00 +0000
MIME-Version: 1.0
Content-Type: multipart/alternative; boundary=simple

--simple
Content-Type: text/plain

Plain alternative.
--simple
Content-Type: text/html

<b>HTML alternative.</b>
--simple--
"""


def make_message(subject: str, body: str = "Body text.") -> str:
    """A minimal plain message with the given subject."""
    return (
        "From sender@example.com Mon Jan  1 10:00:00 2024\n"
        "From: sender@example.com\n"
        f"Subject: {subject}\n"
        "Date: Mon, 01 Jan 2024 10:00:00 +0000\n"
        "\n"
        f"{body}\n"
    )


@pytest.fixture
def settings() -> Settings:
    """Default settings, isolated from the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def write_mbox(tmp_path: Path) -> Callable[..., Path]:
    """Write messages into an mbox file under tmp_path."""

    def _write(name: str, *messages: str, directory: Path | None = None) -> Path:
        target = (directory or tmp_path) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes("".join(messages).encode("latin-1"))
        return target

    return _write
