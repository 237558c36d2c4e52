#!/usr/bin/env python3
"""mbox2maildir: Convert mbox archives into a Maildir tree

Splits each input chunk into messages and writes every message to cur/ under
a Maildir unique name. Attachments are cut out of the message body, replaced
by a short summary part, and stored separately (gzip-compressed unless they
already are in a compressed format).

Usage:
    mbox2maildir INPUT... -o OUTPUT
    mbox2maildir takeout/ -o ~/Maildir --threads 8

Inputs may be chunk files or directories; directories are scanned for
numbered chunk files, processed in ascending numeric order.

Settings can also come from MBOX2MAILDIR_* environment variables or a YAML
file passed with -c.
"""

import argparse
import logging
import sys
from pathlib import Path

from mbox2maildir import __version__
from mbox2maildir.config import ConfigError, load_settings
from mbox2maildir.maildir import MaildirError
from mbox2maildir.mbox import NoInputError, discover_chunks
from mbox2maildir.pipeline import convert

__all__ = ["main"]


def setup_logging(verbose: bool) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    format_str = "%(asctime)s - %(levelname)s - %(message)s" if verbose else "%(message)s"
    logging.basicConfig(level=level, format=format_str)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mbox2maildir",
        description="Convert mbox archives into a Maildir tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("inputs", nargs="+", type=Path, help="Chunk files or directories")
    parser.add_argument(
        "-o", "--output", type=Path, required=True, help="Output Maildir directory"
    )
    parser.add_argument("-c", "--config", type=Path, help="YAML settings file")
    parser.add_argument("--threads", type=int, help="Worker threads (default: CPU count)")
    parser.add_argument(
        "--keep-attachments",
        action="store_const",
        const=False,
        dest="extract_attachments",
        help="Write messages unchanged instead of extracting attachments",
    )
    parser.add_argument(
        "--no-compress",
        action="store_const",
        const=False,
        dest="compress_attachments",
        help="Store attachments uncompressed",
    )
    parser.add_argument(
        "--compress-messages",
        action="store_const",
        const=True,
        help="Gzip message files too",
    )
    parser.add_argument(
        "--attachments-in-cur",
        action="store_const",
        const=False,
        dest="attachments_dir",
        help="Store attachments in cur/ instead of attachments/",
    )
    parser.add_argument(
        "--no-eml-suffix",
        action="store_const",
        const=False,
        dest="eml_suffix",
        help="Do not append .eml to message file names",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--version", action="version", version=f"mbox2maildir {__version__}"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(
            args.config,
            threads=args.threads,
            extract_attachments=args.extract_attachments,
            compress_attachments=args.compress_attachments,
            compress_messages=args.compress_messages,
            attachments_dir=args.attachments_dir,
            eml_suffix=args.eml_suffix,
        )
        chunks = discover_chunks(args.inputs, settings.chunk_pattern)
        logging.info(f"Found {len(chunks)} chunk file(s)")
        convert(chunks, args.output, settings)
    except (ConfigError, MaildirError, NoInputError, OSError) as e:
        logging.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
