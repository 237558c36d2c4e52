"""Chunk-by-chunk conversion with a fixed pool of worker threads."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from mbox2maildir.config import Settings
from mbox2maildir.dates import message_date
from mbox2maildir.maildir import MaildirWriter
from mbox2maildir.mbox import read_chunk
from mbox2maildir.mime import extract_message
from mbox2maildir.models import Message
from mbox2maildir.persist import CompressionError
from mbox2maildir.sequence import Sequencer

logger = logging.getLogger(__name__)

MIN_WORKERS = 2


@dataclass
class RunStats:
    """Counters for a chunk or a whole run."""

    messages: int = 0
    attachments: int = 0
    failures: int = 0
    attachment_failures: int = 0

    def add(self, other: RunStats) -> None:
        self.messages += other.messages
        self.attachments += other.attachments
        self.failures += other.failures
        self.attachment_failures += other.attachment_failures


def available_cpus() -> int | None:
    """CPUs this process may run on, or None when unknown."""
    if hasattr(os, "process_cpu_count"):
        return os.process_cpu_count()
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0))
    return os.cpu_count()


def worker_count(settings: Settings) -> int:
    """Configured thread count, else available CPUs with a floor of 2."""
    if settings.threads is not None:
        return settings.threads
    return max(available_cpus() or MIN_WORKERS, MIN_WORKERS)


def partition(count: int, workers: int) -> list[range]:
    """Split ``range(count)`` into contiguous near-equal slices.

    The first ``count % workers`` slices get one extra item. Empty slices are
    left out.
    """
    per_worker, remainder = divmod(count, workers)
    ranges: list[range] = []
    start = 0
    for i in range(workers):
        end = start + per_worker + (1 if i < remainder else 0)
        if end > start:
            ranges.append(range(start, end))
        start = end
    return ranges


def process_message(
    raw: str, writer: MaildirWriter, sequencer: Sequencer, stats: RunStats
) -> None:
    """Number, extract and save one raw record.

    Any failure is logged and counted against this record only, so the rest of
    the worker's range is still processed.
    """
    sequence = sequencer.next()
    try:
        if writer.settings.extract_attachments:
            namer = partial(writer.attachment_name, sequence)
            message = extract_message(raw, namer=namer)
        else:
            message = Message(raw=raw, timestamp=message_date(raw), stripped=raw)
        result = writer.save(message, sequence)
    except (OSError, CompressionError) as e:
        logger.error(f"Failed to save message {sequence}: {e}")
        stats.failures += 1
        return
    except Exception:
        logger.exception(f"Failed to process message {sequence}")
        stats.failures += 1
        return

    stats.messages += 1
    stats.attachments += result.attachments_written
    stats.attachment_failures += result.attachment_failures
    logger.debug(f"Saved {result.path.name}")


def _work(
    raws: Sequence[str],
    indices: range,
    writer: MaildirWriter,
    sequencer: Sequencer,
    stats: RunStats,
) -> None:
    for i in indices:
        process_message(raws[i], writer, sequencer, stats)


def process_chunk(
    raws: Sequence[str],
    writer: MaildirWriter,
    sequencer: Sequencer,
    workers: int,
) -> RunStats:
    """Process one chunk's records and wait for every worker to finish."""
    threads: list[threading.Thread] = []
    per_thread: list[RunStats] = []

    for indices in partition(len(raws), workers):
        stats = RunStats()
        per_thread.append(stats)
        thread = threading.Thread(
            target=_work,
            args=(raws, indices, writer, sequencer, stats),
            name=f"worker-{indices.start}",
        )
        threads.append(thread)
        thread.start()

    for thread in threads:
        thread.join()

    total = RunStats()
    for stats in per_thread:
        total.add(stats)
    return total


def convert(chunks: Sequence[Path], output: Path, settings: Settings) -> RunStats:
    """Convert chunk files in order into the Maildir at ``output``."""
    writer = MaildirWriter(output, settings)
    writer.prepare()

    sequencer = Sequencer()
    workers = worker_count(settings)
    total = RunStats()

    for path in chunks:
        raws = read_chunk(path)
        logger.info(f"{path.name}: extracted {len(raws)} message(s)")
        stats = process_chunk(raws, writer, sequencer, workers)
        total.add(stats)

    logger.info(
        f"Wrote {total.messages} message(s) and {total.attachments} attachment(s)"
        f" with {workers} worker(s)"
    )
    if total.failures or total.attachment_failures:
        logger.warning(
            f"{total.failures} message(s) and {total.attachment_failures}"
            " attachment(s) failed"
        )
    return total
