"""Streaming URL deduplication.

This module drives the engine over a stream of lines: each line is trimmed,
normalized and checked against the seen-set, and the first line for every
canonical key is written out in its original spelling. Memory use is the
seen-set only; lines are never buffered beyond the stream's own I/O buffer.
"""

import io
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO

from urldedupe.core.config import DedupeConfig
from urldedupe.core.constants import IO_BUFFER_SIZE
from urldedupe.core.exceptions import (
    InputOpenError,
    InputReadError,
    OutputOpenError,
    OutputWriteError,
)
from urldedupe.engine.normalizer import URLNormalizer
from urldedupe.engine.seen import SeenSet


logger = logging.getLogger(__name__)

STDIO_PATH = "-"


@dataclass
class DedupeStats:
    """Counters for one pass over the input."""
    read: int = 0
    blank: int = 0
    filtered: int = 0
    duplicates: int = 0
    emitted: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary."""
        return {
            "read": self.read,
            "blank": self.blank,
            "filtered": self.filtered,
            "duplicates": self.duplicates,
            "emitted": self.emitted,
        }


class StreamingDeduper:
    """Deduplicate a stream of URL lines, preserving input order.

    Each line moves through one of three outcomes before the next is read:
    filtered out (unparseable or rejected by a filter), duplicate, or
    emitted. Blank lines are skipped and leave the seen-set untouched.

    Example:
        >>> deduper = StreamingDeduper(DedupeConfig())
        >>> list(deduper.iter_unique(["http://a.com/x?b=2", "http://a.com/x?b=3"]))
        ['http://a.com/x?b=2']
    """

    def __init__(self, config: Optional[DedupeConfig] = None, *, seen: Optional[SeenSet] = None):
        """Initialize StreamingDeduper.

        Args:
            config: Normalization options (defaults to DedupeConfig())
            seen: Shared seen-set (creates a new one if None)
        """
        self.config = config or DedupeConfig()
        self.normalizer = URLNormalizer(self.config)
        self.seen = seen if seen is not None else SeenSet()
        self.stats = DedupeStats()

    def classify(self, line: str) -> Optional[str]:
        """Decide whether one line is emitted.

        Args:
            line: Raw input line, with or without its terminator

        Returns:
            The line without its terminator if it is the first of its key,
            otherwise None
        """
        self.stats.read += 1
        raw = line.rstrip("\r\n")
        candidate = raw.strip()

        if not candidate:
            self.stats.blank += 1
            return None

        key, ok = self.normalizer.normalize(candidate)
        if not ok:
            self.stats.filtered += 1
            logger.debug(f"Filtered: {candidate}")
            return None

        if not self.seen.should_include(key):
            self.stats.duplicates += 1
            logger.debug(f"Duplicate of {key}: {candidate}")
            return None

        self.stats.emitted += 1
        return raw

    def iter_unique(self, lines: Iterable[str]) -> Iterator[str]:
        """Lazily yield first-seen lines in input order."""
        for line in lines:
            kept = self.classify(line)
            if kept is not None:
                yield kept

    def run(self, source: TextIO, sink: TextIO) -> DedupeStats:
        """Deduplicate ``source`` into ``sink``.

        Args:
            source: Text stream of newline-delimited URLs
            sink: Text stream receiving surviving lines

        Returns:
            Counters for this pass

        Raises:
            InputReadError: If reading fails; lines already written stay written
            OutputWriteError: If writing fails
        """
        lines = iter(source)
        while True:
            try:
                line = next(lines)
            except StopIteration:
                break
            except (OSError, UnicodeDecodeError) as e:
                self._flush(sink)
                raise InputReadError(f"Failed to read input: {e}") from e

            kept = self.classify(line)
            if kept is None:
                continue

            try:
                sink.write(kept + "\n")
            except OSError as e:
                raise OutputWriteError(f"Failed to write output: {e}") from e

        self._flush(sink)
        logger.info(
            f"Processed {self.stats.read} lines: {self.stats.emitted} unique, "
            f"{self.stats.duplicates} duplicates, {self.stats.filtered} filtered, "
            f"{self.stats.blank} blank"
        )
        return self.stats

    @staticmethod
    def _flush(sink: TextIO) -> None:
        try:
            sink.flush()
        except OSError as e:
            raise OutputWriteError(f"Failed to flush output: {e}") from e


# ============================================================================
# Stream Helpers
# ============================================================================

def _is_stdio(path: Path | str | None) -> bool:
    return path is None or str(path) == STDIO_PATH


def _wrap_stdio(stream: TextIO, *, write: bool) -> TextIO:
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        return stream
    if write:
        stream.flush()
    return io.TextIOWrapper(
        buffer,
        encoding="utf-8",
        errors="surrogateescape",
        newline="\n",
        write_through=False,
    )


@contextmanager
def open_input(path: Path | str | None = None) -> Iterator[TextIO]:
    """Open the input stream (a named file, or stdin for None/"-").

    Undecodable bytes are kept via ``surrogateescape`` so they are written
    back unchanged. Only ``\\n`` ends a line; a lone ``\\r`` stays in the record.

    Raises:
        InputOpenError: If the file cannot be opened
    """
    if _is_stdio(path):
        stream = _wrap_stdio(sys.stdin, write=False)
        try:
            yield stream
        finally:
            if stream is not sys.stdin:
                stream.detach()
        return

    try:
        f = open(
            path,
            "r",
            encoding="utf-8",
            errors="surrogateescape",
            newline="\n",
            buffering=IO_BUFFER_SIZE,
        )
    except OSError as e:
        raise InputOpenError(f"Failed to open input file {path}: {e}") from e

    with f:
        yield f


@contextmanager
def open_output(path: Path | str | None = None) -> Iterator[TextIO]:
    """Open the output stream (a named file, or stdout for None/"-").

    Raises:
        OutputOpenError: If the file cannot be created
    """
    if _is_stdio(path):
        stream = _wrap_stdio(sys.stdout, write=True)
        try:
            yield stream
        finally:
            if stream is not sys.stdout:
                stream.flush()
                stream.detach()
        return

    try:
        f = open(
            path,
            "w",
            encoding="utf-8",
            errors="surrogateescape",
            newline="",
            buffering=IO_BUFFER_SIZE,
        )
    except OSError as e:
        raise OutputOpenError(f"Failed to open output file {path}: {e}") from e

    with f:
        yield f
