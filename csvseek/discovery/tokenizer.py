"""
Forward-only record tokenizer over a binary stream.

Two primitives, both of which consume exactly one record from the current
stream position and leave the stream at the start of the next one:

- ``parse_one`` splits the record into fields with the stdlib ``csv`` module.
- ``skip_one`` only finds the record's end.  It never splits fields; it tracks
  just enough enclosure state to agree with ``parse_one`` on where a record
  spanning several physical lines (a newline inside an enclosed field) ends.

Neither primitive can move backwards.  Seeking is the caller's job.

Handles:
- LF and CRLF line endings.
- Blank lines, returned as an empty field list (not an error).
- Lines longer than ``max_bytes``: read in further chunks, never truncated.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from typing import BinaryIO

from csvseek.configs.csv_dialect import Dialect, SeekDialect
from csvseek.configs.exceptions import MalformedRowError

logger = logging.getLogger(__name__)

# Enclosure-tracking states, mirroring the csv module's parser.
_START_FIELD = 0
_IN_FIELD = 1
_IN_ENCLOSED = 2
_ENCLOSURE_IN_ENCLOSED = 3


@dataclass(frozen=True, slots=True)
class Consumed:
    """
    Result of ``skip_one``.

    Attributes:
        nbytes:       Total bytes consumed for the record.
        longest_line: Longest physical line in the record, in bytes
                      (including its terminator).
    """

    nbytes: int
    longest_line: int


def parse_one(
    stream: BinaryIO,
    max_bytes: int,
    dialect: Dialect,
    encoding: str = "utf-8",
    strict: bool = False,
) -> list[str] | None:
    """
    Parse exactly one record at the current stream position.

    Args:
        stream:    Readable binary stream.
        max_bytes: Read-buffer size per physical line; ``<= 0`` means unbounded.
        dialect:   Field-parsing settings.
        encoding:  Encoding used to decode each line.
        strict:    Raise on malformed records instead of parsing leniently.

    Returns:
        The record's fields, ``[]`` for a blank line, or ``None`` at end of stream.

    Raises:
        MalformedRowError: If the record cannot be decoded, or is malformed
                           while ``strict`` is set.
    """
    record = _next_record(stream, dialect, encoding, max_bytes)
    if record is None:
        return None

    lines, _, _ = record
    reader = csv.reader(lines, SeekDialect, **dialect.csv_kwargs(strict=strict))
    try:
        return next(reader, [])
    except csv.Error as e:
        raise MalformedRowError(f"Malformed record: {e}") from e


def skip_one(
    stream: BinaryIO,
    dialect: Dialect,
    encoding: str = "utf-8",
) -> Consumed | None:
    """
    Advance past one record without splitting it into fields.

    Returns:
        ``Consumed`` describing what was read, or ``None`` at end of stream.
    """
    record = _next_record(stream, dialect, encoding)
    if record is None:
        return None
    _, nbytes, longest = record
    return Consumed(nbytes=nbytes, longest_line=longest)


# ── internals ────────────────────────────────────────────────────────────────

def _next_record(
    stream: BinaryIO,
    dialect: Dialect,
    encoding: str,
    max_bytes: int = -1,
) -> tuple[list[str], int, int] | None:
    """Read the physical lines of one record as ``(lines, nbytes, longest_line)``."""
    raw = _read_line(stream, max_bytes)
    if not raw:
        return None

    lines: list[str] = []
    nbytes = 0
    longest = 0
    enclosed = False
    while raw:
        text = _decode(raw, encoding)
        lines.append(text)
        nbytes += len(raw)
        longest = max(longest, len(raw))
        enclosed = _ends_enclosed(text, dialect, enclosed)
        if not enclosed:
            break
        raw = _read_line(stream, max_bytes)
    return lines, nbytes, longest


def _read_line(stream: BinaryIO, max_bytes: int) -> bytes:
    """Read one physical line, continuing past ``max_bytes`` if needed."""
    limit = max_bytes if max_bytes and max_bytes > 0 else -1
    line = stream.readline(limit)
    if limit < 0 or not line or line.endswith(b"\n") or len(line) < limit:
        return line

    parts = [line]
    while True:
        chunk = stream.readline(limit)
        if not chunk:
            break
        parts.append(chunk)
        if chunk.endswith(b"\n"):
            break
    line = b"".join(parts)
    logger.debug("Line of %d bytes exceeded read buffer of %d bytes", len(line), limit)
    return line


def _decode(raw: bytes, encoding: str) -> str:
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError as e:
        raise MalformedRowError(f"Cannot decode line as {encoding}: {e}") from e


def _ends_enclosed(text: str, dialect: Dialect, enclosed: bool) -> bool:
    """
    Return True if an enclosed field is still open at the end of ``text``.

    ``enclosed`` is the state carried over from the previous physical line of
    the same record.
    """
    enclosure = dialect.enclosure
    if enclosure not in text:
        return enclosed

    delimiter = dialect.delimiter
    escape = dialect.active_escape
    state = _IN_ENCLOSED if enclosed else _START_FIELD
    escaped = False
    for ch in text.rstrip("\r\n"):
        if escaped:
            escaped = False
            continue
        if escape and ch == escape and state != _ENCLOSURE_IN_ENCLOSED:
            escaped = True
            if state == _START_FIELD:
                state = _IN_FIELD
            continue
        if state == _START_FIELD:
            if ch == enclosure:
                state = _IN_ENCLOSED
            elif ch != delimiter:
                state = _IN_FIELD
        elif state == _IN_FIELD:
            if ch == delimiter:
                state = _START_FIELD
        elif state == _IN_ENCLOSED:
            if ch == enclosure:
                state = _ENCLOSURE_IN_ENCLOSED
        else:
            if ch == enclosure:
                state = _IN_ENCLOSED
            elif ch == delimiter:
                state = _START_FIELD
            else:
                state = _IN_FIELD
    return state == _IN_ENCLOSED
