"""
Physical-cursor reconciliation over a forward-only tokenizer.

The tokenizer can only move forward, one record at a time.  ``CursorReconciler``
turns that into access by row index without storing per-row byte offsets:

- It remembers only how many records have been consumed since the content
  offset (the *physical cursor*).
- A request behind the cursor rewinds to the content offset once, then
  fast-forwards.
- A request ahead of the cursor only fast-forwards.
- Fast-forwarding uses ``skip_one``, so skipped records are never split into
  fields.

Sequential reads cost one record each.  Only backward jumps pay the
re-read cost.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from csvseek.configs.csv_dialect import Dialect
from csvseek.configs.exceptions import MalformedRowError, SourceReadError
from csvseek.discovery.tokenizer import parse_one, skip_one

logger = logging.getLogger(__name__)


class CursorReconciler:
    """
    Fetches raw records by 0-based data row index.

    Args:
        stream:          Seekable binary stream, owned by the caller.
        content_offset:  Byte offset of the first data record.
        max_line_length: Read-buffer size for ``parse_one``.
        row_count:       Row count established by the scan.
        dialect:         Field-parsing settings.
        encoding:        Line encoding.
        strict:          Strict ``csv`` parsing.
        source_path:     File path, for error reporting.
    """

    def __init__(
        self,
        stream: BinaryIO,
        content_offset: int,
        max_line_length: int,
        row_count: int,
        dialect: Dialect,
        encoding: str = "utf-8",
        strict: bool = False,
        source_path: str | None = None,
    ) -> None:
        self._stream = stream
        self._content_offset = content_offset
        self._max_line_length = max_line_length
        self._row_count = row_count
        self._dialect = dialect
        self._encoding = encoding
        self._strict = strict
        self._source_path = source_path
        self.reset()

    @property
    def physical_cursor(self) -> int:
        """Number of records consumed since the content offset."""
        return self._physical

    @property
    def row_count(self) -> int:
        """Known row count; only ever grows."""
        return self._row_count

    def reset(self) -> None:
        """Reposition the stream at the content offset."""
        try:
            self._stream.seek(self._content_offset)
        except OSError as e:
            raise SourceReadError(
                f"Cannot rewind: {e}", source_path=self._source_path
            ) from e
        self._physical = 0
        self._desynced = False

    def fetch(self, position: int) -> list[str] | None:
        """
        Parse the record at ``position``.

        After this call the physical cursor is ``position + 1``, whether or
        not a record was found.

        Args:
            position: 0-based data row index (must be >= 0).

        Returns:
            The record's fields (``[]`` for a blank line), or ``None`` if the
            file ends before ``position``.

        Raises:
            SourceReadError:   On I/O failure.
            MalformedRowError: If the record cannot be parsed.
        """
        if self._desynced or self._physical > position:
            logger.debug(
                "Rewinding %s: cursor=%d, target=%d",
                self._source_path or "stream",
                self._physical,
                position,
            )
            self.reset()

        try:
            while self._physical < position:
                skip_one(self._stream, self._dialect, self._encoding)
                self._physical += 1

            fields = parse_one(
                self._stream,
                self._max_line_length,
                self._dialect,
                self._encoding,
                self._strict,
            )
        except MalformedRowError as e:
            # Stream position no longer matches the cursor.
            self._desynced = True
            e.source_path = self._source_path
            e.row_number = position
            raise
        except OSError as e:
            self._desynced = True
            raise SourceReadError(
                f"Cannot read row {position}: {e}", source_path=self._source_path
            ) from e
        self._physical += 1

        if fields is None:
            return None

        if position + 1 > self._row_count:
            logger.warning(
                "Row count for %s grew from %d to %d after scan",
                self._source_path or "stream",
                self._row_count,
                position + 1,
            )
            self._row_count = position + 1

        return fields
