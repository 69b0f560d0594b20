"""
Random-access CSV reader implementing ``AbstractSource``.

Handles:
- Files of any size: memory use does not grow with the file. The scan keeps
  only the row count and the longest line length.
- ``seek(n)`` to any data row, ``rewind()``, repeated iteration and an O(1)
  ``count()``.
- Optional header row anywhere in the file. Records above it are ignored,
  and duplicate names are made unique.
- UTF-8 with or without BOM, and LF or CRLF line endings.

The file is opened and scanned in the constructor and stays open until
``close()`` (or the end of a ``with`` block).  If the scan fails, the handle is
closed before the error propagates.

Not thread-safe: one instance shares a single file cursor across all calls.
Use one reader per thread.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from csvseek.configs.config import HEADER_ROW_NONE, ReaderConfig
from csvseek.configs.csv_dialect import CSV, PSV, TSV, Dialect
from csvseek.configs.exceptions import (
    OutOfRangeError,
    ReaderClosedError,
    SourceReadError,
)
from csvseek.discovery.base import AbstractSource
from csvseek.discovery.cursor import CursorReconciler
from csvseek.discovery.scanner import scan
from csvseek.transformers.row_generator import Row, materialize
from csvseek.utils.identifiers import resolve_headers
from csvseek.utils.validation import validate_header_row, validate_position

logger = logging.getLogger(__name__)


class RandomAccessCsvReader(AbstractSource):
    """
    Seekable, rewindable reader over one delimited-text file.

    Args:
        path:       Path to the file.
        header_row: 0-based row holding the header. ``None`` or
                    ``HEADER_ROW_NONE`` means no header, and rows are lists.
                    Defaults to 0.
        delimiter:  Field delimiter (one character).
        enclosure:  Field enclosure character (one character).
        escape:     Escape character (one character, ``""`` for none).
        config:     Reader settings; defaults to ``ReaderConfig()``.

    Raises:
        SourceReadError: If the file cannot be opened or scanned.
        DialectError:    If a dialect character or ``header_row`` is invalid.
    """

    def __init__(
        self,
        path: Path | str,
        header_row: int | None = 0,
        delimiter: str = CSV.delimiter,
        enclosure: str = CSV.enclosure,
        escape: str = CSV.escape,
        *,
        config: ReaderConfig | None = None,
    ) -> None:
        super().__init__(path)
        self._file = None
        self.config = config if config is not None else ReaderConfig()
        self.header_row = None if header_row == HEADER_ROW_NONE else header_row
        validate_header_row(self.header_row)
        self.dialect = Dialect(delimiter, enclosure, escape)

        self._headers: list[str] = []
        self._cursor: CursorReconciler | None = None
        self._position = 0
        self._current: Row | None = None

        self.open()

    # ── AbstractSource interface ─────────────────────────────────────────

    def open(self) -> None:
        """
        Open the file, scan it and resolve headers.

        Raises:
            SourceReadError: If the file cannot be opened or read.
        """
        if not self.closed:
            return

        try:
            self._file = open(self.path, "rb")  # noqa: SIM115
        except OSError as e:
            raise SourceReadError(
                f"Unable to open file '{self.path}': {e}",
                source_path=str(self.path),
            ) from e

        try:
            result = scan(
                self._file,
                self.header_row,
                self.dialect,
                encoding=self.config.line_encoding,
                skip_bom=self.config.skips_bom,
                line_margin=self.config.line_margin,
                source_path=str(self.path),
            )
            self._cursor = CursorReconciler(
                self._file,
                content_offset=result.content_offset,
                max_line_length=result.max_line_length,
                row_count=result.row_count,
                dialect=self.dialect,
                encoding=self.config.line_encoding,
                strict=self.config.strict,
                source_path=str(self.path),
            )
        except BaseException:
            self.close()
            raise

        self._headers = resolve_headers(result.raw_headers)
        self._position = 0
        self._current = None
        logger.debug(
            "Opened %s: %d rows, %d headers",
            self.path.name,
            result.row_count,
            len(self._headers),
        )

    @property
    def closed(self) -> bool:
        return self._file is None or self._file.closed

    def headers(self) -> list[str]:
        """Return the resolved header names (empty for positional rows)."""
        return list(self._headers)

    def rows(self) -> Iterator[Row]:
        """Yield every data row from the top.  Rewinds on each call."""
        for _, row in self.items():
            yield row

    def close(self) -> None:
        """Close the underlying file handle.  Safe to call more than once."""
        if self._file is not None:
            self._file.close()
            self._file = None

    # ── navigation ───────────────────────────────────────────────────────

    def rewind(self) -> None:
        """Move back to the first data row and drop the cached row."""
        self._require_open()
        self._cursor.reset()
        self._position = 0
        self._current = None

    def seek(self, position: int) -> None:
        """
        Move to data row ``position`` and cache it.

        Raises:
            OutOfRangeError: If the row does not exist (or ``position`` is
                             negative).  The current position is unchanged.
            TypeError:       If ``position`` is not an ``int``.
        """
        self._require_open()
        validate_position(position, self._cursor.row_count)

        fields = self._cursor.fetch(position)
        if fields is None:
            if position == self._position:
                # Cursor now sits past this position; the old row is stale.
                self._current = None
            raise OutOfRangeError(
                f"Invalid seek position ({position})",
                position=position,
                row_count=self._cursor.row_count,
            )
        self._current = materialize(fields, self._headers)
        self._position = position

    def next(self) -> None:
        """Advance one row.  Nothing is read until ``current``/``valid``."""
        self._position += 1

    def current(self) -> Row | None:
        """
        Return the row at the current position.

        A blank line gives an empty row.  Past the last row this returns
        ``None``, which is not an error.
        """
        self._require_open()
        if self._cursor.physical_cursor != self._position + 1:
            fields = self._cursor.fetch(self._position)
            self._current = None if fields is None else materialize(fields, self._headers)
        return self._current

    def valid(self) -> bool:
        """True while the current position holds a row."""
        return self.current() is not None

    def key(self) -> int:
        """Return the current 0-based row position."""
        return self._position

    def count(self) -> int:
        """
        Number of data rows below the header.

        Set by the scan.  Grows if a later read finds rows past the scanned
        end.
        """
        return self._cursor.row_count

    def items(self) -> Iterator[tuple[int, Row]]:
        """Yield ``(position, row)`` pairs from the top.  Rewinds first."""
        self.rewind()
        while self.valid():
            yield self.key(), self.current()
            self.next()

    # ── dunder protocol ──────────────────────────────────────────────────

    def __iter__(self) -> Iterator[Row]:
        return self.rows()

    def __len__(self) -> int:
        return self.count()

    def __getitem__(self, position: int) -> Row:
        if isinstance(position, int) and not isinstance(position, bool) and position < 0:
            position += self.count()
        self.seek(position)
        return self._current

    def __del__(self) -> None:
        file = getattr(self, "_file", None)
        if file is not None and not file.closed:
            file.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"position={self._position}"
        return f"{type(self).__name__}({str(self.path)!r}, {state})"

    # ── internal helpers ─────────────────────────────────────────────────

    def _require_open(self) -> None:
        if self.closed:
            raise ReaderClosedError(f"Reader for {self.path} is closed.")


class TsvReader(RandomAccessCsvReader):
    """Tab-separated variant of ``RandomAccessCsvReader``."""

    def __init__(
        self,
        path: Path | str,
        header_row: int | None = 0,
        delimiter: str = TSV.delimiter,
        enclosure: str = TSV.enclosure,
        escape: str = TSV.escape,
        *,
        config: ReaderConfig | None = None,
    ) -> None:
        super().__init__(path, header_row, delimiter, enclosure, escape, config=config)


class PsvReader(RandomAccessCsvReader):
    """Pipe-separated variant of ``RandomAccessCsvReader``."""

    def __init__(
        self,
        path: Path | str,
        header_row: int | None = 0,
        delimiter: str = PSV.delimiter,
        enclosure: str = PSV.enclosure,
        escape: str = PSV.escape,
        *,
        config: ReaderConfig | None = None,
    ) -> None:
        super().__init__(path, header_row, delimiter, enclosure, escape, config=config)
