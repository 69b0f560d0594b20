"""
One-time forward scan of a delimited-text file.

Run once at reader construction.  In a single pass it:
- skips the records above the header row without parsing them,
- parses the header record (if any),
- counts the data records and measures the longest physical data line.

Afterwards the stream is left at the content offset (the first data record).
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from typing import BinaryIO

from csvseek.configs.config import MIN_LINE_MARGIN
from csvseek.configs.csv_dialect import Dialect
from csvseek.configs.exceptions import SourceReadError
from csvseek.discovery.tokenizer import parse_one, skip_one

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """
    Facts established by ``scan``.

    Attributes:
        raw_headers:     Header fields as read (before deduplication); empty
                         if there is no header or it is blank.
        content_offset:  Byte offset of the first data record.
        row_count:       Number of data records below the header.
        max_line_length: Longest physical data line plus the line margin.
    """

    raw_headers: list[str]
    content_offset: int
    row_count: int
    max_line_length: int


def scan(
    stream: BinaryIO,
    header_row: int | None,
    dialect: Dialect,
    *,
    encoding: str = "utf-8",
    skip_bom: bool = True,
    line_margin: int = MIN_LINE_MARGIN,
    source_path: str | None = None,
) -> ScanResult:
    """
    Scan ``stream`` from the beginning.

    Args:
        stream:      Seekable binary stream positioned anywhere.
        header_row:  0-based header record index, or ``None`` for no header.
        dialect:     Field-parsing settings (used for the header and for
                     finding record boundaries).
        encoding:    Encoding used to decode lines.
        skip_bom:    Drop a leading UTF-8 byte-order mark.
        line_margin: Bytes added to the longest line (>= MIN_LINE_MARGIN).
        source_path: File path, for error reporting.

    Returns:
        ``ScanResult`` describing the file.

    Raises:
        SourceReadError: If the stream cannot be read or repositioned.
    """
    try:
        stream.seek(0)
        start = 0
        if skip_bom and stream.read(len(codecs.BOM_UTF8)) == codecs.BOM_UTF8:
            start = len(codecs.BOM_UTF8)
        stream.seek(start)

        raw_headers: list[str] = []
        if header_row is not None:
            for row in range(header_row + 1):
                if row == header_row:
                    raw_headers = parse_one(stream, -1, dialect, encoding) or []
                elif skip_one(stream, dialect, encoding) is None:
                    break

        content_offset = stream.tell()

        row_count = 0
        longest = 0
        while True:
            consumed = skip_one(stream, dialect, encoding)
            if consumed is None:
                break
            row_count += 1
            if consumed.longest_line > longest:
                longest = consumed.longest_line

        stream.seek(content_offset)
    except OSError as e:
        raise SourceReadError(
            f"Cannot scan {source_path or 'stream'}: {e}",
            source_path=source_path,
        ) from e

    max_line_length = longest + max(line_margin, MIN_LINE_MARGIN)
    logger.debug(
        "Scanned %s: rows=%d, max_line_length=%d, content_offset=%d",
        source_path or "stream",
        row_count,
        max_line_length,
        content_offset,
    )
    return ScanResult(
        raw_headers=raw_headers,
        content_offset=content_offset,
        row_count=row_count,
        max_line_length=max_line_length,
    )
