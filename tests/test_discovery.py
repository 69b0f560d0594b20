"""
Discovery layer: test_discovery.py

tokenizer.py:
  - parse_one returns fields, [] for a blank line, None at end of stream
  - parse_one reads a line longer than max_bytes completely
  - Multi-line enclosed fields are one record for parse_one and skip_one
  - skip_one reports bytes consumed and longest physical line
  - Escape character inside and outside enclosures
  - Escape equal to the enclosure falls back to doubling only
  - Strict mode / undecodable bytes raise MalformedRowError

scanner.py:
  - Header captured, content offset after header, row count, max line length
  - No header: offset 0, every record counted
  - Rows above the header row are skipped
  - Leading BOM skipped when requested
  - Header row past end of file gives no headers and zero rows
  - Stream left at the content offset
  - OSError wrapped in SourceReadError

cursor.py:
  - Forward fetch fast-forwards; backward fetch rewinds
  - Physical cursor is position + 1 after every fetch
  - Fetch past end returns None and never shrinks the count
  - Count grows when a fetch finds rows past the known count
  - Malformed record desynchronizes; next fetch rewinds and recovers
"""

from __future__ import annotations

import io

import pytest

from csvseek.configs.csv_dialect import CSV, Dialect
from csvseek.configs.exceptions import MalformedRowError, SourceReadError
from csvseek.discovery.cursor import CursorReconciler
from csvseek.discovery.scanner import scan
from csvseek.discovery.tokenizer import Consumed, parse_one, skip_one


class FailingStream(io.BytesIO):
    def readline(self, size=-1):
        raise OSError("disk on fire")


# ============================================================================
# tokenizer.py
# ============================================================================

class TestParseOne:
    def test_fields_blank_and_end(self):
        stream = io.BytesIO(b"a,b\n\nc\n")
        assert parse_one(stream, 16, CSV) == ["a", "b"]
        assert parse_one(stream, 16, CSV) == []
        assert parse_one(stream, 16, CSV) == ["c"]
        assert parse_one(stream, 16, CSV) is None

    def test_long_line_not_truncated(self):
        stream = io.BytesIO(b"abcdefghij,k\nnext\n")
        assert parse_one(stream, 4, CSV) == ["abcdefghij", "k"]
        assert parse_one(stream, 4, CSV) == ["next"]

    def test_unbounded_read(self):
        stream = io.BytesIO(b"x" * 100 + b"\n")
        assert parse_one(stream, -1, CSV) == ["x" * 100]

    def test_multiline_enclosed_field(self):
        stream = io.BytesIO(b'1,"two\nlines",3\n4\n')
        assert parse_one(stream, 64, CSV) == ["1", "two\nlines", "3"]
        assert parse_one(stream, 64, CSV) == ["4"]

    def test_doubled_enclosure(self):
        stream = io.BytesIO(b'"say ""hi""",2\n')
        assert parse_one(stream, 64, CSV) == ['say "hi"', "2"]

    def test_escape_outside_enclosure(self):
        stream = io.BytesIO(b"x\\,y,z\n")
        assert parse_one(stream, 64, CSV) == ["x,y", "z"]

    def test_escape_inside_enclosure(self):
        stream = io.BytesIO(b'"say \\"hi\\"",2\nnext\n')
        assert parse_one(stream, 64, CSV) == ['say "hi"', "2"]
        assert parse_one(stream, 64, CSV) == ["next"]

    def test_strict_malformed(self):
        stream = io.BytesIO(b'"a"b,c\n')
        with pytest.raises(MalformedRowError):
            parse_one(stream, 64, CSV, strict=True)

    def test_lenient_malformed(self):
        stream = io.BytesIO(b'"a"b,c\n')
        assert parse_one(stream, 64, CSV) == ["ab", "c"]

    def test_undecodable(self):
        stream = io.BytesIO(b"\xff\xfe\n")
        with pytest.raises(MalformedRowError):
            parse_one(stream, 64, CSV)

    def test_other_encoding(self):
        stream = io.BytesIO("caf\xe9,1\n".encode("latin-1"))
        assert parse_one(stream, 64, CSV, encoding="latin-1") == ["caf\xe9", "1"]


class TestSkipOne:
    def test_reports_consumed(self):
        stream = io.BytesIO(b'a,"x\ny"\nb\n')
        assert skip_one(stream, CSV) == Consumed(nbytes=8, longest_line=5)
        assert parse_one(stream, 16, CSV) == ["b"]
        assert skip_one(stream, CSV) is None

    def test_blank_line_is_a_record(self):
        stream = io.BytesIO(b"\n\n")
        assert skip_one(stream, CSV) == Consumed(nbytes=1, longest_line=1)
        assert skip_one(stream, CSV) == Consumed(nbytes=1, longest_line=1)
        assert skip_one(stream, CSV) is None

    def test_quote_inside_unenclosed_field(self):
        stream = io.BytesIO(b'5" disk,x\nnext\n')
        skip_one(stream, CSV)
        assert parse_one(stream, 16, CSV) == ["next"]

    def test_escaped_enclosure_does_not_open(self):
        stream = io.BytesIO(b'a,\\"b\nnext\n')
        skip_one(stream, CSV)
        assert parse_one(stream, 16, CSV) == ["next"]

    def test_no_escape_character(self):
        dialect = Dialect(escape="")
        stream = io.BytesIO(b'"a\\",b\nnext\n')
        skip_one(stream, dialect)
        assert parse_one(stream, 16, dialect) == ["next"]

    def test_escape_equal_to_enclosure(self):
        dialect = Dialect(escape='"')
        stream = io.BytesIO(b'"x""y",2\n"m\nn",3\n')
        assert skip_one(stream, dialect) == Consumed(nbytes=9, longest_line=9)
        assert parse_one(stream, 16, dialect) == ["m\nn", "3"]
        assert skip_one(stream, dialect) is None


# ============================================================================
# scanner.py
# ============================================================================

class TestScan:
    def test_with_header(self):
        stream = io.BytesIO(b"id,name\n1,foo\n22,barbaz\n")
        result = scan(stream, 0, CSV)
        assert result.raw_headers == ["id", "name"]
        assert result.content_offset == 8
        assert result.row_count == 2
        assert result.max_line_length == len(b"22,barbaz\n") + 2
        assert stream.tell() == 8

    def test_without_header(self):
        stream = io.BytesIO(b"1\n2\n3\n")
        result = scan(stream, None, CSV)
        assert result.raw_headers == []
        assert result.content_offset == 0
        assert result.row_count == 3

    def test_preamble_skipped(self):
        stream = io.BytesIO(b"junk\nid\n1\n")
        result = scan(stream, 1, CSV)
        assert result.raw_headers == ["id"]
        assert result.content_offset == 8
        assert result.row_count == 1

    def test_bom(self):
        stream = io.BytesIO(b"\xef\xbb\xbf1\n2\n")
        result = scan(stream, None, CSV, skip_bom=True)
        assert result.content_offset == 3
        assert result.row_count == 2
        assert parse_one(stream, result.max_line_length, CSV) == ["1"]

    def test_bom_kept(self):
        stream = io.BytesIO(b"\xef\xbb\xbf1\n")
        result = scan(stream, None, CSV, skip_bom=False)
        assert result.content_offset == 0

    def test_header_past_end(self):
        stream = io.BytesIO(b"only\n")
        result = scan(stream, 3, CSV)
        assert result.raw_headers == []
        assert result.row_count == 0

    def test_blank_header_line(self):
        stream = io.BytesIO(b"\n1,2\n")
        result = scan(stream, 0, CSV)
        assert result.raw_headers == []
        assert result.row_count == 1

    def test_line_margin(self):
        stream = io.BytesIO(b"h\nabc\n")
        result = scan(stream, 0, CSV, line_margin=10)
        assert result.max_line_length == 4 + 10

    def test_multiline_records_counted_once(self):
        stream = io.BytesIO(b'h\n"a\nb\nc"\nd\n')
        result = scan(stream, 0, CSV)
        assert result.row_count == 2

    def test_io_error_wrapped(self):
        with pytest.raises(SourceReadError) as exc_info:
            scan(FailingStream(b"a\n"), 0, CSV, source_path="broken.csv")
        assert exc_info.value.source_path == "broken.csv"
        assert isinstance(exc_info.value.__cause__, OSError)


# ============================================================================
# cursor.py
# ============================================================================

def make_cursor(data: bytes, row_count: int = 3, **kwargs) -> CursorReconciler:
    return CursorReconciler(
        io.BytesIO(data),
        content_offset=0,
        max_line_length=8,
        row_count=row_count,
        dialect=CSV,
        **kwargs,
    )


class TestCursorReconciler:
    def test_forward_and_backward(self):
        cursor = make_cursor(b"a\nb\nc\n")
        assert cursor.fetch(2) == ["c"]
        assert cursor.physical_cursor == 3
        assert cursor.fetch(0) == ["a"]
        assert cursor.physical_cursor == 1
        assert cursor.fetch(1) == ["b"]
        assert cursor.physical_cursor == 2

    def test_same_position_twice_rewinds(self):
        cursor = make_cursor(b"a\nb\nc\n")
        assert cursor.fetch(1) == ["b"]
        assert cursor.fetch(1) == ["b"]

    def test_past_end(self):
        cursor = make_cursor(b"a\nb\nc\n")
        assert cursor.fetch(5) is None
        assert cursor.physical_cursor == 6
        assert cursor.row_count == 3

    def test_count_never_shrinks(self):
        cursor = make_cursor(b"a\n", row_count=10)
        assert cursor.fetch(3) is None
        assert cursor.row_count == 10

    def test_count_grows(self):
        cursor = make_cursor(b"a\nb\nc\n", row_count=1)
        assert cursor.fetch(2) == ["c"]
        assert cursor.row_count == 3

    def test_reset(self):
        cursor = make_cursor(b"a\nb\n")
        cursor.fetch(1)
        cursor.reset()
        assert cursor.physical_cursor == 0
        assert cursor.fetch(0) == ["a"]

    def test_content_offset_respected(self):
        cursor = CursorReconciler(
            io.BytesIO(b"h1,h2\nx,y\n"),
            content_offset=6,
            max_line_length=8,
            row_count=1,
            dialect=CSV,
        )
        assert cursor.fetch(0) == ["x", "y"]
        assert cursor.fetch(0) == ["x", "y"]

    def test_malformed_then_recover(self):
        cursor = make_cursor(b'a\n"x"y\nc\n', strict=True, source_path="bad.csv")
        with pytest.raises(MalformedRowError) as exc_info:
            cursor.fetch(1)
        assert exc_info.value.row_number == 1
        assert exc_info.value.source_path == "bad.csv"
        assert cursor.fetch(2) == ["c"]
        assert cursor.physical_cursor == 3

    def test_io_error_wrapped(self):
        cursor = CursorReconciler(
            FailingStream(b"a\n"),
            content_offset=0,
            max_line_length=8,
            row_count=1,
            dialect=CSV,
        )
        with pytest.raises(SourceReadError):
            cursor.fetch(0)
