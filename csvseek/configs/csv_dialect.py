"""
CSV dialect configuration for the random-access reader.

A ``Dialect`` is the immutable (delimiter, enclosure, escape) triple fixed at
reader construction.  It translates itself into keyword arguments for the
stdlib ``csv`` module, which does the actual field splitting on top of
``SeekDialect``:

- Standard double-quote doubling (``""`` inside an enclosed field).
- Optional escape character (empty string disables it).  An escape equal to
  the enclosure is the same as none: doubling already escapes the enclosure.
- Non-strict by default; ``strict=True`` raises ``csv.Error`` on malformed
  records instead of accepting them.

Usage:
    import csv
    from csvseek.configs.csv_dialect import Dialect, SeekDialect

    dialect = Dialect(delimiter="\\t")
    reader = csv.reader(lines, SeekDialect, **dialect.csv_kwargs())

Byte-order marks are an encoding concern: open the source in binary mode and
let the scanner skip a leading UTF-8 BOM when the encoding is ``utf-8-sig``.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass

from csvseek.configs.exceptions import DialectError
from csvseek.utils.validation import validate_dialect_char


class SeekDialect(csv.excel):
    """
    Base dialect for csvseek.

    Inherits from ``csv.excel`` (comma-delimited, double-quote doubling).
    Per-reader settings are applied as keyword overrides from ``Dialect``.
    """

    skipinitialspace: bool = False
    strict: bool = False


@dataclass(frozen=True, slots=True)
class Dialect:
    """
    Immutable field-parsing settings.

    Attributes:
        delimiter: Field separator (one character).
        enclosure: Quote character (one character).
        escape:    Escape character (one character, or ``""`` for none).
                   Ignored when it equals ``enclosure``.
    """

    delimiter: str = ","
    enclosure: str = '"'
    escape: str = "\\"

    def __post_init__(self) -> None:
        validate_dialect_char(self.delimiter, "delimiter")
        validate_dialect_char(self.enclosure, "enclosure")
        validate_dialect_char(self.escape, "escape", allow_empty=True)
        if self.delimiter == self.enclosure:
            raise DialectError(
                f"delimiter and enclosure must differ, both are {self.delimiter!r}.",
                field_name="enclosure",
            )

    @property
    def active_escape(self) -> str:
        """The escape in effect, ``""`` when disabled or equal to the enclosure."""
        return "" if self.escape == self.enclosure else self.escape

    def csv_kwargs(self, strict: bool = False) -> dict:
        """Return format parameters for ``csv.reader``."""
        return {
            "delimiter": self.delimiter,
            "quotechar": self.enclosure,
            "escapechar": self.active_escape or None,
            "doublequote": True,
            "strict": strict,
        }


CSV = Dialect()
TSV = Dialect(delimiter="\t")
PSV = Dialect(delimiter="|")
