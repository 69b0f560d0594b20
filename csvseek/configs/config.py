"""
Reader configuration.

All tuneable constants live here. Import from this module everywhere —
never hardcode line margins or encodings inline.

Usage:
    from csvseek.configs.config import ReaderConfig
    cfg = ReaderConfig()                  # defaults (env-aware)
    cfg = ReaderConfig(encoding="latin-1")

Environment overrides are read from ``os.environ`` when the config object is
constructed; this module does not load ``.env`` files itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from csvseek.configs.exceptions import DialectError


HEADER_ROW_NONE: int = -1
"""Sentinel ``header_row`` meaning the file has no header; rows are positional."""

MIN_LINE_MARGIN: int = 2
"""Smallest allowed slack (bytes) added to the longest line for ``\\r\\n`` variance."""


def _env_bool(key: str, default: str) -> bool:
    return os.environ.get(key, default).strip().lower() in ("1", "true", "yes")


@dataclass(slots=True)
class ReaderConfig:
    """
    Runtime configuration for ``RandomAccessCsvReader``.

    Attributes:
        encoding: Text encoding used to decode raw lines. ``utf-8-sig`` also
            skips a leading UTF-8 byte-order mark.
        line_margin: Bytes added on top of the longest physical line seen by
            the scan when sizing tokenizer reads. Must be >= MIN_LINE_MARGIN.
        strict: Passed to ``csv`` strict mode; malformed records raise
            ``MalformedRowError`` instead of being parsed leniently.
    """

    encoding: str = field(
        default_factory=lambda: os.environ.get("CSVSEEK_ENCODING", "utf-8-sig")
    )
    line_margin: int = field(
        default_factory=lambda: int(
            os.environ.get("CSVSEEK_LINE_MARGIN", str(MIN_LINE_MARGIN))
        )
    )
    strict: bool = field(default_factory=lambda: _env_bool("CSVSEEK_STRICT", "false"))

    def __post_init__(self) -> None:
        if self.line_margin < MIN_LINE_MARGIN:
            raise DialectError(
                f"line_margin must be >= {MIN_LINE_MARGIN}, got {self.line_margin}.",
                field_name="line_margin",
            )

    @property
    def skips_bom(self) -> bool:
        """True if a leading UTF-8 BOM is dropped before the first record."""
        return self.encoding.lower().replace("_", "-") == "utf-8-sig"

    @property
    def line_encoding(self) -> str:
        """
        Encoding for decoding individual lines.

        The BOM is handled by the scanner, so ``utf-8-sig`` decodes lines as
        plain ``utf-8``.
        """
        return "utf-8" if self.skips_bom else self.encoding
