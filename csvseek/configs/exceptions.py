"""
Custom exceptions for the random-access CSV reader.

Hierarchy:
    CsvSeekError
    ├── SourceReadError       File cannot be opened or read (also an ``OSError``).
    ├── MalformedRowError     A record could not be tokenized.
    ├── OutOfRangeError       Seek to a row that does not exist (also an ``IndexError``).
    ├── ReaderClosedError     Operation attempted on a closed reader.
    └── DialectError          Invalid delimiter/enclosure/escape or config value
                              (also a ``ValueError``).
"""


class CsvSeekError(Exception):
    """Base class for all csvseek errors."""


class SourceReadError(CsvSeekError, OSError):
    """
    Raised when the source file cannot be opened or read.

    Args:
        message: Human-readable description of the failure.
        source_path: Path of the file being read when the error occurred.
    """

    def __init__(self, message: str, source_path: str | None = None) -> None:
        super().__init__(message)
        self.source_path = source_path

    def __str__(self) -> str:
        base = super().__str__()
        if self.source_path:
            return f"{base} | source={self.source_path}"
        return base


class MalformedRowError(CsvSeekError):
    """
    Raised when the tokenizer cannot parse a record.

    Args:
        message: Human-readable description.
        source_path: Path of the CSV file.
        row_number: 0-based data row index, when known.
    """

    def __init__(
        self,
        message: str,
        source_path: str | None = None,
        row_number: int | None = None,
    ) -> None:
        super().__init__(message)
        self.source_path = source_path
        self.row_number = row_number

    def __str__(self) -> str:
        base = super().__str__()
        parts = []
        if self.source_path:
            parts.append(f"source={self.source_path}")
        if self.row_number is not None:
            parts.append(f"row={self.row_number}")
        if parts:
            return f"{base} | {' '.join(parts)}"
        return base


class OutOfRangeError(CsvSeekError, IndexError):
    """
    Raised when a seek targets a row that does not exist.

    Args:
        message: Human-readable description.
        position: The requested row index.
        row_count: Known row count at the time of the request.
    """

    def __init__(
        self,
        message: str,
        position: int | None = None,
        row_count: int | None = None,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.row_count = row_count

    def __str__(self) -> str:
        base = super().__str__()
        parts = []
        if self.position is not None:
            parts.append(f"position={self.position}")
        if self.row_count is not None:
            parts.append(f"count={self.row_count}")
        if parts:
            return f"{base} | {' '.join(parts)}"
        return base


class ReaderClosedError(CsvSeekError):
    """Raised when a closed reader is navigated or read."""


class DialectError(CsvSeekError, ValueError):
    """
    Raised when a dialect character or config value is invalid.

    Args:
        message: Human-readable description.
        field_name: Name of the offending setting (e.g. ``delimiter``).
    """

    def __init__(self, message: str, field_name: str | None = None) -> None:
        super().__init__(message)
        self.field_name = field_name

    def __str__(self) -> str:
        base = super().__str__()
        if self.field_name:
            return f"{base} | field={self.field_name}"
        return base
