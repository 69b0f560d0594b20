"""
Validation helpers for reader arguments.

Called at construction and on every ``seek`` to reject bad input before the
underlying stream is touched.

All functions raise the appropriate exception on failure rather than returning
a boolean — callers are expected to let exceptions propagate.
"""

from __future__ import annotations

from csvseek.configs.exceptions import DialectError, OutOfRangeError


def validate_dialect_char(
    value: str,
    field_name: str,
    allow_empty: bool = False,
) -> None:
    """
    Assert that a dialect setting is exactly one character.

    Args:
        value:       The configured character.
        field_name:  Setting name for error reporting (``delimiter`` etc).
        allow_empty: Accept ``""`` (used for "no escape character").

    Raises:
        DialectError: If ``value`` is not a ``str`` of length one
                      (or empty, when ``allow_empty`` is set).
    """
    if not isinstance(value, str):
        raise DialectError(
            f"{field_name} must be a string, got {type(value).__name__}.",
            field_name=field_name,
        )
    if allow_empty and value == "":
        return
    if len(value) != 1:
        raise DialectError(
            f"{field_name} must be a single character, got {value!r}.",
            field_name=field_name,
        )
    if value in ("\r", "\n"):
        raise DialectError(
            f"{field_name} cannot be a line terminator.",
            field_name=field_name,
        )


def validate_header_row(header_row: int | None) -> None:
    """
    Assert that ``header_row`` is ``None`` or a non-negative integer.

    The ``HEADER_ROW_NONE`` sentinel must be normalized to ``None`` before
    calling this.

    Raises:
        DialectError: If ``header_row`` is negative or not an integer.
    """
    if header_row is None:
        return
    if isinstance(header_row, bool) or not isinstance(header_row, int):
        raise DialectError(
            f"header_row must be an int or None, got {type(header_row).__name__}.",
            field_name="header_row",
        )
    if header_row < 0:
        raise DialectError(
            f"header_row must be >= 0, got {header_row}.",
            field_name="header_row",
        )


def validate_position(position: int, row_count: int | None = None) -> None:
    """
    Assert that a seek position is a non-negative integer.

    Args:
        position:  Requested row index.
        row_count: Current row count, attached to the error for context.

    Raises:
        TypeError:       If ``position`` is not an ``int``.
        OutOfRangeError: If ``position`` is negative.
    """
    if isinstance(position, bool) or not isinstance(position, int):
        raise TypeError(
            f"Row position must be an int, got {type(position).__name__}."
        )
    if position < 0:
        raise OutOfRangeError(
            f"Invalid seek position ({position})",
            position=position,
            row_count=row_count,
        )
