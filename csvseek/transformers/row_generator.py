"""
Row materialization.

Turns a raw field list into the value handed to callers:

- **Header-keyed** when the reader has headers: ``dict[header, value]``, with
  positional ``int`` keys for any fields past the end of the header.
- **Positional** when it does not: the field list itself.
- **Blank lines** materialize as an empty ``dict``/``list``, never as an error.

Values are passed through untouched; there is no type coercion.

Usage::

    materialize(["1", "foo"], ["id", "name"])   # {"id": "1", "name": "foo"}
    materialize(["1", "foo"], [])               # ["1", "foo"]
"""

from __future__ import annotations

from typing import Union

Row = Union[dict, list]


def materialize(fields: list[str], headers: list[str]) -> Row:
    """
    Build the caller-facing row for one record.

    Args:
        fields:  Raw fields from the tokenizer (``[]`` for a blank line).
        headers: Resolved, unique header names; empty for positional rows.

    Returns:
        A ``dict`` keyed by header (or position, for extra fields) when
        ``headers`` is non-empty, otherwise a ``list`` of the fields.
    """
    if not headers:
        return list(fields)

    n_headers = len(headers)
    return {
        (headers[index] if index < n_headers else index): value
        for index, value in enumerate(fields)
    }
