"""
Identifier helpers for header rows.

Turns raw header fields into unique mapping keys so each row can be exposed as
a ``dict`` without later columns silently overwriting earlier ones.

Usage:
    from csvseek.utils.identifiers import resolve_headers

    resolve_headers(["a", "a", "b"])      # → ["a0", "a1", "b"]
    resolve_headers(["x ", "x", "x"])     # → ["x ", "x0", "x1"]
"""

from __future__ import annotations

from collections import defaultdict


def resolve_headers(raw_headers: list[str] | None) -> list[str]:
    """
    Deduplicate header names, preserving order and length.

    Fields are grouped by their literal text.  Every member of a group with
    more than one position gets its right-trimmed text plus an ascending
    suffix (``0``, ``1``, …) in left-to-right order.  Unique texts are kept as
    they are.  If a suffixed name would collide with another header, the
    suffix keeps counting until the name is free.

    Args:
        raw_headers: Header fields as read from the file, or ``None``.

    Returns:
        A list of unique strings, one per input field.  Empty if there is no
        header.
    """
    if not raw_headers:
        return []

    positions: dict[str, list[int]] = defaultdict(list)
    for index, header in enumerate(raw_headers):
        positions[header].append(index)

    resolved = list(raw_headers)
    taken = {header for header, idxs in positions.items() if len(idxs) == 1}

    for header, idxs in positions.items():
        if len(idxs) == 1:
            continue
        stem = header.rstrip()
        suffix = 0
        for index in idxs:
            while f"{stem}{suffix}" in taken:
                suffix += 1
            name = f"{stem}{suffix}"
            resolved[index] = name
            taken.add(name)
            suffix += 1

    return resolved
