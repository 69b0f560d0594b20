"""
Abstract base class for row sources.

Every concrete reader implements this interface, so callers that only need
"headers, then rows from the top" do not depend on a particular reader.

Usage:
    with RandomAccessCsvReader(path) as source:
        headers = source.headers()
        for row in source.rows():
            process(row)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator


class AbstractSource(ABC):
    """
    Interface for all row sources.

    Subclasses must implement ``open``, ``headers``, ``rows``, ``close`` and
    the ``closed`` property.  This base class provides context manager support
    (``__enter__`` / ``__exit__``), delegating to ``open`` / ``close``.
    ``__enter__`` only opens a closed source, so sources that open eagerly in
    ``__init__`` are not opened twice.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @abstractmethod
    def open(self) -> None:
        """Open the source for reading."""

    @property
    @abstractmethod
    def closed(self) -> bool:
        """True once ``close`` has run (or before ``open``)."""

    @abstractmethod
    def headers(self) -> list[str]:
        """
        Return the header names, unique and in file order.

        Empty when the source has no header row.
        """

    @abstractmethod
    def rows(self) -> Iterator:
        """
        Yield each data row.

        The header row is NOT included.  Each call rewinds to the first data
        row so the source can be iterated multiple times.
        """

    @abstractmethod
    def close(self) -> None:
        """Release any open file handles or resources."""

    # ── context manager ──────────────────────────────────────────────────

    def __enter__(self) -> "AbstractSource":
        if self.closed:
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
        return None
