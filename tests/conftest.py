from __future__ import annotations

from pathlib import Path

import pytest

from csvseek.configs.config import HEADER_ROW_NONE
from csvseek.discovery.csv_reader import RandomAccessCsvReader

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def with_header_path() -> Path:
    return FIXTURES / "csv_with_header.csv"


@pytest.fixture
def without_header_path() -> Path:
    return FIXTURES / "csv_without_header.csv"


@pytest.fixture
def reader_with_header(with_header_path):
    reader = RandomAccessCsvReader(with_header_path)
    yield reader
    reader.close()


@pytest.fixture
def reader_without_header(without_header_path):
    reader = RandomAccessCsvReader(without_header_path, HEADER_ROW_NONE)
    yield reader
    reader.close()
