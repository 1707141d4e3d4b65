"""
Shared test helpers for sessionlock tests.

Builders for mock SQLAlchemy Result objects, used by the connection
fixtures in conftest.py and directly by tests that script several calls.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock


def make_scalar_result(value: Any) -> MagicMock:
    """Create a mock Result whose scalar() returns value."""
    result = MagicMock()
    result.scalar.return_value = value
    return result


def make_row_result(row: dict[str, Any] | None) -> MagicMock:
    """Create a mock Result whose mappings().first() returns row."""
    result = MagicMock()
    result.mappings.return_value.first.return_value = row
    return result


__all__ = [
    "make_row_result",
    "make_scalar_result",
]
