"""Validation helpers used across the project."""

from __future__ import annotations

from typing import Any


def to_flag(value: Any) -> Any:
    """
    Store booleans as 0/1 flags.
    Any other value is handed to SQL binding unchanged.
    """
    if isinstance(value, bool):
        return int(value)
    return value
