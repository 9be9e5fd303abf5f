"""Shared field types for record schemas."""

from __future__ import annotations

from typing import Annotated

from pydantic import PlainSerializer


def compact_number(value: float) -> int | float:
    """Write whole-number floats without a trailing ``.0`` (``7.0`` -> ``7``)."""
    return int(value) if value.is_integer() else value


# Float column whose NDJSON form matches JavaScript number formatting
Number = Annotated[float, PlainSerializer(compact_number, return_type=int | float, when_used="json")]
