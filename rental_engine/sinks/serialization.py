"""Shared serialization utilities for sinks."""

from dataclasses import fields, is_dataclass
from typing import Any

from rental_engine.store.serialization import serialize_value


def to_dict(obj: Any) -> dict:
    """Convert object to a JSON-ready dictionary."""
    if is_dataclass(obj):
        return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}
    elif isinstance(obj, dict):
        return serialize_value(obj)
    else:
        return {"value": str(obj)}
