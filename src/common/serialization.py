"""Serialization utilities."""

from dataclasses import fields, is_dataclass
from datetime import datetime
from typing import Any


def _serialize_value(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return serialize_dataclass(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_serialize_value(v) for v in value]
    return value


def serialize_dataclass(obj) -> dict:
    """Serialize a dataclass to dict, converting datetimes to ISO strings.

    Nested dataclasses, lists and dicts are converted recursively; None is
    kept as None.
    """
    return {f.name: _serialize_value(getattr(obj, f.name)) for f in fields(obj)}
