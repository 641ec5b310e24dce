# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSON (de)serialization between dataclass records and request/response bodies.

Record fields map to JSON keys by attribute name, or by `field(metadata={"json": "userId"})`
when the wire name differs. Unknown JSON keys are ignored; missing keys fall back to the
field default, then to None for optional fields, and are an error otherwise.
"""

from __future__ import annotations

import json
import types
from collections.abc import Mapping
from dataclasses import MISSING, fields, is_dataclass
from functools import lru_cache
from typing import Any, Union, get_args, get_origin, get_type_hints

from ..errors import SerializationError
from .descriptor import ReturnKind, Returns

JSON_NAME = "json"


def json_name(record_field) -> str:  # noqa: ANN001
    return record_field.metadata.get(JSON_NAME, record_field.name)


@lru_cache(maxsize=None)
def _type_hints(record_type: type) -> dict[str, Any]:
    return get_type_hints(record_type)


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return record_to_dict(value)
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


def record_to_dict(record: Any) -> dict[str, Any]:
    """Convert a dataclass record into a JSON-ready dict keyed by wire names."""
    if not is_dataclass(record) or isinstance(record, type):
        raise SerializationError(f"Expected a dataclass record, got {type(record).__name__}")
    return {json_name(f): _to_jsonable(getattr(record, f.name)) for f in fields(record)}


def _allows_none(hint: Any) -> bool:
    if hint is Any:
        return True
    return get_origin(hint) in (Union, types.UnionType) and type(None) in get_args(hint)


def _coerce(hint: Any, value: Any, where: str) -> Any:
    if hint is Any:
        return value

    origin = get_origin(hint)
    if origin in (Union, types.UnionType):
        args = get_args(hint)
        if value is None and type(None) in args:
            return None
        candidates = [arg for arg in args if arg is not type(None)]
        if len(candidates) == 1:
            return _coerce(candidates[0], value, where)
        return value

    if value is None:
        raise SerializationError(f"{where} must not be null")

    if hint is bool:
        if not isinstance(value, bool):
            raise SerializationError(f"{where} expected a boolean, got {type(value).__name__}")
        return value
    if hint is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SerializationError(f"{where} expected an integer, got {type(value).__name__}")
        return value
    if hint is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SerializationError(f"{where} expected a number, got {type(value).__name__}")
        return float(value)
    if hint is str:
        if not isinstance(value, str):
            raise SerializationError(f"{where} expected a string, got {type(value).__name__}")
        return value
    if isinstance(hint, type) and is_dataclass(hint):
        return record_from_dict(hint, value)
    if origin in (list, tuple):
        if not isinstance(value, list):
            raise SerializationError(f"{where} expected a list, got {type(value).__name__}")
        args = get_args(hint)
        item_hint = args[0] if args else Any
        items = [_coerce(item_hint, item, f"{where}[{index}]") for index, item in enumerate(value)]
        return tuple(items) if origin is tuple else items
    return value


def record_from_dict(record_type: type, data: Any) -> Any:
    """Build a dataclass record from a decoded JSON object."""
    if not isinstance(data, Mapping):
        raise SerializationError(f"{record_type.__name__} expected a JSON object, got {type(data).__name__}")
    try:
        hints = _type_hints(record_type)
    except (NameError, TypeError) as exc:
        raise SerializationError(f"Cannot resolve field types of {record_type.__name__}: {exc}") from exc

    kwargs: dict[str, Any] = {}
    for record_field in fields(record_type):
        if not record_field.init:
            continue
        key = json_name(record_field)
        hint = hints.get(record_field.name, Any)
        where = f"{record_type.__name__}.{key}"
        if key in data:
            kwargs[record_field.name] = _coerce(hint, data[key], where)
        elif record_field.default is not MISSING or record_field.default_factory is not MISSING:
            continue
        elif _allows_none(hint):
            kwargs[record_field.name] = None
        else:
            raise SerializationError(f"{where} is missing")
    try:
        return record_type(**kwargs)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot build {record_type.__name__}: {exc}") from exc


def encode_body(value: Any) -> bytes:
    """Serialize a request body to UTF-8 JSON."""
    try:
        return json.dumps(_to_jsonable(value), allow_nan=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot encode request body of type {type(value).__name__}: {exc}") from exc


def decode_body(returns: Returns, text: str) -> Any:
    """Decode a response body into the declared return shape."""
    if returns.kind is ReturnKind.NONE:
        return None
    if not text or not text.strip():
        if returns.kind is ReturnKind.RAW:
            return None
        raise SerializationError("Response body is empty")
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise SerializationError(f"Response body is not valid JSON: {exc}") from exc

    if returns.kind is ReturnKind.RAW:
        return data
    if returns.kind is ReturnKind.ONE:
        return record_from_dict(returns.record_type, data)
    if not isinstance(data, list):
        raise SerializationError(f"Expected a JSON list, got {type(data).__name__}")
    return [record_from_dict(returns.record_type, item) for item in data]


def to_json(record: Any) -> str:
    return encode_body(record).decode("utf-8")


def from_json(record_type: type, text: str) -> Any:
    return decode_body(Returns.one(record_type), text)


__all__ = [
    "decode_body",
    "encode_body",
    "from_json",
    "json_name",
    "record_from_dict",
    "record_to_dict",
    "to_json",
]
