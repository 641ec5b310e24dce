# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). Group defaults, header-bound
parameters and per-call headers are layered onto one plain dict, so every lookup and
override here compares names case-insensitively while keeping the caller's spelling.
"""

from __future__ import annotations

from collections.abc import Mapping


def normalize_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    if not headers:
        return {}
    out: dict[str, str] = {}
    for key, value in headers.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Mapping[object, object] | None, name: str, default: str = "") -> str:
    """Return a header value using case-insensitive key matching."""
    if not headers or not name:
        return default

    lower = str(name).lower()
    for key in (name, lower, lower.title()):
        if key in headers:
            value = headers.get(key)
            return default if value is None else str(value).strip()

    for key, value in headers.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


def merge_headers(*layers: Mapping[str, object] | None) -> dict[str, str]:
    """
    Merge header mappings left to right; a later layer replaces an earlier one
    regardless of name casing. `None` values remove the header.
    """
    merged: dict[str, str] = {}
    spelling: dict[str, str] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            name = str(key).strip()
            if not name:
                continue
            lower = name.lower()
            previous = spelling.pop(lower, None)
            if previous is not None:
                merged.pop(previous, None)
            if value is None:
                continue
            merged[name] = str(value)
            spelling[lower] = name
    return merged


__all__ = ["header_value", "merge_headers", "normalize_headers"]
