# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers: base URL validation, path templates and query strings."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode, urlparse

from ..errors import ConfigurationError

_PLACEHOLDER_RE = re.compile(r"\{([^{}]*)\}")
_ALLOWED_SCHEMES = {"http", "https"}


def validate_base_url(base_url: str | None) -> str:
    """Return the stripped base URL, or raise ConfigurationError when it is unusable."""
    raw = str(base_url or "").strip()
    if not raw:
        raise ConfigurationError("Base URL must not be empty")
    parsed = urlparse(raw)
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES:
        raise ConfigurationError(f"Base URL {raw!r} must use http or https")
    if not parsed.netloc:
        raise ConfigurationError(f"Base URL {raw!r} has no host")
    if parsed.query or parsed.fragment:
        raise ConfigurationError(f"Base URL {raw!r} must not carry a query or fragment")
    return raw


def template_placeholders(template: str) -> list[str]:
    """
    Return placeholder names in order of appearance.

    Raises ConfigurationError for empty `{}` placeholders or stray braces.
    """
    names = _PLACEHOLDER_RE.findall(template)
    for name in names:
        if not name.strip():
            raise ConfigurationError(f"Path template {template!r} has an empty placeholder")
    leftover = _PLACEHOLDER_RE.sub("", template)
    if "{" in leftover or "}" in leftover:
        raise ConfigurationError(f"Path template {template!r} has unbalanced braces")
    return names


def _path_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return quote(str(value), safe="")


def expand_template(template: str, values: Mapping[str, Any]) -> str:
    """Substitute percent-encoded values for `{name}` placeholders, leaving all other characters untouched."""

    def _replace(match: re.Match[str]) -> str:
        return _path_value(values[match.group(1)])

    return _PLACEHOLDER_RE.sub(_replace, template)


def join_url(base_url: str, path: str) -> str:
    """
    Append a path to a base URL, keeping any base path prefix.

    Example:
      https://host/api/ + /todos -> https://host/api/todos
    """
    if not path:
        return base_url
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def append_query(url: str, params: Mapping[str, Any]) -> str:
    """Append query parameters, dropping None values and repeating list/tuple values."""
    pairs: list[tuple[str, str]] = []
    for name, value in params.items():
        if value is None:
            continue
        items = value if isinstance(value, (list, tuple)) else [value]
        for item in items:
            if item is None:
                continue
            if isinstance(item, bool):
                item = "true" if item else "false"
            pairs.append((name, str(item)))
    if not pairs:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(pairs)}"


__all__ = [
    "append_query",
    "expand_template",
    "join_url",
    "template_placeholders",
    "validate_base_url",
]
