# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for httpgroups."""

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigurationError
from .version import __version__

DEFAULT_USER_AGENT = f"httpgroups/{__version__}"
DEFAULT_GROUP = "default"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class HttpSettings:
    """HTTP client defaults shared by every group client."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 16 * 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("HTTPGROUPS_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            timeout=_float_env("HTTPGROUPS_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("HTTPGROUPS_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("HTTPGROUPS_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("HTTPGROUPS_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


@dataclass(frozen=True)
class GroupConfig:
    """
    Plain-data configuration applied to every group whose name matches `pattern`.

    `pattern` is a shell-style pattern (`*`, `?`, `[...]`). A literal pattern
    names exactly one group.
    """

    pattern: str
    base_url: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GroupConfig":
        pattern = data.get("pattern") or data.get("name")
        if not isinstance(pattern, str) or not pattern.strip():
            raise ConfigurationError(f"Group config needs a 'pattern' or 'name': {dict(data)!r}")
        base_url = data.get("base_url")
        if base_url is not None and not isinstance(base_url, str):
            raise ConfigurationError(f"Group config {pattern!r} has a non-string base_url")
        raw_headers = data.get("headers") or {}
        if not isinstance(raw_headers, Mapping):
            raise ConfigurationError(f"Group config {pattern!r} headers must be a mapping")
        headers = {str(key): str(value) for key, value in raw_headers.items()}
        return cls(pattern=pattern.strip(), base_url=base_url, headers=headers)


def load_group_configs(raw: str | None = None) -> list[GroupConfig]:
    """
    Parse group configs from JSON text, defaulting to the HTTPGROUPS_GROUPS variable.

    The JSON is a list of objects: `{"pattern": "github", "base_url": "...", "headers": {...}}`.
    """
    if raw is None:
        raw = os.getenv("HTTPGROUPS_GROUPS")
    if not raw or not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Group configuration is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ConfigurationError("Group configuration must be a JSON list")
    configs: list[GroupConfig] = []
    for item in data:
        if not isinstance(item, Mapping):
            raise ConfigurationError(f"Group configuration entries must be objects, got {item!r}")
        configs.append(GroupConfig.from_mapping(item))
    return configs


__all__ = [
    "DEFAULT_GROUP",
    "DEFAULT_USER_AGENT",
    "GroupConfig",
    "HttpSettings",
    "load_group_configs",
    "load_http_settings",
]
