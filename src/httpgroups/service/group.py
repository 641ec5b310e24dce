# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client group model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..errors import ConfigurationError
from ..http.headers import merge_headers
from ..http.url import validate_base_url


@dataclass(frozen=True)
class ClientGroup:
    """Named base URL + default headers shared by the services bound to it."""

    name: str
    base_url: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name or not str(self.name).strip():
            raise ConfigurationError("Group name must not be empty")
        object.__setattr__(self, "base_url", validate_base_url(self.base_url))
        object.__setattr__(self, "headers", MappingProxyType(merge_headers(self.headers)))

    def updated(self, *, base_url: str | None = None, headers: Mapping[str, str] | None = None) -> ClientGroup:
        """Return a copy with a new base URL and/or extra headers layered on top."""
        return ClientGroup(
            name=self.name,
            base_url=base_url or self.base_url,
            headers=merge_headers(self.headers, headers),
        )

    def __hash__(self) -> int:
        return hash((self.name, self.base_url, tuple(sorted(self.headers.items()))))


__all__ = ["ClientGroup"]
