# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade wiring the JSONPlaceholder services onto one client group."""

from __future__ import annotations

from .config import GroupConfig, HttpSettings, load_group_configs, load_http_settings
from .http.client import HttpClient
from .resources.services import JSONPLACEHOLDER_BASE_URL, JSONPLACEHOLDER_GROUP, POST_SERVICE, TODO_SERVICE
from .service.proxy import ServiceProxy
from .service.registry import GroupRegistry


class PlaceholderClients:
    """
    Convenience wrapper that registers the `jsonplaceholder` group and exposes
    `todos` and `posts` proxies sharing one HTTP client.

    Group configs from HTTPGROUPS_GROUPS (or `group_configs`) are applied after the
    built-in registration, so they can point the group elsewhere or add headers.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        base_url: str = JSONPLACEHOLDER_BASE_URL,
        settings: HttpSettings | None = None,
        group_configs: list[GroupConfig] | None = None,
    ):
        self.http_settings = settings or load_http_settings()
        client_factory = (lambda _group: http_client) if http_client is not None else None
        self.registry = GroupRegistry(settings=self.http_settings, client_factory=client_factory)
        self.registry.register(JSONPLACEHOLDER_GROUP, base_url)
        self.registry.bind(TODO_SERVICE)
        self.registry.bind(POST_SERVICE)
        self.registry.configure(group_configs if group_configs is not None else load_group_configs())
        self.todos: ServiceProxy = self.registry.build_proxy(TODO_SERVICE)
        self.posts: ServiceProxy = self.registry.build_proxy(POST_SERVICE)

    def service(self, name: str) -> ServiceProxy:
        proxies = self.registry.proxies()
        try:
            return proxies[name]
        except KeyError:
            raise KeyError(f"Unknown service {name!r}; expected one of {', '.join(sorted(proxies))}") from None

    def close(self) -> None:
        self.registry.close()

    def __enter__(self) -> PlaceholderClients:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["PlaceholderClients"]
