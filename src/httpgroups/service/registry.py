# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Group registry: resolves service descriptors to client groups and builds proxies.

Startup is one pass: register groups, bind descriptors, apply GroupConfig records,
then build proxies. Building a proxy creates the group's HttpClient (one per group)
and freezes the group; re-registering a frozen group is a ConfigurationError.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Callable, Iterable, Mapping

from ..config import DEFAULT_GROUP, GroupConfig, HttpSettings
from ..errors import ConfigurationError
from ..http.client import HttpClient, create_default_http_client
from .descriptor import ServiceDescriptor
from .group import ClientGroup
from .proxy import ServiceProxy

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ClientGroup], HttpClient]

_WILDCARDS = frozenset("*?[")


def _is_literal(pattern: str) -> bool:
    return not any(char in _WILDCARDS for char in pattern)


class GroupRegistry:
    """
    Registry of named client groups and the services bound to them.

    `client_factory` builds the transport for a group; by default every group gets
    its own httpx-backed client created from `settings`.
    """

    def __init__(
        self,
        *,
        settings: HttpSettings | None = None,
        client_factory: ClientFactory | None = None,
        default_group: str = DEFAULT_GROUP,
    ):
        self.settings = settings
        self.default_group = default_group
        self._client_factory = client_factory or self._default_client_factory
        self._groups: dict[str, ClientGroup] = {}
        self._bindings: dict[str, tuple[ServiceDescriptor, str]] = {}
        self._clients: dict[str, HttpClient] = {}
        self._proxies: dict[str, ServiceProxy] = {}

    def _default_client_factory(self, group: ClientGroup) -> HttpClient:  # noqa: ARG002
        return create_default_http_client(self.settings)

    # -- groups -----------------------------------------------------------------

    def register(self, name: str, base_url: str, default_headers: Mapping[str, str] | None = None) -> ClientGroup:
        """Add or overwrite a group. The group must not be in use by a built proxy."""
        if name in self._clients:
            raise ConfigurationError(f"Group {name!r} is already in use and can no longer be changed")
        group = ClientGroup(name=name, base_url=base_url, headers=dict(default_headers or {}))
        replaced = name in self._groups
        self._groups[name] = group
        logger.debug("%s group %s -> %s", "Replaced" if replaced else "Registered", name, group.base_url)
        return group

    def group(self, name: str) -> ClientGroup:
        try:
            return self._groups[name]
        except KeyError:
            raise ConfigurationError(f"Group {name!r} is not registered") from None

    @property
    def group_names(self) -> list[str]:
        """Known group names: registered groups plus groups referenced by bindings."""
        names = list(self._groups)
        for _, group_name in self._bindings.values():
            if group_name not in names:
                names.append(group_name)
        return names

    def select(self, pattern: str) -> list[str]:
        """Return known group names matching a shell-style pattern."""
        return [name for name in self.group_names if fnmatch.fnmatchcase(name, pattern)]

    def configure(self, configs: GroupConfig | Iterable[GroupConfig]) -> None:
        """
        Apply GroupConfig records in order.

        Each record updates every known group matching its pattern: the base URL is
        replaced when given and headers are merged on top. A literal pattern that
        matches nothing registers that group (it then needs a base URL).
        """
        if isinstance(configs, GroupConfig):
            configs = [configs]
        for config in configs:
            matched = self.select(config.pattern)
            if not matched and _is_literal(config.pattern):
                matched = [config.pattern]
            if not matched:
                logger.debug("Group config %r matched no groups", config.pattern)
            for name in matched:
                current = self._groups.get(name)
                if current is None:
                    if not config.base_url:
                        raise ConfigurationError(f"Group {name!r} has no base URL configured")
                    self.register(name, config.base_url, config.headers)
                    continue
                updated = current.updated(base_url=config.base_url, headers=config.headers)
                self.register(name, updated.base_url, updated.headers)

    # -- services ---------------------------------------------------------------

    def bind(self, descriptor: ServiceDescriptor, group: str | None = None) -> str:
        """
        Associate a descriptor with a group and return the resolved group name.

        Resolution order: explicit `group`, the descriptor's own group, the default group.
        Only the default group may be bound before it is registered.
        """
        group_name = group or descriptor.group or self.default_group
        if group_name not in self._groups and group_name != self.default_group:
            raise ConfigurationError(f"Cannot bind service {descriptor.name!r}: group {group_name!r} is not registered")
        existing = self._bindings.get(descriptor.name)
        if existing is not None and existing[0] != descriptor:
            raise ConfigurationError(f"A different service named {descriptor.name!r} is already bound")
        if descriptor.name in self._proxies and existing is not None and existing[1] != group_name:
            raise ConfigurationError(f"Service {descriptor.name!r} already has a proxy bound to group {existing[1]!r}")
        self._bindings[descriptor.name] = (descriptor, group_name)
        logger.debug("Bound service %s to group %s", descriptor.name, group_name)
        return group_name

    def bound_group(self, descriptor: ServiceDescriptor) -> str | None:
        binding = self._bindings.get(descriptor.name)
        return binding[1] if binding else None

    def _client_for(self, group: ClientGroup) -> HttpClient:
        client = self._clients.get(group.name)
        if client is None:
            client = self._client_factory(group)
            self._clients[group.name] = client
            logger.debug("Created HTTP client for group %s", group.name)
        return client

    def build_proxy(self, descriptor: ServiceDescriptor) -> ServiceProxy:
        """Return the proxy for a descriptor, binding it to its default group first if needed."""
        proxy = self._proxies.get(descriptor.name)
        if proxy is not None and proxy.descriptor == descriptor:
            return proxy
        if descriptor.name not in self._bindings:
            self.bind(descriptor)
        bound_descriptor, group_name = self._bindings[descriptor.name]
        if bound_descriptor != descriptor:
            raise ConfigurationError(f"A different service named {descriptor.name!r} is already bound")
        group = self.group(group_name)
        proxy = ServiceProxy(descriptor, group, self._client_for(group))
        self._proxies[descriptor.name] = proxy
        return proxy

    def proxies(self) -> dict[str, ServiceProxy]:
        """Build (or fetch) proxies for every bound service, keyed by service name."""
        return {name: self.build_proxy(descriptor) for name, (descriptor, _) in list(self._bindings.items())}

    def close(self) -> None:
        for name, client in self._clients.items():
            try:
                client.close()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to close HTTP client for group %s: %s", name, exc)
            else:
                logger.debug("Closed HTTP client for group %s", name)

    def __enter__(self) -> GroupRegistry:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["ClientFactory", "GroupRegistry"]
