# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import logging

import httpx
import pytest

from httpgroups.config import GroupConfig, HttpSettings, load_group_configs
from httpgroups.errors import ConfigurationError
from httpgroups.http.adapters import StubHttpClient
from httpgroups.http.httpx_client import HttpxClient
from httpgroups.http.models import HttpResponse
from httpgroups.resources import (
    DEFAULT_GROUP_CONFIGS,
    GITHUB_USER_SERVICE,
    JSONPLACEHOLDER_BASE_URL,
    POST_SERVICE,
    TODO_SERVICE,
)
from httpgroups.resources.services import GITHUB_ACCEPT
from httpgroups.service.descriptor import Operation, ServiceDescriptor
from httpgroups.service.registry import GroupRegistry

TODO_JSON = {"userId": 1, "id": 1, "title": "delectus aut autem", "completed": False}


class CountingFactory:
    def __init__(self):
        self.clients: dict[str, StubHttpClient] = {}
        self.calls: list[str] = []

    def __call__(self, group):
        self.calls.append(group.name)
        return self.clients.setdefault(group.name, StubHttpClient())


def test_register_validates_base_url():
    registry = GroupRegistry(client_factory=CountingFactory())
    for bad in ("", "   ", "not a url", "ftp://files.example.com", "https://"):
        with pytest.raises(ConfigurationError):
            registry.register("jsonplaceholder", bad)
    group = registry.register("jsonplaceholder", JSONPLACEHOLDER_BASE_URL, {"X-Api": "1"})
    assert group.base_url == JSONPLACEHOLDER_BASE_URL
    assert dict(group.headers) == {"X-Api": "1"}
    assert registry.group("jsonplaceholder") is group


def test_register_overwrites_until_group_is_in_use():
    factory = CountingFactory()
    registry = GroupRegistry(client_factory=factory)
    registry.register("jsonplaceholder", "https://old.example")
    registry.register("jsonplaceholder", JSONPLACEHOLDER_BASE_URL)
    assert registry.group("jsonplaceholder").base_url == JSONPLACEHOLDER_BASE_URL

    registry.build_proxy(TODO_SERVICE)
    with pytest.raises(ConfigurationError, match="already in use"):
        registry.register("jsonplaceholder", "https://new.example")


def test_group_headers_are_read_only():
    registry = GroupRegistry(client_factory=CountingFactory())
    group = registry.register("g", "https://example.com", {"A": "1"})
    with pytest.raises(TypeError):
        group.headers["B"] = "2"


def test_bind_unregistered_group_fails_before_any_request():
    factory = CountingFactory()
    registry = GroupRegistry(client_factory=factory)
    with pytest.raises(ConfigurationError, match="not registered"):
        registry.bind(TODO_SERVICE)
    with pytest.raises(ConfigurationError):
        registry.bind(TODO_SERVICE, "nowhere")
    assert factory.calls == []


def test_bind_to_default_group_and_resolution_order():
    registry = GroupRegistry(client_factory=CountingFactory())
    plain = ServiceDescriptor.define("plain", [Operation("ping", "GET", "/ping")])
    assert registry.bind(plain) == "default"
    with pytest.raises(ConfigurationError):
        registry.build_proxy(plain)

    registry.register("default", "https://default.example")
    registry.register("jsonplaceholder", JSONPLACEHOLDER_BASE_URL)
    registry.register("mirror", "http://localhost:3000")
    assert registry.bind(TODO_SERVICE) == "jsonplaceholder"
    assert registry.bind(POST_SERVICE, "mirror") == "mirror"
    assert registry.bound_group(POST_SERVICE) == "mirror"
    assert registry.build_proxy(plain).group.base_url == "https://default.example"


def test_build_proxy_binds_descriptor_group_and_routes_to_base_url():
    factory = CountingFactory()
    registry = GroupRegistry(client_factory=factory)
    registry.register("jsonplaceholder", JSONPLACEHOLDER_BASE_URL)
    proxy = registry.build_proxy(TODO_SERVICE)
    stub = factory.clients["jsonplaceholder"]
    stub.add(JSONPLACEHOLDER_BASE_URL + "todos/1", HttpResponse(ok=True, status_code=200, text=json.dumps(TODO_JSON)))

    assert proxy.find_by_id(1).title == "delectus aut autem"
    assert stub.requests[0].url.startswith(JSONPLACEHOLDER_BASE_URL)
    assert registry.bound_group(TODO_SERVICE) == "jsonplaceholder"


def test_one_client_per_group_and_one_proxy_per_descriptor():
    factory = CountingFactory()
    registry = GroupRegistry(client_factory=factory)
    registry.register("jsonplaceholder", JSONPLACEHOLDER_BASE_URL)
    registry.bind(TODO_SERVICE)
    registry.bind(POST_SERVICE)
    proxies = registry.proxies()
    assert sorted(proxies) == ["posts", "todos"]
    assert registry.build_proxy(TODO_SERVICE) is proxies["todos"]
    assert factory.calls == ["jsonplaceholder"]


def test_same_name_different_descriptor_is_rejected():
    registry = GroupRegistry(client_factory=CountingFactory())
    registry.register("jsonplaceholder", JSONPLACEHOLDER_BASE_URL)
    registry.bind(TODO_SERVICE)
    impostor = ServiceDescriptor.define("todos", [Operation("find_all", "GET", "/other")], group="jsonplaceholder")
    with pytest.raises(ConfigurationError):
        registry.bind(impostor)


def test_rebinding_after_proxy_built_is_rejected():
    registry = GroupRegistry(client_factory=CountingFactory())
    registry.register("jsonplaceholder", JSONPLACEHOLDER_BASE_URL)
    registry.register("mirror", "http://localhost:3000")
    registry.build_proxy(TODO_SERVICE)
    assert registry.bind(TODO_SERVICE) == "jsonplaceholder"
    with pytest.raises(ConfigurationError):
        registry.bind(TODO_SERVICE, "mirror")


def test_two_groups_route_and_attach_only_their_own_headers():
    factory = CountingFactory()
    registry = GroupRegistry(client_factory=factory)
    registry.configure(DEFAULT_GROUP_CONFIGS)
    registry.bind(TODO_SERVICE)
    registry.bind(GITHUB_USER_SERVICE)
    proxies = registry.proxies()

    jp = factory.clients["jsonplaceholder"]
    gh = factory.clients["github"]
    jp.add(JSONPLACEHOLDER_BASE_URL + "todos/1", HttpResponse(ok=True, status_code=200, text=json.dumps(TODO_JSON)))
    gh.add("https://api.github.com/users/octocat", HttpResponse(ok=True, status_code=200, text='{"login": "octocat"}'))

    proxies["todos"].find_by_id(1)
    assert proxies["github_users"].find_by_login("octocat") == {"login": "octocat"}

    assert [r.url for r in jp.requests] == [JSONPLACEHOLDER_BASE_URL + "todos/1"]
    assert [r.url for r in gh.requests] == ["https://api.github.com/users/octocat"]
    assert jp.requests[0].headers["Accept"] == "application/json"
    assert gh.requests[0].headers["Accept"] == GITHUB_ACCEPT
    assert sorted(factory.calls) == ["github", "jsonplaceholder"]


def test_select_filters_known_groups_by_pattern():
    registry = GroupRegistry(client_factory=CountingFactory())
    registry.register("github", "https://api.github.com")
    registry.register("gitlab", "https://gitlab.com/api/v4")
    registry.register("jsonplaceholder", JSONPLACEHOLDER_BASE_URL)
    assert registry.select("git*") == ["github", "gitlab"]
    assert registry.select("jsonplaceholder") == ["jsonplaceholder"]
    assert registry.select("nothing*") == []


def test_configure_applies_records_to_matching_groups():
    registry = GroupRegistry(client_factory=CountingFactory())
    registry.register("github", "https://api.github.com", {"Accept": GITHUB_ACCEPT})
    registry.register("gitlab", "https://gitlab.com/api/v4")
    registry.register("jsonplaceholder", JSONPLACEHOLDER_BASE_URL)

    registry.configure(GroupConfig(pattern="git*", headers={"User-Agent": "octo-bot"}))
    registry.configure([GroupConfig(pattern="jsonplaceholder", base_url="http://localhost:3000")])

    assert dict(registry.group("github").headers) == {"Accept": GITHUB_ACCEPT, "User-Agent": "octo-bot"}
    assert dict(registry.group("gitlab").headers) == {"User-Agent": "octo-bot"}
    assert registry.group("github").base_url == "https://api.github.com"
    assert registry.group("jsonplaceholder").base_url == "http://localhost:3000"
    assert dict(registry.group("jsonplaceholder").headers) == {}


def test_configure_reaches_bound_but_unregistered_default_group():
    registry = GroupRegistry(client_factory=CountingFactory())
    plain = ServiceDescriptor.define("plain", [Operation("ping", "GET", "/ping")])
    registry.bind(plain)
    registry.configure([GroupConfig(pattern="*", base_url="https://default.example")])
    assert registry.build_proxy(plain).group.base_url == "https://default.example"


def test_configure_literal_pattern_without_base_url_fails():
    registry = GroupRegistry(client_factory=CountingFactory())
    with pytest.raises(ConfigurationError, match="no base URL"):
        registry.configure([GroupConfig(pattern="github", headers={"Accept": GITHUB_ACCEPT})])
    registry.configure([GroupConfig(pattern="git*", base_url="https://api.github.com")])
    assert registry.group_names == []


def test_configure_from_env_records(monkeypatch):
    monkeypatch.setenv("HTTPGROUPS_GROUPS", '[{"pattern": "jsonplaceholder", "base_url": "http://127.0.0.1:8080/api"}]')
    factory = CountingFactory()
    registry = GroupRegistry(client_factory=factory)
    registry.configure(load_group_configs())
    proxy = registry.build_proxy(TODO_SERVICE)
    factory.clients["jsonplaceholder"].add("http://127.0.0.1:8080/api/todos", HttpResponse(ok=True, status_code=200, text="[]"))
    assert proxy.find_all() == []


def test_close_closes_every_group_client():
    factory = CountingFactory()
    with GroupRegistry(client_factory=factory) as registry:
        registry.configure(DEFAULT_GROUP_CONFIGS)
        registry.build_proxy(TODO_SERVICE)
        registry.build_proxy(GITHUB_USER_SERVICE)
    assert all(client.closed for client in factory.clients.values())


def test_close_logs_failures_and_keeps_closing(caplog):
    class BrokenClient(StubHttpClient):
        def close(self):
            raise RuntimeError("pool already gone")

    clients = {"jsonplaceholder": BrokenClient(), "github": StubHttpClient()}
    registry = GroupRegistry(client_factory=lambda group: clients[group.name])
    registry.configure(DEFAULT_GROUP_CONFIGS)
    registry.build_proxy(TODO_SERVICE)
    registry.build_proxy(GITHUB_USER_SERVICE)

    with caplog.at_level(logging.DEBUG, logger="httpgroups.service.registry"):
        registry.close()

    assert clients["github"].closed is True
    messages = [record.getMessage() for record in caplog.records]
    assert "Failed to close HTTP client for group jsonplaceholder: pool already gone" in messages
    assert "Closed HTTP client for group github" in messages
    assert "Closed HTTP client for group jsonplaceholder" not in messages


def test_default_factory_builds_httpx_clients_from_settings(monkeypatch):
    created = []

    class FakeHttpxClient:
        def __init__(self, **kwargs):
            created.append(kwargs)

        def close(self):
            pass

    monkeypatch.setattr(httpx, "Client", FakeHttpxClient)
    registry = GroupRegistry(settings=HttpSettings(timeout=3.0))
    registry.configure(DEFAULT_GROUP_CONFIGS)
    todos = registry.build_proxy(TODO_SERVICE)
    github = registry.build_proxy(GITHUB_USER_SERVICE)
    assert isinstance(todos._client, HttpxClient)
    assert todos._client is not github._client
    assert [kwargs["timeout"] for kwargs in created] == [3.0, 3.0]
    registry.close()
