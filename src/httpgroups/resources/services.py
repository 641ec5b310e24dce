# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Service descriptors and group presets for the JSONPlaceholder API."""

from __future__ import annotations

from ..config import GroupConfig
from ..service import Operation, Returns, ServiceDescriptor, body, path, query
from .models import Post, Todo

JSONPLACEHOLDER_GROUP = "jsonplaceholder"
JSONPLACEHOLDER_BASE_URL = "https://jsonplaceholder.typicode.com/"
GITHUB_GROUP = "github"
GITHUB_BASE_URL = "https://api.github.com"
GITHUB_ACCEPT = "application/vnd.github.v3+json"


def crud_operations(collection: str, record_type: type) -> list[Operation]:
    """find_all / find_by_id / create / update / delete over `/<collection>`."""
    root = f"/{collection}"
    item = f"/{collection}/{{id}}"
    return [
        Operation("find_all", "GET", root, returns=Returns.many(record_type)),
        Operation("find_by_id", "GET", item, params=(path("id"),), returns=Returns.one(record_type)),
        Operation("create", "POST", root, params=(body("record"),), returns=Returns.one(record_type)),
        Operation("update", "PUT", item, params=(path("id"), body("record")), returns=Returns.one(record_type)),
        Operation("delete", "DELETE", item, params=(path("id"),)),
    ]


TODO_SERVICE = ServiceDescriptor.define(
    "todos",
    [
        *crud_operations("todos", Todo),
        Operation("find_by_user", "GET", "/todos", params=(query("user_id", alias="userId"),), returns=Returns.many(Todo)),
    ],
    group=JSONPLACEHOLDER_GROUP,
)

POST_SERVICE = ServiceDescriptor.define(
    "posts",
    [
        *crud_operations("posts", Post),
        Operation("find_by_user", "GET", "/posts", params=(query("user_id", alias="userId"),), returns=Returns.many(Post)),
    ],
    group=JSONPLACEHOLDER_GROUP,
)

GITHUB_USER_SERVICE = ServiceDescriptor.define(
    "github_users",
    [
        Operation("find_by_login", "GET", "/users/{login}", params=(path("login"),), returns=Returns.raw()),
    ],
    group=GITHUB_GROUP,
)

DEFAULT_GROUP_CONFIGS = [
    GroupConfig(pattern=GITHUB_GROUP, base_url=GITHUB_BASE_URL, headers={"Accept": GITHUB_ACCEPT}),
    GroupConfig(pattern=JSONPLACEHOLDER_GROUP, base_url=JSONPLACEHOLDER_BASE_URL),
]

__all__ = [
    "DEFAULT_GROUP_CONFIGS",
    "GITHUB_ACCEPT",
    "GITHUB_BASE_URL",
    "GITHUB_GROUP",
    "GITHUB_USER_SERVICE",
    "JSONPLACEHOLDER_BASE_URL",
    "JSONPLACEHOLDER_GROUP",
    "POST_SERVICE",
    "TODO_SERVICE",
    "crud_operations",
]
