# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Bundled JSONPlaceholder (and GitHub) resources."""

from .models import Post, Todo
from .services import (
    DEFAULT_GROUP_CONFIGS,
    GITHUB_GROUP,
    GITHUB_USER_SERVICE,
    JSONPLACEHOLDER_BASE_URL,
    JSONPLACEHOLDER_GROUP,
    POST_SERVICE,
    TODO_SERVICE,
)

__all__ = [
    "DEFAULT_GROUP_CONFIGS",
    "GITHUB_GROUP",
    "GITHUB_USER_SERVICE",
    "JSONPLACEHOLDER_BASE_URL",
    "JSONPLACEHOLDER_GROUP",
    "POST_SERVICE",
    "Post",
    "TODO_SERVICE",
    "Todo",
]
