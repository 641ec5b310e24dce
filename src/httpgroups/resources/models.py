# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSONPlaceholder resource records."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Todo:
    user_id: int | None = field(metadata={"json": "userId"})
    id: int | None
    title: str
    completed: bool


@dataclass(frozen=True)
class Post:
    user_id: int | None = field(metadata={"json": "userId"})
    id: int | None
    title: str
    body: str
