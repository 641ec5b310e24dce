# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
The send capability every client group is bound to.

ServiceProxy never talks to httpx directly. It hands a fully built HttpRequest
to an HttpClient and interprets the HttpResponse it gets back, so tests and
alternative transports only need to provide `request` and `close`.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpClient(Protocol):
    """
    Sends one HTTP exchange per `request` call.

    The returned response has `ok=True` whenever a status line was received,
    including 4xx/5xx answers; status interpretation belongs to the caller.
    `ok=False` means no exchange happened (timeout, DNS, TLS, refused
    connection) and `meta["error_category"]` should carry an ErrorCategory.
    Transport exceptions are reported that way instead of being raised.

    A registry shares one client between every proxy of a group, so
    implementations must tolerate concurrent `request` calls. `close` releases
    pooled connections and is called once when the registry shuts down.
    """

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None: ...


def create_default_http_client(settings: HttpSettings | None = None) -> HttpClient:
    """Build the httpx-backed client, reading HTTPGROUPS_* settings when none are given."""
    from .httpx_client import HttpxClient

    settings = settings or load_http_settings()
    logger.debug(
        "Creating httpx client (timeout=%s, verify_ssl=%s, max_body_bytes=%s)",
        settings.timeout,
        settings.verify_ssl,
        settings.max_body_bytes,
    )
    return HttpxClient(settings)


__all__ = ["HttpClient", "create_default_http_client"]
