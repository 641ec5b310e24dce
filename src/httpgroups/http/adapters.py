# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory HttpClient used by tests and offline demos."""

from __future__ import annotations

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Responses are looked up by `(METHOD, url)` first, then by `url` alone. Every
    request is recorded in `requests`, in order.
    """

    def __init__(self, responses: dict[str, HttpResponse] | None = None):
        self._responses: dict[tuple[str | None, str], HttpResponse] = {
            (None, url): response for url, response in (responses or {}).items()
        }
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: HttpResponse, *, method: str | None = None) -> None:
        self._responses[(method.upper() if method else None, url)] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        for key in ((request.method.upper(), request.url), (None, request.url)):
            if key in self._responses:
                return self._responses[key]
        return HttpResponse(ok=False, status_code=None, url=request.url, error_message="No stubbed response configured")

    def close(self) -> None:
        self.closed = True
