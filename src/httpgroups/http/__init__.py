# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client
from .headers import header_value, merge_headers, normalize_headers
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse
from .url import append_query, expand_template, join_url, template_placeholders, validate_base_url

__all__ = [
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "StubHttpClient",
    "append_query",
    "create_default_http_client",
    "expand_template",
    "header_value",
    "join_url",
    "merge_headers",
    "normalize_headers",
    "template_placeholders",
    "validate_base_url",
]
