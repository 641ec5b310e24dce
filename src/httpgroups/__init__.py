# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
httpgroups package entrypoint.

Declarative HTTP service clients: REST operations are described as data
(ServiceDescriptor), bound to named client groups carrying a base URL and default
headers (GroupRegistry), and called through generated proxies (ServiceProxy).
HTTP behavior is abstracted behind an injectable client interface, and resource
records are modeled with typed dataclasses.
"""

from .config import DEFAULT_GROUP, GroupConfig, HttpSettings, load_group_configs, load_http_settings
from .errors import (
    ConfigurationError,
    ErrorCategory,
    HttpError,
    HttpServiceError,
    SerializationError,
    TransportError,
)
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .resources import POST_SERVICE, TODO_SERVICE, Post, Todo
from .runtime import PlaceholderClients
from .service import (
    ClientGroup,
    GroupRegistry,
    Operation,
    Param,
    ParamKind,
    Returns,
    ServiceDescriptor,
    ServiceProxy,
    body,
    header,
    path,
    query,
)
from .version import __version__

__all__ = [
    "DEFAULT_GROUP",
    "ClientGroup",
    "ConfigurationError",
    "ErrorCategory",
    "GroupConfig",
    "GroupRegistry",
    "HttpClient",
    "HttpError",
    "HttpRequest",
    "HttpResponse",
    "HttpServiceError",
    "HttpSettings",
    "HttpxClient",
    "Operation",
    "POST_SERVICE",
    "Param",
    "ParamKind",
    "PlaceholderClients",
    "Post",
    "Returns",
    "SerializationError",
    "ServiceDescriptor",
    "ServiceProxy",
    "StubHttpClient",
    "TODO_SERVICE",
    "Todo",
    "TransportError",
    "body",
    "create_default_http_client",
    "header",
    "load_group_configs",
    "load_http_settings",
    "path",
    "query",
    "setup_logging",
    "__version__",
]
