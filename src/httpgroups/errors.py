# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class HttpServiceError(Exception):
    """Base class for every error raised by httpgroups."""


class ConfigurationError(HttpServiceError):
    """Invalid group, base URL or service descriptor. Raised at startup."""


class HttpError(HttpServiceError):
    """Non-2xx response returned by the remote service."""

    def __init__(self, status_code: int, body: str = "", *, method: str | None = None, url: str | None = None):
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url
        target = f" for {method} {url}" if method and url else ""
        super().__init__(f"HTTP {status_code}{target}")


class SerializationError(HttpServiceError):
    """A request body could not be encoded, or a response body could not be decoded."""


class TransportError(HttpServiceError):
    """The request never produced an HTTP status (DNS, TLS, timeout, connection)."""

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR,
        error_type: str | None = None,
        url: str | None = None,
    ):
        self.category = category
        self.error_type = error_type
        self.url = url
        super().__init__(message)


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    # httpx re-raises the underlying socket/ssl error as its own type.
    if isinstance(exc, httpx.TransportError) and exc.__cause__ is not None:
        nested = categorize_exception(exc.__cause__)
        if nested is not ErrorCategory.UNKNOWN_ERROR:
            return nested

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error",
        None: "",
    }
    return mapping.get(category, "Request failed due to network error")


__all__ = [
    "ConfigurationError",
    "ErrorCategory",
    "HttpError",
    "HttpServiceError",
    "SerializationError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
]
