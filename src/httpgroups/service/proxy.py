# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Generic dispatcher that turns descriptor operations into HTTP exchanges."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..errors import ErrorCategory, HttpError, SerializationError, TransportError
from ..http.client import HttpClient
from ..http.headers import merge_headers
from ..http.models import HttpRequest, HttpResponse
from ..http.url import append_query, expand_template, join_url
from .codec import decode_body, encode_body
from .descriptor import Operation, ParamKind, ReturnKind, ServiceDescriptor
from .group import ClientGroup

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def bind_arguments(operation: Operation, args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> dict[str, Any]:
    """Map positional and keyword call arguments onto the operation's parameters."""
    params = operation.params
    if len(args) > len(params):
        raise TypeError(f"{operation.name}() takes {len(params)} positional argument(s) but {len(args)} were given")

    values: dict[str, Any] = {param.name: value for param, value in zip(params, args)}
    names = {param.name for param in params}
    for key, value in kwargs.items():
        if key not in names:
            raise TypeError(f"{operation.name}() got an unexpected keyword argument {key!r}")
        if key in values:
            raise TypeError(f"{operation.name}() got multiple values for argument {key!r}")
        values[key] = value

    for param in params:
        if param.name not in values:
            if param.required:
                raise TypeError(f"{operation.name}() missing required argument {param.name!r}")
            values[param.name] = None
        elif param.kind is ParamKind.PATH and values[param.name] is None:
            raise ValueError(f"{operation.name}() path argument {param.name!r} must not be None")
    return values


class ServiceProxy:
    """
    Callable stand-in for a ServiceDescriptor bound to one client group.

    `proxy.invoke("find_by_id", 1)` is the single call path; `proxy.find_by_id(1)`
    is attribute sugar over it. Every call takes an optional keyword-only
    `headers=` mapping layered over the group defaults.
    """

    def __init__(self, descriptor: ServiceDescriptor, group: ClientGroup, client: HttpClient):
        self._descriptor = descriptor
        self._group = group
        self._client = client

    @property
    def descriptor(self) -> ServiceDescriptor:
        return self._descriptor

    @property
    def group(self) -> ClientGroup:
        return self._group

    def build_request(
        self,
        operation: Operation,
        args: tuple[Any, ...] = (),
        kwargs: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpRequest:
        values = bind_arguments(operation, args, kwargs or {})

        path_values = {param.wire_name: values[param.name] for param in operation.params_of(ParamKind.PATH)}
        url = join_url(self._group.base_url, expand_template(operation.path, path_values))
        url = append_query(url, {param.wire_name: values[param.name] for param in operation.params_of(ParamKind.QUERY)})

        body: bytes | None = None
        content_headers: dict[str, str] = {}
        body_param = operation.body_param
        if body_param is not None and values[body_param.name] is not None:
            body = encode_body(values[body_param.name])
            content_headers["Content-Type"] = JSON_MEDIA_TYPE

        header_params = {param.wire_name: values[param.name] for param in operation.params_of(ParamKind.HEADER)}
        request_headers = merge_headers(
            {"Accept": JSON_MEDIA_TYPE},
            self._group.headers,
            content_headers,
            header_params,
            headers,
        )
        return HttpRequest(url=url, method=operation.method, headers=request_headers, body=body)

    def invoke(self, operation_name: str, /, *args: Any, headers: Mapping[str, str] | None = None, **kwargs: Any) -> Any:
        operation = self._descriptor.operation(operation_name)
        request = self.build_request(operation, args, kwargs, headers)
        logger.debug("%s.%s -> %s %s", self._descriptor.name, operation.name, request.method, request.url)
        response = self._client.request(request)
        return self._read_response(operation, request, response)

    def _read_response(self, operation: Operation, request: HttpRequest, response: HttpResponse) -> Any:
        if not response.ok or response.status_code is None:
            category = response.meta.get("error_category", ErrorCategory.UNKNOWN_ERROR)
            raise TransportError(
                response.error_message or f"{request.method} {request.url} failed without a response",
                category=category,
                error_type=response.error_type,
                url=request.url,
            )
        if not response.is_success:
            logger.debug("%s %s returned HTTP %s", request.method, request.url, response.status_code)
            raise HttpError(response.status_code, response.text, method=request.method, url=request.url)
        if response.meta.get("body_truncated") and operation.returns.kind is not ReturnKind.NONE:
            raise SerializationError(
                f"Response body from {request.method} {request.url} exceeded the {response.meta.get('body_bytes_limit')} byte limit"
            )
        return decode_body(operation.returns, response.text)

    def __getattr__(self, name: str) -> Any:
        descriptor = self.__dict__.get("_descriptor")
        if descriptor is None or name not in descriptor:
            raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")

        def call(*args: Any, headers: Mapping[str, str] | None = None, **kwargs: Any) -> Any:
            return self.invoke(name, *args, headers=headers, **kwargs)

        call.__name__ = name
        call.__qualname__ = f"{descriptor.name}.{name}"
        return call

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._descriptor.operation_names))

    def __repr__(self) -> str:
        return f"ServiceProxy(service={self._descriptor.name!r}, group={self._group.name!r}, base_url={self._group.base_url!r})"


__all__ = ["ServiceProxy", "bind_arguments"]
