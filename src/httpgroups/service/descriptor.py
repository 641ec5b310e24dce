# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Service descriptors: declarative tables of REST operations.

A descriptor carries no behaviour. Each Operation names its verb, path template,
parameter bindings and return shape; ServiceProxy turns calls into requests by
reading this table. Every structural mistake is reported as ConfigurationError
when the descriptor is constructed, so a bad template never reaches the network.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from ..errors import ConfigurationError
from ..http.url import template_placeholders

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH"})
RESERVED_PARAM_NAMES = frozenset({"headers"})
# ServiceProxy members; an operation with one of these names would be shadowed.
RESERVED_OPERATION_NAMES = frozenset({"descriptor", "group", "invoke", "build_request"})


class ParamKind(str, Enum):
    PATH = "path"
    QUERY = "query"
    BODY = "body"
    HEADER = "header"


@dataclass(frozen=True)
class Param:
    """Binding of one call argument to a part of the request."""

    name: str
    kind: ParamKind
    required: bool = True
    alias: str | None = None

    @property
    def wire_name(self) -> str:
        """Placeholder, query key or header name used on the wire."""
        return self.alias or self.name


def path(name: str, *, alias: str | None = None) -> Param:
    return Param(name, ParamKind.PATH, required=True, alias=alias)


def query(name: str, *, alias: str | None = None, required: bool = False) -> Param:
    return Param(name, ParamKind.QUERY, required=required, alias=alias)


def body(name: str, *, required: bool = True) -> Param:
    return Param(name, ParamKind.BODY, required=required)


def header(name: str, *, alias: str | None = None, required: bool = False) -> Param:
    return Param(name, ParamKind.HEADER, required=required, alias=alias)


class ReturnKind(str, Enum):
    NONE = "none"
    ONE = "one"
    MANY = "many"
    RAW = "raw"


@dataclass(frozen=True)
class Returns:
    """Expected response shape: nothing, one record, a list of records, or raw JSON."""

    kind: ReturnKind = ReturnKind.NONE
    record_type: type | None = None

    def __post_init__(self) -> None:
        if self.kind in (ReturnKind.ONE, ReturnKind.MANY):
            if self.record_type is None or not dataclasses.is_dataclass(self.record_type):
                raise ConfigurationError(f"Return shape {self.kind.value!r} needs a dataclass record type")
        elif self.record_type is not None:
            raise ConfigurationError(f"Return shape {self.kind.value!r} does not take a record type")

    @classmethod
    def nothing(cls) -> Returns:
        return cls(ReturnKind.NONE)

    @classmethod
    def one(cls, record_type: type) -> Returns:
        return cls(ReturnKind.ONE, record_type)

    @classmethod
    def many(cls, record_type: type) -> Returns:
        return cls(ReturnKind.MANY, record_type)

    @classmethod
    def raw(cls) -> Returns:
        return cls(ReturnKind.RAW)


@dataclass(frozen=True)
class Operation:
    """One REST call: verb + path template + argument bindings + return shape."""

    name: str
    method: str
    path: str
    params: tuple[Param, ...] = ()
    returns: Returns = field(default_factory=Returns.nothing)

    def __post_init__(self) -> None:
        method = str(self.method or "").upper()
        if method not in HTTP_METHODS:
            raise ConfigurationError(f"Operation {self.name!r}: unsupported HTTP method {self.method!r}")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "params", tuple(self.params))
        self._validate()

    def _validate(self) -> None:
        if not self.name or not self.name.isidentifier():
            raise ConfigurationError(f"Operation name {self.name!r} must be a valid identifier")
        if self.name.startswith("_") or self.name in RESERVED_OPERATION_NAMES:
            raise ConfigurationError(f"Operation name {self.name!r} is reserved")

        seen: set[str] = set()
        for param in self.params:
            if param.name in RESERVED_PARAM_NAMES:
                raise ConfigurationError(f"Operation {self.name!r}: parameter name {param.name!r} is reserved")
            if param.name in seen:
                raise ConfigurationError(f"Operation {self.name!r}: duplicate parameter {param.name!r}")
            seen.add(param.name)

        bodies = [param for param in self.params if param.kind is ParamKind.BODY]
        if len(bodies) > 1:
            raise ConfigurationError(f"Operation {self.name!r}: at most one body parameter is allowed")

        placeholders = template_placeholders(self.path)
        bound = {param.wire_name for param in self.params if param.kind is ParamKind.PATH}
        unbound = [name for name in placeholders if name not in bound]
        if unbound:
            raise ConfigurationError(
                f"Operation {self.name!r}: placeholder(s) {', '.join(unbound)} in {self.path!r} have no path parameter"
            )
        unused = sorted(bound - set(placeholders))
        if unused:
            raise ConfigurationError(
                f"Operation {self.name!r}: path parameter(s) {', '.join(unused)} do not appear in {self.path!r}"
            )

    @property
    def body_param(self) -> Param | None:
        for param in self.params:
            if param.kind is ParamKind.BODY:
                return param
        return None

    def params_of(self, kind: ParamKind) -> list[Param]:
        return [param for param in self.params if param.kind is kind]


@dataclass(frozen=True)
class ServiceDescriptor:
    """
    Immutable set of operations for one REST resource.

    `group` names the client group the service belongs to when `bind()` is called
    without an explicit group.
    """

    name: str
    operations: tuple[Operation, ...]
    group: str | None = None
    _index: Mapping[str, Operation] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name or not str(self.name).strip():
            raise ConfigurationError("Service descriptor name must not be empty")
        operations = tuple(self.operations)
        index: dict[str, Operation] = {}
        for operation in operations:
            if operation.name in index:
                raise ConfigurationError(f"Service {self.name!r}: duplicate operation {operation.name!r}")
            index[operation.name] = operation
        object.__setattr__(self, "operations", operations)
        object.__setattr__(self, "_index", MappingProxyType(index))

    @classmethod
    def define(cls, name: str, operations: Iterable[Operation], *, group: str | None = None) -> ServiceDescriptor:
        return cls(name=name, operations=tuple(operations), group=group)

    def operation(self, name: str) -> Operation:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"Service {self.name!r} has no operation {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._index

    @property
    def operation_names(self) -> list[str]:
        return list(self._index)


__all__ = [
    "HTTP_METHODS",
    "RESERVED_OPERATION_NAMES",
    "Operation",
    "Param",
    "ParamKind",
    "ReturnKind",
    "Returns",
    "ServiceDescriptor",
    "body",
    "header",
    "path",
    "query",
]
