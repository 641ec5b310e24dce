# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Service descriptors, client groups and proxies."""

from .codec import decode_body, encode_body, from_json, record_from_dict, record_to_dict, to_json
from .descriptor import (
    HTTP_METHODS,
    Operation,
    Param,
    ParamKind,
    ReturnKind,
    Returns,
    ServiceDescriptor,
    body,
    header,
    path,
    query,
)
from .group import ClientGroup
from .proxy import ServiceProxy
from .registry import ClientFactory, GroupRegistry

__all__ = [
    "HTTP_METHODS",
    "ClientFactory",
    "ClientGroup",
    "GroupRegistry",
    "Operation",
    "Param",
    "ParamKind",
    "ReturnKind",
    "Returns",
    "ServiceDescriptor",
    "ServiceProxy",
    "body",
    "decode_body",
    "encode_body",
    "from_json",
    "header",
    "path",
    "query",
    "record_from_dict",
    "record_to_dict",
    "to_json",
]
