# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Logging setup for the httpgroups CLI.

Library modules only call `logging.getLogger(__name__)`, so everything they emit
lives under the "httpgroups" logger: group lifecycle in
httpgroups.service.registry, per-call dispatch in httpgroups.service.proxy and
truncation/transport failures in httpgroups.http.httpx_client. Applications
embedding the library configure those loggers themselves; `setup_logging` is
what the CLI uses.
"""

from __future__ import annotations

import logging
import os

PACKAGE_LOGGER = "httpgroups"
# httpx logs every request at INFO; only let it through when debugging.
TRANSPORT_LOGGERS = ("httpx", "httpcore")


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("HTTPGROUPS_LOG_LEVEL") or "WARNING").upper()
    resolved = getattr(logging, name, None)
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | None = None) -> int:
    """
    Configure root handlers and the httpgroups logger level.

    `level` wins over HTTPGROUPS_LOG_LEVEL; unknown names fall back to WARNING.
    Returns the numeric level that was applied.
    """
    resolved = _resolve_level(level)
    logging.basicConfig(level=resolved, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger(PACKAGE_LOGGER).setLevel(resolved)
    transport_level = resolved if resolved <= logging.DEBUG else max(resolved, logging.WARNING)
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
    return resolved


__all__ = ["PACKAGE_LOGGER", "setup_logging"]
