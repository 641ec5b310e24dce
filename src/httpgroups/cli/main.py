# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpgroups CLI: query the JSONPlaceholder todos/posts services."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import is_dataclass
from typing import Any

from ..config import HttpSettings, load_http_settings
from ..errors import HttpError, HttpServiceError, TransportError, error_category_to_reason
from ..http import create_default_http_client
from ..log import setup_logging
from ..resources.services import JSONPLACEHOLDER_BASE_URL
from ..runtime import PlaceholderClients
from ..service.codec import record_to_dict

RESOURCES = ("todos", "posts")
ACTIONS = ("list", "get", "delete")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Typed client for the JSONPlaceholder todos/posts API")
    parser.add_argument("resource", choices=RESOURCES, help="Resource collection")
    parser.add_argument("action", choices=ACTIONS, help="Operation to run")
    parser.add_argument("id", nargs="?", type=int, help="Record id (required for get/delete)")
    parser.add_argument("--user-id", type=int, help="Only list records owned by this user")
    parser.add_argument("--base-url", default=JSONPLACEHOLDER_BASE_URL, help="Base URL of the jsonplaceholder group")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-friendly summary",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for local mirrors with self-signed certs)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: HTTPGROUPS_LOG_LEVEL or WARNING)")
    return parser


def _to_payload(value: Any) -> Any:
    if isinstance(value, list):
        return [_to_payload(item) for item in value]
    if is_dataclass(value) and not isinstance(value, type):
        return record_to_dict(value)
    return value


def _print_json(data: Any) -> None:
    json.dump(_to_payload(data), sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _summary(record: Any) -> str:
    payload = _to_payload(record)
    if not isinstance(payload, dict):
        return str(payload)
    marker = ""
    if "completed" in payload:
        marker = "[x] " if payload["completed"] else "[ ] "
    return f"#{payload.get('id')} {marker}{payload.get('title', '')}".rstrip()


def _pretty_print(result: Any) -> None:
    if result is None:
        print("Done.")
        return
    if isinstance(result, list):
        for record in result:
            print(_summary(record))
        print(f"({len(result)} records)")
        return
    print(_summary(result))
    payload = _to_payload(result)
    if isinstance(payload, dict) and isinstance(payload.get("body"), str):
        print(payload["body"])


def run(clients: PlaceholderClients, args: argparse.Namespace) -> Any:
    proxy = clients.service(args.resource)
    if args.action == "list":
        if args.user_id is not None:
            return proxy.find_by_user(args.user_id)
        return proxy.find_all()
    if args.action == "get":
        return proxy.find_by_id(args.id)
    return proxy.delete(args.id)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    if args.action in ("get", "delete") and args.id is None:
        parser.error(f"{args.action} requires a record id")

    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    http_client = create_default_http_client(settings)

    try:
        with PlaceholderClients(http_client, base_url=args.base_url, settings=settings) as clients:
            result = run(clients, args)
    except HttpError as exc:
        print(f"error: {exc}", file=sys.stderr)
        if exc.body:
            print(exc.body, file=sys.stderr)
        return 1
    except TransportError as exc:
        print(f"error: {error_category_to_reason(exc.category)}: {exc}", file=sys.stderr)
        return 1
    except HttpServiceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        http_client.close()

    if args.json:
        _print_json(result)
    else:
        _pretty_print(result)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
