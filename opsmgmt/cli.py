"""Command-line entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

import structlog

from opsmgmt.client import OpsClient
from opsmgmt.config.logging import setup_logging
from opsmgmt.config.settings import get_settings
from opsmgmt.exceptions import ApiError, ConfigError
from opsmgmt.policy.actions import allowed_actions
from opsmgmt.types import EntityType

logger = structlog.get_logger(__name__)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="opsmgmt", description="Operations management client")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="store an access token")
    login.add_argument("access_token")
    login.add_argument("--refresh-token")

    sub.add_parser("logout", help="forget stored tokens")
    sub.add_parser("tenants", help="list your organizations")

    switch = sub.add_parser("switch", help="make a tenant active")
    switch.add_argument("tenant_id")

    actions = sub.add_parser("actions", help="actions offered for an entity status")
    actions.add_argument("entity", choices=[e.value for e in EntityType])
    actions.add_argument("status")

    orders = sub.add_parser("purchase-orders", help="list purchase orders")
    orders.add_argument("--status")
    orders.add_argument("--page", type=int, default=1)
    orders.add_argument("--limit", type=int, default=20)
    return parser


async def _run(args: argparse.Namespace) -> int:
    async with OpsClient() as ops:
        if args.command == "login":
            ops.login(args.access_token, args.refresh_token)
            return 0
        if args.command == "logout":
            ops.logout()
            return 0
        if args.command == "tenants":
            tenants = await ops.tenants.fetch_user_tenants()
            if ops.context.error:
                print(ops.context.error, file=sys.stderr)
                return 1
            current = ops.context.tenant_id
            _print_json(
                [
                    {"id": t.id, "name": t.name, "slug": t.slug, "current": t.id == current}
                    for t in tenants
                ]
            )
            return 0
        if args.command == "switch":
            await ops.tenants.fetch_user_tenants()
            tenant = await ops.tenants.switch_tenant(args.tenant_id)
            if tenant is None:
                print(f"Unknown tenant: {args.tenant_id}", file=sys.stderr)
                return 1
            return 0
        if args.command == "purchase-orders":
            page = await ops.purchase_orders.list(
                status=args.status, page=args.page, limit=args.limit
            )
            _print_json(page.model_dump(mode="json", by_alias=True))
            return 0
    return 2


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return 2
    setup_logging(log_level=settings.log_level, json_output=settings.log_json)

    if args.command == "actions":
        _print_json(sorted(a.value for a in allowed_actions(args.entity, args.status)))
        return 0

    try:
        return asyncio.run(_run(args))
    except ApiError as exc:
        logger.error("command_failed", command=args.command, status=exc.status)
        _print_json(exc.to_dict())
        return 1


if __name__ == "__main__":
    sys.exit(main())
