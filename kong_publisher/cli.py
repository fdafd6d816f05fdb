"""Kong publisher CLI.

Entry point registered as ``kong-publisher`` in ``pyproject.toml``::

    kong-publisher publish-routes myapp.main:app --path api -r
    kong-publisher routes myapp.main:app --method POST
"""

from __future__ import annotations

import argparse
import os
import sys

from kong_publisher.core.config import get_settings
from kong_publisher.core.logging import setup_logging
from kong_publisher.schemas.route import SORT_FIELDS, RouteDescriptor, RouteQuery
from kong_publisher.services.kong_client import KongClient
from kong_publisher.services.publisher import NO_ROUTES_MESSAGE, RoutePublisher
from kong_publisher.services.result_log import ResultLog
from kong_publisher.services.route_filter import filter_routes
from kong_publisher.services.route_source import AppRouteSource, resolve_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kong-publisher",
        description="Publish an ASGI application's routes to the Kong admin API.",
    )
    subparsers = parser.add_subparsers(dest="command")

    route_options = argparse.ArgumentParser(add_help=False)
    route_options.add_argument("app", help="Import string (e.g. myapp.main:app)")
    route_options.add_argument("--method", help="Filter the routes by method.")
    route_options.add_argument("--name", help="Filter the routes by name.")
    route_options.add_argument("--path", help="Filter the routes by path.")
    route_options.add_argument(
        "-r",
        "--reverse",
        action="store_true",
        help="Reverse the ordering of the routes.",
    )
    route_options.add_argument(
        "--sort",
        default="uri",
        choices=SORT_FIELDS,
        help="The column (host, method, uri, name, action, middleware) to sort by.",
    )

    # -- publish-routes ---------------------------------------------------
    publish_parser = subparsers.add_parser(
        "publish-routes",
        aliases=["kong:publish-route"],
        parents=[route_options],
        help="Publish all registered routes",
    )
    publish_parser.add_argument(
        "--app-url",
        default=None,
        help="Base URL Kong forwards to (defaults to APP_URL)",
    )

    # -- routes -----------------------------------------------------------
    subparsers.add_parser(
        "routes",
        parents=[route_options],
        help="List registered routes",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``kong-publisher`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.service_name,
    )

    source = AppRouteSource(_load_app(args.app))
    query = RouteQuery(
        method=args.method,
        name=args.name,
        path=args.path,
        sort=args.sort,
        reverse=args.reverse,
    )

    if args.command == "routes":
        list_routes(source.routes(), query)
        return

    with KongClient(settings.kong_admin_url, timeout=settings.kong_timeout) as client:
        publisher = RoutePublisher(
            source,
            client,
            ResultLog(settings.log_dir),
            args.app_url or settings.app_url,
            error=_print_error,
        )
        publisher.publish(query)


def list_routes(routes: list[RouteDescriptor], query: RouteQuery) -> None:
    """Print the filtered route table."""
    if not routes:
        _print_error(NO_ROUTES_MESSAGE)
        return

    header = ("HOST", "METHOD", "URI", "NAME", "ACTION", "MIDDLEWARE")
    rows = [
        tuple(route.field(column) or "" for column in SORT_FIELDS)
        for route in filter_routes(routes, query)
    ]
    widths = [max(len(cell) for cell in column) for column in zip(header, *rows)]

    fmt = "  ".join(f"{{:<{width}}}" for width in widths)
    print(fmt.format(*header).rstrip())
    print("-" * min(sum(widths) + 2 * (len(widths) - 1), 80))
    for row in rows:
        print(fmt.format(*row).rstrip())


def _load_app(import_string: str):
    # Import strings are relative to where the command runs
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    try:
        return resolve_app(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        _print_error(f"Error: {exc}")
        raise SystemExit(1) from exc


def _print_error(message: str) -> None:
    print(message, file=sys.stderr)
