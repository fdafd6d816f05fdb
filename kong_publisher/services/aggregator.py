"""Collapse route descriptors into Kong ``/apis`` payloads.

Routes sharing a path produce one payload whose methods are the
comma-joined methods of every route, in the order they were seen.
Repeated methods are kept as-is.
"""

from __future__ import annotations

from collections.abc import Iterable

from kong_publisher.schemas.route import GatewayPayload, RouteDescriptor


def is_valid_route(route: RouteDescriptor) -> bool:
    """Root and parameterised paths cannot be registered as plain Kong uris."""
    return route.uri != "/" and "{" not in route.uri


def slug(uri: str) -> str:
    return uri.replace("/", ".")


def build_upstream_url(base_url: str, uri: str) -> str:
    return f"{base_url.rstrip('/')}/{uri.lstrip('/')}"


def aggregate(
    routes: Iterable[RouteDescriptor],
    base_url: str,
) -> tuple[list[GatewayPayload], list[RouteDescriptor]]:
    """Split routes into Kong payloads and invalid routes.

    Returns:
        ``(payloads, invalid)``; payloads keep first-seen order.
    """
    payloads: dict[str, GatewayPayload] = {}
    invalid: list[RouteDescriptor] = []

    for route in routes:
        if not is_valid_route(route):
            invalid.append(route)
            continue

        name = slug(route.uri)
        methods = ",".join(route.methods)

        if name in payloads:
            payloads[name].methods += f",{methods}"
        else:
            payloads[name] = GatewayPayload(
                name=name,
                uris=f"/{route.uri}",
                methods=methods,
                upstream_url=build_upstream_url(base_url, route.uri),
            )

    return list(payloads.values()), invalid
