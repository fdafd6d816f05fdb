"""Route filtering and ordering for the publish and list commands."""

from __future__ import annotations

from collections.abc import Iterable

from kong_publisher.schemas.route import RouteDescriptor, RouteQuery

# query option -> route column
_FILTERS = (("name", "name"), ("path", "uri"), ("method", "method"))


def matches(route: RouteDescriptor, query: RouteQuery) -> bool:
    """True when every supplied filter is a substring of its column."""
    for option, column in _FILTERS:
        needle = getattr(query, option)
        if not needle:
            continue
        value = route.field(column)
        if value is None or needle not in value:
            return False
    return True


def filter_routes(routes: Iterable[RouteDescriptor], query: RouteQuery) -> list[RouteDescriptor]:
    """Filter, stable-sort ascending by ``query.sort``, then reverse if asked."""
    selected = [route for route in routes if matches(route, query)]
    selected.sort(key=lambda route: route.field(query.sort) or "")
    if query.reverse:
        selected.reverse()
    return selected
