"""Route sources — read the host application's route table.

The publisher never reaches for a global registry; it is handed a
``RouteSource`` whose ``routes()`` returns descriptors in registration order.
"""

from __future__ import annotations

import importlib
import inspect
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Protocol

import fastapi.routing
from starlette.applications import Starlette
from starlette.endpoints import HTTPEndpoint
from starlette.routing import BaseRoute, Host, Mount, Route, Router

from kong_publisher.schemas.route import RouteDescriptor

RouteTable = Starlette | Router

_HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


class RouteSource(Protocol):
    def routes(self) -> list[RouteDescriptor]: ...


class StaticRouteSource:
    """Route source over descriptors that are already in memory."""

    def __init__(self, routes: Iterable[RouteDescriptor]):
        self._routes = list(routes)

    def routes(self) -> list[RouteDescriptor]:
        return list(self._routes)


class AppRouteSource:
    """Route source over a FastAPI / Starlette application.

    ``Mount`` routes are descended with their path prefix and ``Host``
    routes with their host pattern. Websocket routes and mounts without
    sub-routes (static files, foreign ASGI apps) carry no HTTP methods
    and are skipped.
    """

    def __init__(self, app: RouteTable):
        self._app = app

    def routes(self) -> list[RouteDescriptor]:
        return list(_walk(self._app.routes, prefix="", host=None, name_prefix=""))


def _walk(
    routes: Sequence[BaseRoute],
    *,
    prefix: str,
    host: str | None,
    name_prefix: str,
) -> Iterator[RouteDescriptor]:
    for entry in _expand(routes):
        # Included-router entries proxy the prefixed path of their original route
        route = getattr(entry, "original_route", entry)
        if isinstance(route, Route):
            yield _describe(entry, prefix=prefix, host=host, name_prefix=name_prefix)
        elif isinstance(route, Mount):
            yield from _walk(
                route.routes,
                prefix=prefix + route.path,
                host=host,
                name_prefix=f"{name_prefix}{route.name}:" if route.name else name_prefix,
            )
        elif isinstance(route, Host):
            yield from _walk(
                route.routes,
                prefix=prefix,
                host=route.host,
                name_prefix=f"{name_prefix}{route.name}:" if route.name else name_prefix,
            )


def _expand(routes: Sequence[BaseRoute]) -> list[Any]:
    """Unfold ``include_router`` entries on FastAPI releases that keep them nested."""
    iter_route_contexts = getattr(fastapi.routing, "iter_route_contexts", None)
    if iter_route_contexts is None:
        return list(routes)
    return list(iter_route_contexts(routes))


def _describe(route: Any, *, prefix: str, host: str | None, name_prefix: str) -> RouteDescriptor:
    path = (prefix + route.path).strip("/")
    return RouteDescriptor(
        host=host,
        methods=route_methods(route),
        uri=path or "/",
        name=f"{name_prefix}{route.name}" if route.name else None,
        action=action_name(route.endpoint),
        middleware=tuple(
            _callable_name(dep.dependency)
            for dep in getattr(route, "dependencies", ())
            if dep.dependency is not None
        ),
    )


def route_methods(route: Any) -> tuple[str, ...]:
    """Sorted HTTP methods of a route.

    Class-based ``HTTPEndpoint`` routes register no methods; they answer
    whatever handlers the class defines, with GET also serving HEAD.
    """
    methods = set(route.methods or ())
    endpoint = route.endpoint
    if not methods and inspect.isclass(endpoint) and issubclass(endpoint, HTTPEndpoint):
        methods = {method for method in _HTTP_METHODS if hasattr(endpoint, method.lower())}
        if "GET" in methods:
            methods.add("HEAD")
    return tuple(sorted(methods))


def action_name(endpoint: Any) -> str:
    """Dotted ``module.qualname`` of an endpoint, ``Closure`` for lambdas."""
    qualname = getattr(endpoint, "__qualname__", None) or type(endpoint).__qualname__
    if qualname.endswith("<lambda>"):
        return "Closure"
    module = getattr(endpoint, "__module__", None)
    return f"{module}.{qualname}" if module else qualname


def _callable_name(dependency: Any) -> str:
    return getattr(dependency, "__name__", None) or type(dependency).__name__


def resolve_app(import_string: str) -> RouteTable:
    """Resolve an import string to an application with a route table.

    Accepts ``"module:attribute"`` format. When the attribute portion
    is omitted, defaults to ``"app"``. Callables that are not already an
    application are treated as factories and called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object has no route table.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, (Starlette, Router)):
        try:
            obj = obj()
        except Exception as exc:
            raise TypeError(f"Factory function {import_string!r} raised an error: {exc}") from exc

    if not isinstance(obj, (Starlette, Router)):
        raise TypeError(
            f"{import_string!r} resolved to {type(obj).__name__}, not a Starlette or FastAPI application"
        )

    return obj
