"""Publish the application's routes to Kong.

One linear pass: read routes, filter, check Kong is alive, aggregate,
record invalid routes, then upsert each payload. The first failing
upsert aborts the run; payloads already sent stay registered.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from kong_publisher.schemas.route import PublishResult, RouteQuery
from kong_publisher.services.aggregator import aggregate
from kong_publisher.services.kong_client import KongClient
from kong_publisher.services.result_log import ResultLog
from kong_publisher.services.route_filter import filter_routes
from kong_publisher.services.route_source import RouteSource

logger = structlog.get_logger()

NO_ROUTES_MESSAGE = "Your application doesn't have any routes."


class RoutePublisher:
    def __init__(
        self,
        source: RouteSource,
        client: KongClient,
        result_log: ResultLog,
        base_url: str,
        *,
        echo: Callable[[str], None] = print,
        error: Callable[[str], None] | None = None,
    ):
        self._source = source
        self._client = client
        self._result_log = result_log
        self._base_url = base_url
        self._echo = echo
        self._error = error or echo

    def publish(self, query: RouteQuery | None = None) -> PublishResult | None:
        """Run the pipeline. Returns ``None`` when the app has no routes."""
        query = query or RouteQuery()
        routes = self._source.routes()
        if not routes:
            self._error(NO_ROUTES_MESSAGE)
            return None

        selected = filter_routes(routes, query)
        logger.info("kong_publish_started", total=len(routes), selected=len(selected))

        self._client.assert_alive()

        payloads, invalid = aggregate(selected, self._base_url)
        self._result_log.write_invalid(invalid)

        result = PublishResult(invalid=invalid)
        for payload in payloads:
            response = self._client.upsert_api(payload)
            self._result_log.append_pushed(response)
            result.published.append(payload)
            result.responses.append(response)
            logger.info("kong_route_published", name=payload.name, methods=payload.methods)
            self._echo(f"{payload.name} published")

        logger.info("kong_publish_finished", published=len(payloads), invalid=len(invalid))
        return result
