"""Tests for the publish pipeline."""

import json

import httpx
import pytest

from kong_publisher.errors import GatewayUnavailableError
from kong_publisher.schemas.route import RouteQuery
from kong_publisher.services.publisher import NO_ROUTES_MESSAGE, RoutePublisher
from kong_publisher.services.route_source import StaticRouteSource
from tests.conftest import make_route

ROUTES = [
    make_route("users", "GET", name="users.index"),
    make_route("users", "POST", name="users.store"),
    make_route("/", "GET", name="home"),
    make_route("orders", "GET", name="orders.index"),
    make_route("orders/{id}", "GET", name="orders.show"),
]


@pytest.fixture
def echoed() -> list[str]:
    return []


@pytest.fixture
def publisher(kong_client, result_log, echoed):
    return RoutePublisher(
        StaticRouteSource(ROUTES),
        kong_client,
        result_log,
        "http://app.test",
        echo=echoed.append,
    )


class TestPublish:
    def test_publishes_one_payload_per_path(self, publisher, fake_kong, echoed) -> None:
        result = publisher.publish()

        assert fake_kong.put_bodies == [
            {
                "name": "orders",
                "uris": "/orders",
                "methods": "GET",
                "upstream_url": "http://app.test/orders",
            },
            {
                "name": "users",
                "uris": "/users",
                "methods": "GET,POST",
                "upstream_url": "http://app.test/users",
            },
        ]
        assert echoed == ["orders published", "users published"]
        assert [p.name for p in result.published] == ["orders", "users"]
        assert [r.uri for r in result.invalid] == ["/", "orders/{id}"]

    def test_health_check_precedes_publishing(self, publisher, fake_kong) -> None:
        publisher.publish()
        assert (fake_kong.requests[0].method, fake_kong.requests[0].url.path) == ("GET", "/")
        assert {r.method for r in fake_kong.requests[1:]} == {"PUT"}

    def test_logs_invalid_and_pushed(self, publisher, result_log) -> None:
        result = publisher.publish()

        invalid = json.loads(result_log.invalid_path.read_text())
        assert [r["uri"] for r in invalid] == ["/", "orders/{id}"]

        pushed = [json.loads(c) for c in result_log.pushed_path.read_text().split("\n\n") if c]
        assert pushed == result.responses
        assert [r["data"]["name"] for r in pushed] == ["orders", "users"]

    def test_query_filters_before_publishing(self, publisher, fake_kong) -> None:
        publisher.publish(RouteQuery(name="users.store"))
        assert fake_kong.put_bodies == [
            {
                "name": "users",
                "uris": "/users",
                "methods": "POST",
                "upstream_url": "http://app.test/users",
            }
        ]

    def test_reverse_changes_publish_order(self, publisher, echoed) -> None:
        publisher.publish(RouteQuery(reverse=True))
        assert echoed == ["users published", "orders published"]

    def test_filtered_to_nothing_still_records_invalid(self, publisher, fake_kong, result_log) -> None:
        result = publisher.publish(RouteQuery(path="missing"))
        assert result.published == []
        assert json.loads(result_log.invalid_path.read_text()) == []
        assert [r.method for r in fake_kong.requests] == ["GET"]


class TestNoRoutes:
    def test_reports_and_returns_early(self, kong_client, result_log, fake_kong) -> None:
        errors: list[str] = []
        publisher = RoutePublisher(
            StaticRouteSource([]),
            kong_client,
            result_log,
            "http://app.test",
            echo=lambda line: None,
            error=errors.append,
        )

        assert publisher.publish() is None
        assert errors == [NO_ROUTES_MESSAGE]
        assert fake_kong.requests == []
        assert not result_log.invalid_path.exists()


class TestFailures:
    def test_unhealthy_kong_aborts_before_any_write(self, publisher, fake_kong, result_log) -> None:
        fake_kong.node_status = 503
        with pytest.raises(GatewayUnavailableError):
            publisher.publish()

        assert fake_kong.put_bodies == []
        assert not result_log.invalid_path.exists()
        assert not result_log.pushed_path.exists()

    def test_failed_upsert_aborts_remaining(self, publisher, fake_kong, result_log, echoed) -> None:
        fake_kong.failing_names.add("users")
        with pytest.raises(httpx.HTTPStatusError):
            publisher.publish(RouteQuery(reverse=True))

        # users is first when reversed, nothing after it is attempted
        assert [b["name"] for b in fake_kong.put_bodies] == ["users"]
        assert echoed == []
        assert not result_log.pushed_path.exists()
        assert result_log.invalid_path.exists()

    def test_partial_publish_is_kept(self, publisher, fake_kong, result_log, echoed) -> None:
        fake_kong.failing_names.add("users")
        with pytest.raises(httpx.HTTPStatusError):
            publisher.publish()

        assert echoed == ["orders published"]
        pushed = [json.loads(c) for c in result_log.pushed_path.read_text().split("\n\n") if c]
        assert [r["data"]["name"] for r in pushed] == ["orders"]
