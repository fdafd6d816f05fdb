"""Shared fixtures: route factories, a stubbed Kong admin API, dated logs."""

from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from kong_publisher.schemas.route import RouteDescriptor
from kong_publisher.services.kong_client import KongClient
from kong_publisher.services.result_log import ResultLog

TODAY = date(2026, 10, 18)


def make_route(uri: str, *methods: str, **kwargs) -> RouteDescriptor:
    return RouteDescriptor(uri=uri, methods=methods or ("GET",), **kwargs)


class FakeKong:
    """Kong admin API stand-in recording every request it receives."""

    def __init__(self) -> None:
        self.node_status = 200
        self.failing_names: set[str] = set()
        self.requests: list[httpx.Request] = []

    @property
    def put_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.method == "PUT"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET" and request.url.path == "/":
            return httpx.Response(self.node_status, json={"hostname": "kong-test"})
        if request.method == "PUT" and request.url.path == "/apis":
            body = json.loads(request.content)
            if body["name"] in self.failing_names:
                return httpx.Response(500, json={"message": "An unexpected error occurred"})
            return httpx.Response(200, json={"id": f"id-{body['name']}", **body})
        return httpx.Response(404, json={"message": "Not found"})

    def client(self) -> KongClient:
        http_client = httpx.Client(
            base_url="http://kong.test:8001",
            transport=httpx.MockTransport(self.handler),
        )
        return KongClient(http_client=http_client)


@pytest.fixture
def fake_kong() -> FakeKong:
    return FakeKong()


@pytest.fixture
def kong_client(fake_kong: FakeKong) -> KongClient:
    return fake_kong.client()


@pytest.fixture
def result_log(tmp_path) -> ResultLog:
    return ResultLog(tmp_path / "logs", today=lambda: TODAY)
