"""Kong admin API client."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from kong_publisher.errors import GatewayUnavailableError
from kong_publisher.schemas.route import GatewayPayload

logger = structlog.get_logger()


class KongClient:
    """Thin synchronous client for the Kong admin endpoints the publisher needs.

    Pass ``http_client`` to reuse (or stub) a transport; otherwise one is
    created for ``admin_url`` and closed with the client.
    """

    def __init__(
        self,
        admin_url: str | None = None,
        *,
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ):
        if http_client is None:
            if admin_url is None:
                raise ValueError("admin_url is required when no http_client is given")
            http_client = httpx.Client(base_url=admin_url, timeout=timeout)
            self._owns_client = True
        else:
            self._owns_client = False
        self._http = http_client

    def __enter__(self) -> KongClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def node_status(self) -> httpx.Response:
        """``GET /`` — node information."""
        return self._http.get("/")

    def assert_alive(self) -> None:
        """Raise ``GatewayUnavailableError`` unless the node answers 200."""
        try:
            response = self.node_status()
        except httpx.TransportError as exc:
            logger.error("kong_unreachable", url=str(self._http.base_url), error=str(exc))
            raise GatewayUnavailableError() from exc

        if response.status_code != 200:
            logger.error("kong_unhealthy", status_code=response.status_code)
            raise GatewayUnavailableError(status_code=response.status_code)

        logger.info("kong_alive", url=str(self._http.base_url))

    def upsert_api(self, payload: GatewayPayload) -> dict[str, Any]:
        """``PUT /apis`` — create or replace an API registration.

        Returns the raw response as ``{"code": ..., "data": ...}``.
        """
        response = self._http.put("/apis", json=payload.model_dump())
        record = {"code": response.status_code, "data": _body(response)}
        if response.is_error:
            logger.error("kong_upsert_failed", name=payload.name, **record)
        response.raise_for_status()
        return record


def _body(response: httpx.Response) -> Any:
    if response.headers.get("content-type", "").startswith("application/json"):
        return response.json()
    return response.text
