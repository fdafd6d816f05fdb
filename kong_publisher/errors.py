"""Kong publisher — exception types."""

from __future__ import annotations


class KongPublisherError(Exception):
    """Base class for publisher errors."""


class GatewayUnavailableError(KongPublisherError):
    """Kong's admin API did not answer the node status check with 200."""

    def __init__(self, message: str = "Kong is not accessible.", *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
