"""Daily log files recording skipped and published routes."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from datetime import date
from pathlib import Path
from typing import Any

import structlog

from kong_publisher.schemas.route import RouteDescriptor

logger = structlog.get_logger()


class ResultLog:
    """Writes ``invalid-kong-route-<day>.log`` and ``pushed-kong-route-<day>.log``.

    The invalid file is overwritten on every run; the pushed file only
    grows. A new pair starts each calendar day.
    """

    def __init__(self, log_dir: str | Path, *, today: Callable[[], date] = date.today):
        self.log_dir = Path(log_dir)
        self._today = today

    @property
    def invalid_path(self) -> Path:
        return self.log_dir / f"invalid-kong-route-{self._today().isoformat()}.log"

    @property
    def pushed_path(self) -> Path:
        return self.log_dir / f"pushed-kong-route-{self._today().isoformat()}.log"

    def write_invalid(self, routes: Iterable[RouteDescriptor]) -> Path:
        path = self.invalid_path
        records = [route.model_dump(mode="json") for route in routes]
        self.log_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(records), encoding="utf-8")
        logger.info("kong_invalid_routes_recorded", count=len(records), path=str(path))
        return path

    def append_pushed(self, response: dict[str, Any]) -> Path:
        path = self.pushed_path
        self.log_dir.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(response, default=str) + "\n\n")
        return path
