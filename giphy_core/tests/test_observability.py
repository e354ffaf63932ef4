from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

import httpx

from giphy_core.clients.giphy import GiphyClient
from giphy_core.core.config import GiphyConfig
from giphy_core.observability.logging import (
    JsonFormatter,
    configure_logging,
    get_request_id,
    reset_request_id,
    set_request_id,
)
from giphy_core.observability.metrics import increment, observe_ms, record_request, reset, snapshot
from giphy_core.schemas.enums import RequestType


UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def test_request_ids_are_uuid4_and_unique() -> None:
    async def scenario() -> list[str]:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"meta": {}}))
        client = GiphyClient(config=GiphyConfig(api_key="k"), session=httpx.AsyncClient(transport=transport))
        requests = [client.trending(), client.trending()]
        await asyncio.gather(*(request.wait() for request in requests))
        await client.session.aclose()
        return [request.request_id for request in requests]

    first, second = asyncio.run(scenario())

    assert UUID_RE.match(first) is not None
    assert first != second


def test_formatter_emits_known_extras_and_context_request_id() -> None:
    record = logging.LogRecord("giphy_core.test", logging.INFO, __file__, 1, "giphy.request.finish", None, None)
    record.status_code = 404
    record.request_type = "search"
    record.error_code = "http_error"
    record.unrelated = "dropped"

    token = set_request_id("req-123")
    try:
        payload = json.loads(JsonFormatter().format(record))
    finally:
        reset_request_id(token)

    assert payload["request_id"] == "req-123"
    assert payload["status_code"] == 404
    assert payload["request_type"] == "search"
    assert payload["error_code"] == "http_error"
    assert payload["level"] == "INFO"
    assert "unrelated" not in payload
    assert get_request_id() is None


def test_configure_logging_targets_package_logger() -> None:
    package_logger = logging.getLogger("giphy_core")
    previous_handlers, previous_level = package_logger.handlers[:], package_logger.level
    try:
        configure_logging("DEBUG")

        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger().handlers is not package_logger.handlers
    finally:
        package_logger.handlers = previous_handlers
        package_logger.setLevel(previous_level)


def test_metrics_render_labels_and_timers() -> None:
    reset()

    record_request(RequestType.SEARCH, "ok", 12.0, status=200)
    record_request(RequestType.SEARCH, "ok", 4.0, status=200)
    increment("giphy.custom", labels={"request_type": "get", "ignored": "x"})
    observe_ms("giphy.custom_ms", 1.5)

    payload: dict[str, Any] = snapshot()

    assert payload["counters"]["giphy.requests{outcome=ok,request_type=search,status=200}"] == 2
    assert payload["counters"]["giphy.custom{request_type=get}"] == 1
    timer = payload["timers_ms"]["giphy.latency_ms{request_type=search}"]
    assert timer == {"count": 2, "sum": 16.0, "min": 4.0, "max": 12.0, "avg": 8.0}
    assert payload["timers_ms"]["giphy.custom_ms"]["count"] == 1

    reset()
    assert snapshot() == {"counters": {}, "timers_ms": {}}
