from __future__ import annotations

import asyncio
import json
import time
from enum import Enum
from typing import Any, Callable
from urllib.parse import urlsplit
from uuid import uuid4

import httpx

from giphy_core.clients.router import RequestSpec
from giphy_core.core.errors import (
    GiphyError,
    HTTPError,
    JSONParseError,
    JSONShapeError,
    TransportError,
)
from giphy_core.observability.logging import get_logger, reset_request_id, set_request_id
from giphy_core.observability.metrics import record_request
from giphy_core.schemas.enums import RequestType

logger = get_logger(__name__)

JSONObject = dict[str, Any]
JSONCompletion = Callable[[JSONObject | None, httpx.Response | None, GiphyError | None], None]


class RequestState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    FINISHED = "finished"
    CANCELLED = "cancelled"


def _error_code(error: GiphyError | None) -> str:
    if error is None:
        return "ok"
    if isinstance(error, TransportError):
        return "transport_error"
    if isinstance(error, JSONParseError):
        return "json_parse_error"
    if isinstance(error, JSONShapeError):
        return "json_shape_error"
    if isinstance(error, HTTPError):
        return "http_error"
    return "error"


def _http_error(payload: JSONObject, response: httpx.Response) -> HTTPError:
    meta = payload.get("meta")
    if not isinstance(meta, dict):
        return HTTPError(response.status_code)

    message = meta.get("msg")
    status = meta.get("status")
    # The API-reported status wins over the transport status.
    status_code = status if isinstance(status, int) and not isinstance(status, bool) else response.status_code
    return HTTPError(status_code, message if isinstance(message, str) else None)


class GiphyRequest:
    """One single-shot API call.

    Runs ``spec`` on ``session`` as an asyncio task and hands the outcome to
    ``completion(payload, response, error)`` at most once. A request cancelled
    before the network call returns never calls ``completion``.
    """

    def __init__(
        self,
        session: httpx.AsyncClient,
        spec: RequestSpec,
        request_type: RequestType,
        completion: JSONCompletion,
    ) -> None:
        self.session = session
        self.spec = spec
        self.request_type = request_type
        self.request_id = str(uuid4())
        self._completion = completion
        self._state = RequestState.PENDING
        self._cancel_requested = False
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def is_cancelled(self) -> bool:
        return self._cancel_requested

    @property
    def is_finished(self) -> bool:
        return self._state in (RequestState.FINISHED, RequestState.CANCELLED)

    def start(self) -> asyncio.Task[None] | None:
        if self._state == RequestState.CANCELLED:
            return None
        if self._state != RequestState.PENDING:
            raise RuntimeError(f"Request {self.request_id} already started")

        self._state = RequestState.RUNNING
        self._task = asyncio.get_running_loop().create_task(self._main())
        return self._task

    def cancel(self) -> None:
        if self.is_finished:
            return
        self._cancel_requested = True
        if self._state == RequestState.PENDING:
            self._state = RequestState.CANCELLED

    async def wait(self) -> None:
        if self._task is not None:
            # Cancelling the waiter must not abort the in-flight call.
            await asyncio.shield(self._task)

    async def _main(self) -> None:
        token = set_request_id(self.request_id)
        started = time.perf_counter()
        try:
            response: httpx.Response | None = None
            transport_exc: Exception | None = None
            try:
                response = await self.session.send(
                    self.session.build_request(
                        self.spec.method.value,
                        self.spec.url,
                        headers=self.spec.headers,
                        content=self.spec.body,
                    )
                )
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                # InvalidURL (e.g. an overlong query) is raised before any I/O.
                transport_exc = exc

            if self._cancel_requested:
                self._state = RequestState.CANCELLED
                logger.info(
                    "giphy.request.cancelled",
                    extra={
                        "method": self.spec.method.value,
                        "path": self._path,
                        "request_type": self.request_type.value,
                        "request_id": self.request_id,
                    },
                )
                return

            if response is None:
                error = TransportError(f"GIPHY request failed: {transport_exc}")
                error.__cause__ = transport_exc
                self._deliver(None, None, error, started)
                return

            payload, error = self._classify(response)
            self._deliver(payload, response, error, started)
        finally:
            reset_request_id(token)

    @property
    def _path(self) -> str:
        return urlsplit(self.spec.url).path

    def _classify(self, response: httpx.Response) -> tuple[JSONObject | None, GiphyError | None]:
        try:
            parsed = json.loads(response.content)
        except ValueError as exc:
            error = JSONParseError("Can not parse API response as JSON", status_code=response.status_code)
            error.__cause__ = exc
            return None, error

        if not isinstance(parsed, dict):
            return None, JSONShapeError("Can not map API response to a JSON object", status_code=response.status_code)

        if response.status_code != 200:
            return parsed, _http_error(parsed, response)
        return parsed, None

    def _deliver(
        self,
        payload: JSONObject | None,
        response: httpx.Response | None,
        error: GiphyError | None,
        started: float,
    ) -> None:
        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        status_code = error.status_code if isinstance(error, HTTPError) else getattr(response, "status_code", None)
        meta = payload.get("meta") if payload is not None else None
        outcome = _error_code(error)

        record_request(self.request_type, outcome, latency_ms, status=status_code)
        logger.info(
            "giphy.request.finish",
            extra={
                "method": self.spec.method.value,
                "path": self._path,
                "status_code": status_code,
                "request_type": self.request_type.value,
                "response_id": meta.get("response_id") if isinstance(meta, dict) else None,
                "latency_ms": latency_ms,
                "error_code": None if error is None else outcome,
                "request_id": self.request_id,
            },
        )

        self._state = RequestState.FINISHED
        try:
            self._completion(payload, response, error)
        except Exception:
            logger.exception(
                "giphy.request.completion_failed",
                extra={"request_type": self.request_type.value, "request_id": self.request_id},
            )
            raise
