from __future__ import annotations

import asyncio
import json
from typing import Any, Callable

import httpx
import pytest

from giphy_core.clients.request import GiphyRequest, RequestState
from giphy_core.clients.router import GetEndpoint, SearchEndpoint, build_request
from giphy_core.core.errors import HTTPError, JSONParseError, JSONShapeError, TransportError
from giphy_core.observability.logging import JsonFormatter
from giphy_core.observability.metrics import reset, snapshot
from giphy_core.schemas.enums import LanguageType, MediaType, RatingType


OK_PAYLOAD = {
    "data": {"id": "abc", "type": "gif"},
    "meta": {"status": 200, "msg": "OK", "response_id": "resp-1"},
}


def _run(handler: Callable[[httpx.Request], Any]) -> tuple[GiphyRequest, list[tuple[Any, ...]]]:
    async def scenario() -> tuple[GiphyRequest, list[tuple[Any, ...]]]:
        calls: list[tuple[Any, ...]] = []
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
            endpoint = GetEndpoint(id="abc")
            request = GiphyRequest(
                session,
                build_request(endpoint, "test-key"),
                endpoint.kind,
                lambda *args: calls.append(args),
            )
            request.start()
            await request.wait()
        return request, calls

    return asyncio.run(scenario())


def test_success_delivers_payload_and_response() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=OK_PAYLOAD)

    request, calls = _run(handler)

    assert request.state == RequestState.FINISHED
    assert len(calls) == 1
    payload, response, error = calls[0]
    assert payload == OK_PAYLOAD
    assert response.status_code == 200
    assert error is None

    assert seen[0].method == "GET"
    assert seen[0].headers["content-type"] == "application/json"
    assert seen[0].url.path == "/v1/gifs/abc"
    assert seen[0].url.params["api_key"] == "test-key"


def test_non_200_prefers_api_status_and_message() -> None:
    body = {"meta": {"status": 404, "msg": "Not Found"}}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json=body)

    _, calls = _run(handler)

    payload, response, error = calls[0]
    assert isinstance(error, HTTPError)
    assert error.status_code == 404
    assert error.message == "Not Found"
    assert payload == body
    assert response.status_code == 404


def test_api_status_overrides_transport_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"meta": {"status": 401, "msg": "Unauthorized", "response_id": "r"}})

    _, calls = _run(handler)

    _, _, error = calls[0]
    assert isinstance(error, HTTPError)
    assert error.status_code == 401
    assert error.message == "Unauthorized"


def test_http_error_falls_back_to_transport_status_without_meta() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "boom"})

    _, calls = _run(handler)

    payload, _, error = calls[0]
    assert isinstance(error, HTTPError)
    assert error.status_code == 500
    assert error.message is None
    assert payload == {"message": "boom"}


def test_http_error_ignores_non_string_message_and_non_int_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"meta": {"status": "429", "msg": 42}})

    _, calls = _run(handler)

    _, _, error = calls[0]
    assert isinstance(error, HTTPError)
    assert error.status_code == 429
    assert error.message is None


def test_meta_status_is_not_checked_on_http_200() -> None:
    body = {"meta": {"status": 500, "msg": "weird", "response_id": "r"}}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    _, calls = _run(handler)

    assert calls == [(body, calls[0][1], None)]


def test_invalid_json_body_is_a_parse_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, content=b"<html>Bad Gateway</html>")

    _, calls = _run(handler)

    payload, response, error = calls[0]
    assert payload is None
    assert response.status_code == 502
    assert isinstance(error, JSONParseError)
    assert isinstance(error.__cause__, ValueError)


def test_non_object_json_is_a_shape_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=json.dumps([1, 2, 3]).encode())

    _, calls = _run(handler)

    payload, response, error = calls[0]
    assert payload is None
    assert response is not None
    assert isinstance(error, JSONShapeError)


def test_transport_failure_delivers_only_the_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    request, calls = _run(handler)

    assert request.state == RequestState.FINISHED
    payload, response, error = calls[0]
    assert payload is None
    assert response is None
    assert isinstance(error, TransportError)
    assert isinstance(error.__cause__, httpx.ConnectError)


def test_invalid_url_is_delivered_as_transport_error() -> None:
    hits: list[httpx.Request] = []

    async def scenario() -> tuple[GiphyRequest, list[tuple[Any, ...]]]:
        calls: list[tuple[Any, ...]] = []
        transport = httpx.MockTransport(lambda request: hits.append(request) or httpx.Response(200, json=OK_PAYLOAD))
        async with httpx.AsyncClient(transport=transport) as session:
            endpoint = SearchEndpoint(
                query="a" * 70000,
                media=MediaType.GIF,
                offset=0,
                limit=25,
                rating=RatingType.RATED_R,
                lang=LanguageType.ENGLISH,
            )
            request = GiphyRequest(session, build_request(endpoint, "k"), endpoint.kind, lambda *a: calls.append(a))
            request.start()
            await request.wait()
        return request, calls

    request, calls = asyncio.run(scenario())

    assert request.state == RequestState.FINISHED
    assert hits == []
    assert len(calls) == 1
    payload, response, error = calls[0]
    assert payload is None
    assert response is None
    assert isinstance(error, TransportError)
    assert isinstance(error.__cause__, httpx.InvalidURL)


def test_cancel_while_in_flight_suppresses_completion() -> None:
    async def scenario() -> tuple[GiphyRequest, list[tuple[Any, ...]], RequestState]:
        gate = asyncio.Event()
        entered = asyncio.Event()
        calls: list[tuple[Any, ...]] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            entered.set()
            await gate.wait()
            return httpx.Response(200, json=OK_PAYLOAD)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
            endpoint = GetEndpoint(id="abc")
            request = GiphyRequest(session, build_request(endpoint, "k"), endpoint.kind, lambda *a: calls.append(a))
            request.start()
            await entered.wait()
            request.cancel()
            state_after_cancel = request.state
            gate.set()
            await request.wait()
        return request, calls, state_after_cancel

    request, calls, state_after_cancel = asyncio.run(scenario())

    assert state_after_cancel == RequestState.RUNNING
    assert request.state == RequestState.CANCELLED
    assert request.is_cancelled
    assert calls == []


def test_cancel_suppresses_transport_errors_too() -> None:
    async def scenario() -> list[tuple[Any, ...]]:
        gate = asyncio.Event()
        calls: list[tuple[Any, ...]] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            await gate.wait()
            raise httpx.ReadTimeout("timed out", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
            endpoint = GetEndpoint(id="abc")
            request = GiphyRequest(session, build_request(endpoint, "k"), endpoint.kind, lambda *a: calls.append(a))
            request.start()
            await asyncio.sleep(0)
            request.cancel()
            gate.set()
            await request.wait()
        return calls

    assert asyncio.run(scenario()) == []


def test_cancel_before_start_never_runs() -> None:
    hits: list[httpx.Request] = []

    async def scenario() -> tuple[GiphyRequest, Any, list[tuple[Any, ...]]]:
        calls: list[tuple[Any, ...]] = []
        transport = httpx.MockTransport(lambda request: hits.append(request) or httpx.Response(200, json=OK_PAYLOAD))
        async with httpx.AsyncClient(transport=transport) as session:
            endpoint = GetEndpoint(id="abc")
            request = GiphyRequest(session, build_request(endpoint, "k"), endpoint.kind, lambda *a: calls.append(a))
            request.cancel()
            task = request.start()
            await request.wait()
        return request, task, calls

    request, task, calls = asyncio.run(scenario())

    assert task is None
    assert request.state == RequestState.CANCELLED
    assert calls == []
    assert hits == []


def test_start_twice_is_rejected() -> None:
    async def scenario() -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=OK_PAYLOAD))
        async with httpx.AsyncClient(transport=transport) as session:
            endpoint = GetEndpoint(id="abc")
            request = GiphyRequest(session, build_request(endpoint, "k"), endpoint.kind, lambda *a: None)
            request.start()
            with pytest.raises(RuntimeError):
                request.start()
            await request.wait()

    asyncio.run(scenario())


def test_finish_is_logged_with_request_id(caplog: Any) -> None:
    caplog.set_level("INFO", logger="giphy_core")

    request, _ = _run(lambda request: httpx.Response(200, json=OK_PAYLOAD))

    formatter = JsonFormatter()
    logs = [json.loads(formatter.format(record)) for record in caplog.records if record.name.startswith("giphy_core.")]
    finish = [log for log in logs if log["message"] == "giphy.request.finish"]
    assert len(finish) == 1
    assert finish[0]["request_id"] == request.request_id
    assert finish[0]["path"] == "/v1/gifs/abc"
    assert finish[0]["status_code"] == 200
    assert finish[0]["response_id"] == "resp-1"
    assert "error_code" not in finish[0]
    assert "test-key" not in json.dumps(finish[0])


def test_outcomes_are_counted_in_metrics() -> None:
    reset()

    _run(lambda request: httpx.Response(200, json=OK_PAYLOAD))
    _run(lambda request: httpx.Response(404, json={"meta": {"status": 404, "msg": "Not Found"}}))

    payload = snapshot()
    counters = payload["counters"]
    assert counters["giphy.requests{outcome=ok,request_type=get,status=200}"] == 1
    assert counters["giphy.requests{outcome=http_error,request_type=get,status=404}"] == 1
    assert payload["timers_ms"]["giphy.latency_ms{request_type=get}"]["count"] == 2


def test_completion_exception_is_logged_and_raised(caplog: Any) -> None:
    caplog.set_level("ERROR", logger="giphy_core")

    def failing_completion(*args: Any) -> None:
        raise ValueError("completion blew up")

    async def scenario() -> GiphyRequest:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=OK_PAYLOAD))
        async with httpx.AsyncClient(transport=transport) as session:
            endpoint = GetEndpoint(id="abc")
            request = GiphyRequest(session, build_request(endpoint, "k"), endpoint.kind, failing_completion)
            request.start()
            with pytest.raises(ValueError):
                await request.wait()
        return request

    request = asyncio.run(scenario())

    assert request.state == RequestState.FINISHED
    failures = [record for record in caplog.records if record.getMessage() == "giphy.request.completion_failed"]
    assert len(failures) == 1
    assert failures[0].request_id == request.request_id
    assert failures[0].exc_info is not None
