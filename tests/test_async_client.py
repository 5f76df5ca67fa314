"""AsyncTmdbClient のテスト。"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from tmdbrest import (
    AsyncTmdbClient,
    TmdbCancelledError,
    TmdbRetryBudgetExceededError,
    TmdbUnauthorizedError,
)
from tmdbrest.services import _transport

BASE_URL = "https://example.invalid/3/"


def _json_response(
    request: httpx.Request,
    payload: Any,
    *,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    merged = {"content-type": "application/json"}
    merged.update(headers or {})
    return httpx.Response(
        status_code=status_code,
        content=json.dumps(payload).encode("utf-8"),
        headers=merged,
        request=request,
    )


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    recorded: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        recorded.append(seconds)

    monkeypatch.setattr(_transport.asyncio, "sleep", fake_sleep)
    return recorded


def test_async_rate_limited_then_success(sleeps: list[float]) -> None:
    state = {"calls": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        state["calls"] += 1
        if state["calls"] == 1:
            return _json_response(request, {}, status_code=429, headers={"Retry-After": "2"})
        return _json_response(request, {"id": 550})

    async def run() -> None:
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=BASE_URL,
        )
        async with AsyncTmdbClient(
            http_client=http_client,
            base_url=BASE_URL,
            api_key="KEY",
            max_retry_count=2,
        ) as client:
            request = client.create_request("movie/{id}").add_url_segment("id", "550")
            response = await client.rest.get(request)
            assert response.json() == {"id": 550}
        await http_client.aclose()

    asyncio.run(run())

    assert state["calls"] == 2
    assert sleeps == [2.0]


def test_async_rate_limit_exhaustion(sleeps: list[float]) -> None:
    state = {"calls": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        state["calls"] += 1
        return _json_response(request, {}, status_code=429)

    async def run() -> None:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
        async with AsyncTmdbClient(
            http_client=http_client,
            base_url=BASE_URL,
            max_retry_count=2,
        ) as client:
            with pytest.raises(TmdbRetryBudgetExceededError):
                await client.rest.delete(client.create_request("list/1"))
        await http_client.aclose()

    asyncio.run(run())

    assert state["calls"] == 3
    assert sleeps == [1.0, 1.0]


def test_async_unauthorized_and_typed_post() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("api_key") != "GOOD":
            return _json_response(request, {"status_code": 7}, status_code=401)
        return _json_response(request, {"success": True}, status_code=201)

    async def run() -> None:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
        async with AsyncTmdbClient(http_client=http_client, base_url=BASE_URL, api_key="BAD") as bad:
            with pytest.raises(TmdbUnauthorizedError):
                await bad.rest.get(bad.create_request("account"))
        async with AsyncTmdbClient(http_client=http_client, base_url=BASE_URL, api_key="GOOD") as good:
            request = good.create_request("movie/550/rating").set_body({"value": 7.0})
            response = await good.rest.post_as(request, dict)
            assert response.get_data_object() == {"success": True}
        await http_client.aclose()

    asyncio.run(run())


def test_async_cancel_interrupts_rate_limit_wait() -> None:
    state = {"calls": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        state["calls"] += 1
        return _json_response(request, {}, status_code=429, headers={"Retry-After": "30"})

    async def run() -> None:
        cancel = asyncio.Event()
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
        async with AsyncTmdbClient(
            http_client=http_client,
            base_url=BASE_URL,
            max_retry_count=5,
        ) as client:
            asyncio.get_running_loop().call_later(0.05, cancel.set)
            with pytest.raises(TmdbCancelledError):
                await client.rest.get(client.create_request("movie/550"), cancel=cancel)
        await http_client.aclose()

    asyncio.run(run())

    assert state["calls"] == 1
