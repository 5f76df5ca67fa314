"""サービス層向けトランスポート共通処理。"""

from __future__ import annotations

import asyncio
import logging
import threading
import time

import httpx

from tmdbrest.config import RetryConfig
from tmdbrest.enums import HttpMethod, ResponseDisposition
from tmdbrest.errors import (
    TmdbCancelledError,
    TmdbNetworkError,
    TmdbRetryBudgetExceededError,
    TmdbUnauthorizedError,
    TmdbUnexpectedContentTypeError,
    TmdbUpstreamError,
)
from tmdbrest.http import (
    WaitDecision,
    build_request_headers,
    classify_status,
    decide_rate_limit_wait,
    is_json_content_type,
    parse_retry_after,
)
from tmdbrest.request import RestRequest
from tmdbrest.types import RenderedRequest, RestResponse, TmdbStatusMessage

logger = logging.getLogger(__name__)


def _network_error(exc: Exception, rendered: RenderedRequest) -> TmdbNetworkError:
    return TmdbNetworkError(
        str(exc) or type(exc).__name__,
        request_url=rendered.url,
        method=rendered.method.value,
    )


def _ensure_json(response: httpx.Response, rendered: RenderedRequest) -> None:
    """本文を読む前に Content-Type を検証する。"""

    content_type = response.headers.get("content-type")
    if not is_json_content_type(content_type):
        raise TmdbUnexpectedContentTypeError(
            status=response.status_code,
            content_type=content_type,
            request_url=rendered.url,
            method=rendered.method.value,
        )


def _build_response(response: httpx.Response) -> RestResponse:
    """読み込み済みレスポンスをエンベロープへ変換する。"""

    text = response.text
    status_message: TmdbStatusMessage | None = None
    if not response.is_success:
        status_message = TmdbStatusMessage.from_text(text)
    return RestResponse(
        status_code=response.status_code,
        is_success=response.is_success,
        content=text,
        error_message=status_message,
        headers=response.headers,
    )


def _raise_for_disposition(
    envelope: RestResponse,
    disposition: ResponseDisposition,
    rendered: RenderedRequest,
) -> None:
    """停止すべき応答のとき例外を送出する。"""

    if disposition == ResponseDisposition.UNAUTHORIZED:
        raise TmdbUnauthorizedError(
            "APIが401を返しました。APIキーが不正な可能性があります。",
            status=envelope.status_code,
            status_message=envelope.error_message,
            request_url=rendered.url,
            method=rendered.method.value,
            raw_response_excerpt=envelope.content[:2048],
        )
    if disposition == ResponseDisposition.UPSTREAM_ERROR:
        detail = envelope.error_message.status_message if envelope.error_message else None
        raise TmdbUpstreamError(
            f"APIがエラーを返しました: status={envelope.status_code}, message={detail}",
            status=envelope.status_code,
            status_message=envelope.error_message,
            request_url=rendered.url,
            method=rendered.method.value,
            raw_response_excerpt=envelope.content[:2048],
        )


def _budget_exceeded(
    envelope: RestResponse,
    rendered: RenderedRequest,
    attempts: int,
) -> TmdbRetryBudgetExceededError:
    return TmdbRetryBudgetExceededError(
        f"レート制限が解除されないまま再試行回数を使い切りました: attempts={attempts}",
        status=envelope.status_code,
        attempts=attempts,
        status_message=envelope.error_message,
        request_url=rendered.url,
        method=rendered.method.value,
        raw_response_excerpt=envelope.content[:2048],
    )


def _rate_limit_wait(envelope: RestResponse, retry_config: RetryConfig) -> WaitDecision:
    retry_after = parse_retry_after(envelope.get_header("Retry-After"))
    return decide_rate_limit_wait(
        retry_after=retry_after,
        fallback=retry_config.fallback_wait,
        max_wait=retry_config.max_wait,
    )


def _send_sync(
    client: httpx.Client,
    rendered: RenderedRequest,
    headers: dict[str, str],
) -> RestResponse:
    """1回分の送信と本文読み込みを行う。"""

    request = client.build_request(
        rendered.method.value,
        rendered.url,
        content=rendered.content,
        headers={**headers, **rendered.headers},
    )
    try:
        response = client.send(request, stream=True)
    except httpx.TransportError as exc:
        raise _network_error(exc, rendered) from exc
    try:
        _ensure_json(response, rendered)
        try:
            response.read()
        except httpx.TransportError as exc:
            raise _network_error(exc, rendered) from exc
        return _build_response(response)
    finally:
        response.close()


async def _send_async(
    client: httpx.AsyncClient,
    rendered: RenderedRequest,
    headers: dict[str, str],
) -> RestResponse:
    """1回分の送信と本文読み込みを行う。"""

    request = client.build_request(
        rendered.method.value,
        rendered.url,
        content=rendered.content,
        headers={**headers, **rendered.headers},
    )
    try:
        response = await client.send(request, stream=True)
    except httpx.TransportError as exc:
        raise _network_error(exc, rendered) from exc
    try:
        _ensure_json(response, rendered)
        try:
            await response.aread()
        except httpx.TransportError as exc:
            raise _network_error(exc, rendered) from exc
        return _build_response(response)
    finally:
        await response.aclose()


def perform_sync_request(
    *,
    client: httpx.Client,
    request: RestRequest,
    method: HttpMethod,
    retry_config: RetryConfig,
    user_agent: str,
    cancel: threading.Event | None = None,
) -> RestResponse:
    """同期要求を429再試行つきで実行する。

    Args:
        client: httpxクライアント。
        request: 要求ビルダー。試行ごとに組み立て直す。
        method: HTTPメソッド。
        retry_config: 再試行設定。
        user_agent: User-Agent。
        cancel: 中断イベント。送信前と待機中に確認する。

    Returns:
        2xx または 404 のエンベロープ。

    Raises:
        TmdbNetworkError: 通信失敗。
        TmdbUnexpectedContentTypeError: JSON以外の応答。
        TmdbUnauthorizedError: 401。
        TmdbUpstreamError: その他の非2xx。
        TmdbRetryBudgetExceededError: 429が続き再試行回数を使い切った。
        TmdbCancelledError: 中断された。
    """

    headers = dict(build_request_headers(user_agent))
    attempts_remaining = retry_config.max_retry_count
    attempt = 0
    while True:
        attempt += 1
        rendered = request.render(method)
        if cancel is not None and cancel.is_set():
            raise TmdbCancelledError(request_url=rendered.url, method=rendered.method.value)

        logger.debug("%s %s (attempt %d)", rendered.method.value, rendered.url, attempt)
        envelope = _send_sync(client, rendered, headers)
        logger.debug("%s %s -> %d", rendered.method.value, rendered.url, envelope.status_code)

        disposition = classify_status(envelope.status_code)
        if disposition != ResponseDisposition.RATE_LIMITED:
            _raise_for_disposition(envelope, disposition, rendered)
            return envelope

        if attempts_remaining <= 0:
            raise _budget_exceeded(envelope, rendered, attempt)
        attempts_remaining -= 1
        wait = _rate_limit_wait(envelope, retry_config)
        logger.warning(
            "Rate limited (429) on %s, waiting %.2fs (%s), %d retries left",
            rendered.url,
            wait.seconds,
            wait.source,
            attempts_remaining,
        )
        if cancel is None:
            time.sleep(wait.seconds)
        elif cancel.wait(wait.seconds):
            raise TmdbCancelledError(request_url=rendered.url, method=rendered.method.value)


async def _wait_or_cancel(seconds: float, cancel: asyncio.Event | None) -> bool:
    """待機する。中断イベントが立った場合はTrueを返す。"""

    if cancel is None:
        await asyncio.sleep(seconds)
        return False
    try:
        await asyncio.wait_for(cancel.wait(), timeout=seconds)
    except TimeoutError:
        return False
    return True


async def perform_async_request(
    *,
    client: httpx.AsyncClient,
    request: RestRequest,
    method: HttpMethod,
    retry_config: RetryConfig,
    user_agent: str,
    cancel: asyncio.Event | None = None,
) -> RestResponse:
    """非同期要求を429再試行つきで実行する。"""

    headers = dict(build_request_headers(user_agent))
    attempts_remaining = retry_config.max_retry_count
    attempt = 0
    while True:
        attempt += 1
        rendered = request.render(method)
        if cancel is not None and cancel.is_set():
            raise TmdbCancelledError(request_url=rendered.url, method=rendered.method.value)

        logger.debug("%s %s (attempt %d)", rendered.method.value, rendered.url, attempt)
        envelope = await _send_async(client, rendered, headers)
        logger.debug("%s %s -> %d", rendered.method.value, rendered.url, envelope.status_code)

        disposition = classify_status(envelope.status_code)
        if disposition != ResponseDisposition.RATE_LIMITED:
            _raise_for_disposition(envelope, disposition, rendered)
            return envelope

        if attempts_remaining <= 0:
            raise _budget_exceeded(envelope, rendered, attempt)
        attempts_remaining -= 1
        wait = _rate_limit_wait(envelope, retry_config)
        logger.warning(
            "Rate limited (429) on %s, waiting %.2fs (%s), %d retries left",
            rendered.url,
            wait.seconds,
            wait.source,
            attempts_remaining,
        )
        if await _wait_or_cancel(wait.seconds, cancel):
            raise TmdbCancelledError(request_url=rendered.url, method=rendered.method.value)
