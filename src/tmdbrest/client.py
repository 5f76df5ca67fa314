"""公開クライアント実装。"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from tmdbrest.config import (
    DEFAULT_BASE_URL,
    DEFAULT_RATE_LIMIT_MAX_WAIT,
    DEFAULT_RATE_LIMIT_WAIT,
    DEFAULT_USER_AGENT,
    ClientConfig,
    RetryConfig,
)
from tmdbrest.request import RestRequest
from tmdbrest.services.executor import AsyncRestExecutor, RestExecutor
from tmdbrest.validation import normalize_query_pairs, validate_retry_settings

DefaultQuery = Mapping[str, str] | Iterable[tuple[str, str]] | None


def _build_configs(
    *,
    api_key: str | None,
    base_url: str,
    language: str | None,
    default_query: DefaultQuery,
    max_retry_count: int,
    rate_limit_fallback_wait: float,
    rate_limit_max_wait: float,
    timeout: float,
    user_agent: str,
) -> tuple[ClientConfig, RetryConfig]:
    validate_retry_settings(
        max_retry_count=max_retry_count,
        fallback_wait=rate_limit_fallback_wait,
        max_wait=rate_limit_max_wait,
    )
    config = ClientConfig(
        base_url=base_url,
        api_key=api_key,
        language=language,
        extra_default_query=normalize_query_pairs(default_query),
        timeout=timeout,
        user_agent=user_agent,
    )
    retry = RetryConfig(
        max_retry_count=max_retry_count,
        fallback_wait=rate_limit_fallback_wait,
        max_wait=rate_limit_max_wait,
    )
    return config, retry


def _client_kwargs(
    *,
    base_url: str,
    timeout: float,
    proxy: str | None,
    limits: httpx.Limits | None,
) -> dict[str, Any]:
    client_kwargs: dict[str, Any] = {
        "base_url": base_url,
        "timeout": timeout,
    }
    if proxy is not None:
        client_kwargs["proxy"] = proxy
    if limits is not None:
        client_kwargs["limits"] = limits
    return client_kwargs


class TmdbClient:
    """TMDb APIの同期クライアント。"""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        language: str | None = None,
        default_query: DefaultQuery = None,
        max_retry_count: int = 0,
        rate_limit_fallback_wait: float = DEFAULT_RATE_LIMIT_WAIT,
        rate_limit_max_wait: float = DEFAULT_RATE_LIMIT_MAX_WAIT,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        http_client: httpx.Client | None = None,
        proxy: str | None = None,
        limits: httpx.Limits | None = None,
    ) -> None:
        """クライアントを初期化する。

        Args:
            api_key: APIキー。全要求のクエリ末尾に付与する。
            base_url: APIベースURL。
            language: 既定言語。全要求のクエリ末尾に付与する。
            default_query: 追加の既定クエリ。
            max_retry_count: 429応答時の最大再試行回数。
            rate_limit_fallback_wait: Retry-After が使えないときの待機秒。
            rate_limit_max_wait: 1回のレート制限待機の上限秒。
            timeout: HTTPタイムアウト秒。
            user_agent: User-Agent。
            http_client: 外部httpx.Client。
            proxy: プロキシ。
            limits: httpx接続制御。
        """

        self._config, self._retry = _build_configs(
            api_key=api_key,
            base_url=base_url,
            language=language,
            default_query=default_query,
            max_retry_count=max_retry_count,
            rate_limit_fallback_wait=rate_limit_fallback_wait,
            rate_limit_max_wait=rate_limit_max_wait,
            timeout=timeout,
            user_agent=user_agent,
        )

        self._owns_client = http_client is None
        if http_client is None:
            self._http_client = httpx.Client(
                **_client_kwargs(base_url=base_url, timeout=timeout, proxy=proxy, limits=limits),
            )
        else:
            self._http_client = http_client

        self.rest = RestExecutor(
            client=self._http_client,
            config=self._config,
            retry_config=self._retry,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def retry_config(self) -> RetryConfig:
        return self._retry

    def create_request(self, endpoint: str) -> RestRequest:
        """エンドポイント用の要求ビルダーを作る。

        Args:
            endpoint: ``{name}`` プレースホルダを含むパス。

        Returns:
            要求ビルダー。
        """

        return RestRequest(self._config, endpoint)

    def close(self) -> None:
        """内部Clientをクローズする。"""

        if self._owns_client:
            self._http_client.close()

    def __enter__(self) -> "TmdbClient":
        """コンテキスト開始。"""

        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """コンテキスト終了。"""

        self.close()


class AsyncTmdbClient:
    """TMDb APIの非同期クライアント。"""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        language: str | None = None,
        default_query: DefaultQuery = None,
        max_retry_count: int = 0,
        rate_limit_fallback_wait: float = DEFAULT_RATE_LIMIT_WAIT,
        rate_limit_max_wait: float = DEFAULT_RATE_LIMIT_MAX_WAIT,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        http_client: httpx.AsyncClient | None = None,
        proxy: str | None = None,
        limits: httpx.Limits | None = None,
    ) -> None:
        """非同期クライアントを初期化する。"""

        self._config, self._retry = _build_configs(
            api_key=api_key,
            base_url=base_url,
            language=language,
            default_query=default_query,
            max_retry_count=max_retry_count,
            rate_limit_fallback_wait=rate_limit_fallback_wait,
            rate_limit_max_wait=rate_limit_max_wait,
            timeout=timeout,
            user_agent=user_agent,
        )

        self._owns_client = http_client is None
        if http_client is None:
            self._http_client = httpx.AsyncClient(
                **_client_kwargs(base_url=base_url, timeout=timeout, proxy=proxy, limits=limits),
            )
        else:
            self._http_client = http_client

        self.rest = AsyncRestExecutor(
            client=self._http_client,
            config=self._config,
            retry_config=self._retry,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def retry_config(self) -> RetryConfig:
        return self._retry

    def create_request(self, endpoint: str) -> RestRequest:
        """エンドポイント用の要求ビルダーを作る。"""

        return RestRequest(self._config, endpoint)

    async def aclose(self) -> None:
        """内部Clientをクローズする。"""

        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "AsyncTmdbClient":
        """非同期コンテキスト開始。"""

        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """非同期コンテキスト終了。"""

        await self.aclose()
