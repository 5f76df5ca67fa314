"""要求実行サービス。"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from typing import TypeVar

import httpx

from tmdbrest.config import ClientConfig, RetryConfig
from tmdbrest.enums import HttpMethod
from tmdbrest.request import RestRequest
from tmdbrest.services._transport import perform_async_request, perform_sync_request
from tmdbrest.types import RestResponse, TypedRestResponse

T = TypeVar("T")


class RestExecutor:
    """同期要求実行サービス。

    GET/POST/DELETE それぞれに素のエンベロープを返す形と、
    型付きエンベロープを返す ``*_as`` 形を持つ。
    """

    def __init__(
        self,
        *,
        client: httpx.Client,
        config: ClientConfig,
        retry_config: RetryConfig,
    ) -> None:
        self._client = client
        self._config = config
        self._retry_config = retry_config

    def _execute(
        self,
        request: RestRequest,
        method: HttpMethod,
        cancel: threading.Event | None,
    ) -> RestResponse:
        return perform_sync_request(
            client=self._client,
            request=request,
            method=method,
            retry_config=self._retry_config,
            user_agent=self._config.user_agent,
            cancel=cancel,
        )

    def get(self, request: RestRequest, *, cancel: threading.Event | None = None) -> RestResponse:
        """GETで実行する。"""

        return self._execute(request, HttpMethod.GET, cancel)

    def get_as(
        self,
        request: RestRequest,
        result_type: Callable[..., T],
        *,
        cancel: threading.Event | None = None,
    ) -> TypedRestResponse[T]:
        """GETで実行し、型付きエンベロープを返す。"""

        return TypedRestResponse.from_response(
            self._execute(request, HttpMethod.GET, cancel),
            result_type,
        )

    def post(self, request: RestRequest, *, cancel: threading.Event | None = None) -> RestResponse:
        """POSTで実行する。"""

        return self._execute(request, HttpMethod.POST, cancel)

    def post_as(
        self,
        request: RestRequest,
        result_type: Callable[..., T],
        *,
        cancel: threading.Event | None = None,
    ) -> TypedRestResponse[T]:
        """POSTで実行し、型付きエンベロープを返す。"""

        return TypedRestResponse.from_response(
            self._execute(request, HttpMethod.POST, cancel),
            result_type,
        )

    def delete(self, request: RestRequest, *, cancel: threading.Event | None = None) -> RestResponse:
        """DELETEで実行する。"""

        return self._execute(request, HttpMethod.DELETE, cancel)

    def delete_as(
        self,
        request: RestRequest,
        result_type: Callable[..., T],
        *,
        cancel: threading.Event | None = None,
    ) -> TypedRestResponse[T]:
        """DELETEで実行し、型付きエンベロープを返す。"""

        return TypedRestResponse.from_response(
            self._execute(request, HttpMethod.DELETE, cancel),
            result_type,
        )


class AsyncRestExecutor:
    """非同期要求実行サービス。"""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        config: ClientConfig,
        retry_config: RetryConfig,
    ) -> None:
        self._client = client
        self._config = config
        self._retry_config = retry_config

    async def _execute(
        self,
        request: RestRequest,
        method: HttpMethod,
        cancel: asyncio.Event | None,
    ) -> RestResponse:
        return await perform_async_request(
            client=self._client,
            request=request,
            method=method,
            retry_config=self._retry_config,
            user_agent=self._config.user_agent,
            cancel=cancel,
        )

    async def get(self, request: RestRequest, *, cancel: asyncio.Event | None = None) -> RestResponse:
        """GETで実行する。"""

        return await self._execute(request, HttpMethod.GET, cancel)

    async def get_as(
        self,
        request: RestRequest,
        result_type: Callable[..., T],
        *,
        cancel: asyncio.Event | None = None,
    ) -> TypedRestResponse[T]:
        """GETで実行し、型付きエンベロープを返す。"""

        response = await self._execute(request, HttpMethod.GET, cancel)
        return TypedRestResponse.from_response(response, result_type)

    async def post(self, request: RestRequest, *, cancel: asyncio.Event | None = None) -> RestResponse:
        """POSTで実行する。"""

        return await self._execute(request, HttpMethod.POST, cancel)

    async def post_as(
        self,
        request: RestRequest,
        result_type: Callable[..., T],
        *,
        cancel: asyncio.Event | None = None,
    ) -> TypedRestResponse[T]:
        """POSTで実行し、型付きエンベロープを返す。"""

        response = await self._execute(request, HttpMethod.POST, cancel)
        return TypedRestResponse.from_response(response, result_type)

    async def delete(self, request: RestRequest, *, cancel: asyncio.Event | None = None) -> RestResponse:
        """DELETEで実行する。"""

        return await self._execute(request, HttpMethod.DELETE, cancel)

    async def delete_as(
        self,
        request: RestRequest,
        result_type: Callable[..., T],
        *,
        cancel: asyncio.Event | None = None,
    ) -> TypedRestResponse[T]:
        """DELETEで実行し、型付きエンベロープを返す。"""

        response = await self._execute(request, HttpMethod.DELETE, cancel)
        return TypedRestResponse.from_response(response, result_type)
