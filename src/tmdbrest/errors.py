"""例外定義。"""

from __future__ import annotations

from dataclasses import dataclass

from tmdbrest.enums import ErrorKind
from tmdbrest.types import TmdbStatusMessage


@dataclass(slots=True)
class TmdbErrorContext:
    """例外に付随する共通コンテキスト。

    Attributes:
        request_url: リクエストURL。
        method: HTTPメソッド。
        raw_response_excerpt: レスポンス抜粋。
    """

    request_url: str | None = None
    method: str | None = None
    raw_response_excerpt: str | None = None


class TmdbError(Exception):
    """ライブラリ例外の基底クラス。

    Attributes:
        kind: 例外種別タグ。
        origin: 例外発生元。
        context: 追加コンテキスト。
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        origin: str,
        context: TmdbErrorContext | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.origin = origin
        self.context = context or TmdbErrorContext()


class TmdbApiError(TmdbError):
    """HTTPステータス由来の例外。

    Attributes:
        status: HTTPステータス。
        status_message: 復元できたエラー本文。
    """

    kind_tag: ErrorKind = ErrorKind.UPSTREAM_ERROR

    def __init__(
        self,
        message: str,
        *,
        status: int,
        status_message: TmdbStatusMessage | None = None,
        request_url: str | None = None,
        method: str | None = None,
        raw_response_excerpt: str | None = None,
    ) -> None:
        super().__init__(
            message,
            kind=self.kind_tag,
            origin="server_response",
            context=TmdbErrorContext(
                request_url=request_url,
                method=method,
                raw_response_excerpt=raw_response_excerpt,
            ),
        )
        self.status = status
        self.status_message = status_message


class TmdbUnauthorizedError(TmdbApiError):
    """HTTP 401。APIキーが不正な可能性が高い。"""

    kind_tag = ErrorKind.UNAUTHORIZED


class TmdbUpstreamError(TmdbApiError):
    """401/404/429 以外の非2xx応答。"""

    kind_tag = ErrorKind.UPSTREAM_ERROR


class TmdbRetryBudgetExceededError(TmdbApiError):
    """再試行回数内で429が解消しなかった。"""

    kind_tag = ErrorKind.RETRY_BUDGET_EXCEEDED

    def __init__(
        self,
        message: str,
        *,
        status: int,
        attempts: int,
        status_message: TmdbStatusMessage | None = None,
        request_url: str | None = None,
        method: str | None = None,
        raw_response_excerpt: str | None = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            status_message=status_message,
            request_url=request_url,
            method=method,
            raw_response_excerpt=raw_response_excerpt,
        )
        self.attempts = attempts


class TmdbUnexpectedContentTypeError(TmdbError):
    """応答がJSONではない。"""

    def __init__(
        self,
        *,
        status: int,
        content_type: str | None,
        request_url: str | None = None,
        method: str | None = None,
    ) -> None:
        super().__init__(
            f"JSON以外の応答を受信しました: status={status}, content_type={content_type}",
            kind=ErrorKind.UNEXPECTED_CONTENT_TYPE,
            origin="server_response",
            context=TmdbErrorContext(request_url=request_url, method=method),
        )
        self.status = status
        self.content_type = content_type


class TmdbNetworkError(TmdbError):
    """HTTP通信層の例外。"""

    def __init__(
        self,
        message: str,
        *,
        request_url: str | None = None,
        method: str | None = None,
    ) -> None:
        super().__init__(
            message,
            kind=ErrorKind.NETWORK_FAILURE,
            origin="transport",
            context=TmdbErrorContext(request_url=request_url, method=method),
        )


class TmdbInvalidParameterKindError(TmdbError):
    """未知のパラメータ種別。"""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"パラメータ種別が不正です: {value!r}",
            kind=ErrorKind.INVALID_PARAMETER_KIND,
            origin="client_validation",
        )
        self.value = value


class TmdbCancelledError(TmdbError):
    """呼び出し元による中断。"""

    def __init__(self, *, request_url: str | None = None, method: str | None = None) -> None:
        super().__init__(
            "要求は中断されました。",
            kind=ErrorKind.CANCELLED,
            origin="client",
            context=TmdbErrorContext(request_url=request_url, method=method),
        )


class TmdbDecodeError(TmdbError):
    """応答本文の型変換失敗。"""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        raw_response_excerpt: str | None = None,
    ) -> None:
        super().__init__(
            message,
            kind=ErrorKind.DECODE_FAILURE,
            origin="client",
            context=TmdbErrorContext(raw_response_excerpt=raw_response_excerpt),
        )
        self.status = status
