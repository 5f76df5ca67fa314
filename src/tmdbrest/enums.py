"""列挙型定義。"""

from __future__ import annotations

from enum import StrEnum


class ParameterType(StrEnum):
    """リクエストパラメータの種別。

    Attributes:
        QUERY_STRING: クエリ文字列。
        URL_SEGMENT: エンドポイント内の ``{name}`` 置換。
    """

    QUERY_STRING = "query_string"
    URL_SEGMENT = "url_segment"


class HttpMethod(StrEnum):
    """送信に使うHTTPメソッド。"""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


class ErrorKind(StrEnum):
    """例外の種別タグ。

    例外クラスの継承関係に依存せず分岐できるよう、全例外が保持する。
    """

    NETWORK_FAILURE = "network_failure"
    UNEXPECTED_CONTENT_TYPE = "unexpected_content_type"
    UNAUTHORIZED = "unauthorized"
    UPSTREAM_ERROR = "upstream_error"
    RETRY_BUDGET_EXCEEDED = "retry_budget_exceeded"
    INVALID_PARAMETER_KIND = "invalid_parameter_kind"
    CANCELLED = "cancelled"
    DECODE_FAILURE = "decode_failure"


class ResponseDisposition(StrEnum):
    """HTTPステータスに対する処理方針。

    Attributes:
        RATE_LIMITED: 待機して再送する。
        UNAUTHORIZED: 認証失敗として停止する。
        UPSTREAM_ERROR: 上流エラーとして停止する。
        RETURN: 呼び出し元へ返却する（2xx と 404）。
    """

    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    UPSTREAM_ERROR = "upstream_error"
    RETURN = "return"
