"""公開型と内部共通データ構造。"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx

from tmdbrest.enums import HttpMethod

T = TypeVar("T")


@dataclass(slots=True)
class TmdbStatusMessage:
    """エラー応答本文の構造化表現。

    Attributes:
        status_code: API独自のステータスコード。
        status_message: エラーメッセージ。
        success: 成功フラグ。本文に無い場合はNone。
    """

    status_code: int | None
    status_message: str | None
    success: bool | None = None

    @classmethod
    def from_text(cls, text: str) -> TmdbStatusMessage | None:
        """本文からの復元を試みる。

        JSONオブジェクトでない場合や型が合わない場合はNoneを返す。

        Args:
            text: 応答本文。

        Returns:
            復元結果。失敗時はNone。
        """

        try:
            payload = json.loads(text)
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None

        status_code = payload.get("status_code")
        status_message = payload.get("status_message")
        success = payload.get("success")
        if status_code is not None and not isinstance(status_code, int):
            return None
        if status_message is not None and not isinstance(status_message, str):
            return None
        return cls(
            status_code=status_code,
            status_message=status_message,
            success=success if isinstance(success, bool) else None,
        )


@dataclass(slots=True, frozen=True)
class RenderedRequest:
    """1回の送信に使う確定済み要求。

    Attributes:
        method: HTTPメソッド。
        url: クエリ文字列まで解決済みのURL。
        content: JSON本文。無い場合はNone。
        headers: 本文に付随するヘッダ。
    """

    method: HttpMethod
    url: str
    content: bytes | None = None
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class RestResponse:
    """1回の呼び出しの返却エンベロープ。

    404 も例外にせずこの形で返す。

    Attributes:
        status_code: HTTPステータス。
        is_success: 2xx か。
        content: 応答本文。
        error_message: 非2xx時に復元できたエラー本文。
        headers: 応答ヘッダ。
    """

    status_code: int
    is_success: bool
    content: str
    error_message: TmdbStatusMessage | None
    headers: Mapping[str, str]

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """ヘッダ値を大文字小文字を区別せずに取得する。"""

        return httpx.Headers(self.headers).get(name, default)

    def json(self) -> Any:
        """本文をJSONとして読む。"""

        return json.loads(self.content)


def decode_into(payload: Any, result_type: Callable[..., T]) -> T:
    """JSON値を目的の型へ変換する。

    dataclass はオブジェクトの一致するキーだけで生成し、それ以外は
    JSON値をそのまま渡して呼び出す。
    """

    if isinstance(result_type, type) and dataclasses.is_dataclass(result_type):
        if not isinstance(payload, dict):
            raise TypeError(f"{result_type.__name__} にはJSONオブジェクトが必要です。")
        names = {f.name for f in dataclasses.fields(result_type) if f.init}
        return result_type(**{k: v for k, v in payload.items() if k in names})
    return result_type(payload)


@dataclass(slots=True)
class TypedRestResponse(RestResponse, Generic[T]):
    """型付き変換を遅延実行できる返却エンベロープ。

    Attributes:
        result_type: 本文の変換先。
    """

    result_type: Callable[..., T]

    @classmethod
    def from_response(
        cls,
        response: RestResponse,
        result_type: Callable[..., T],
    ) -> TypedRestResponse[T]:
        """素のエンベロープから生成する。"""

        return cls(
            status_code=response.status_code,
            is_success=response.is_success,
            content=response.content,
            error_message=response.error_message,
            headers=response.headers,
            result_type=result_type,
        )

    def get_data_object(self) -> T:
        """本文を ``result_type`` へ変換する。

        Raises:
            TmdbDecodeError: 本文の解析または変換に失敗した場合。
        """

        from tmdbrest.errors import TmdbDecodeError

        try:
            return decode_into(json.loads(self.content), self.result_type)
        except (TypeError, ValueError, LookupError, AttributeError) as exc:
            raise TmdbDecodeError(
                f"応答本文を変換できませんでした: {exc}",
                status=self.status_code,
                raw_response_excerpt=self.content[:2048],
            ) from exc
