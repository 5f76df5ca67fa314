"""要求ビルダー。"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from enum import Enum
from typing import Any
from urllib.parse import urlencode, urljoin

from tmdbrest.config import JSON_MEDIA_TYPE, ClientConfig
from tmdbrest.enums import HttpMethod, ParameterType
from tmdbrest.types import RenderedRequest
from tmdbrest.validation import normalize_method, normalize_parameter_type

_WRITE_METHODS = {HttpMethod.POST}


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"JSONへ変換できない値です: {type(value).__name__}")


def serialize_body(payload: Any) -> bytes:
    """本文をJSONバイト列へ変換する。"""

    return json.dumps(payload, ensure_ascii=False, default=_json_default).encode("utf-8")


def substitute_segments(endpoint: str, segments: list[tuple[str, str]]) -> str:
    """``{key}`` を登録順に置換する。未解決のプレースホルダはそのまま残す。"""

    for key, value in segments:
        endpoint = endpoint.replace("{" + key + "}", value)
    return endpoint


class RestRequest:
    """1回の論理呼び出しのパラメータを蓄積する。

    ``render`` は内部状態を変更しないため、再試行ごとに同じ要求を組み立て直せる。
    """

    def __init__(self, config: ClientConfig, endpoint: str) -> None:
        self._config = config
        self._endpoint = endpoint
        self._query: list[tuple[str, str]] = []
        self._segments: list[tuple[str, str]] = []
        self._body: Any = None

    @property
    def endpoint(self) -> str:
        """エンドポイントテンプレート。"""

        return self._endpoint

    @property
    def query_parameters(self) -> list[tuple[str, str]]:
        """登録済みクエリの複製。"""

        return list(self._query)

    @property
    def url_segments(self) -> list[tuple[str, str]]:
        """登録済みURLセグメントの複製。"""

        return list(self._segments)

    @property
    def body(self) -> Any:
        return self._body

    def add_query_parameter(self, key: str, value: str) -> RestRequest:
        """クエリを末尾に追加する。同じキーも上書きしない。"""

        self._query.append((key, value))
        return self

    def add_url_segment(self, key: str, value: str) -> RestRequest:
        """URLセグメント置換を末尾に追加する。"""

        self._segments.append((key, value))
        return self

    def add_parameter(
        self,
        key: str,
        value: str,
        kind: ParameterType | str = ParameterType.QUERY_STRING,
    ) -> RestRequest:
        """種別に応じてクエリまたはURLセグメントへ追加する。

        Args:
            key: キー。
            value: 値。
            kind: パラメータ種別。

        Returns:
            自身。

        Raises:
            TmdbInvalidParameterKindError: 種別が不正な場合。
        """

        kind_norm = normalize_parameter_type(kind)
        if kind_norm == ParameterType.URL_SEGMENT:
            return self.add_url_segment(key, value)
        return self.add_query_parameter(key, value)

    def set_body(self, payload: Any) -> RestRequest:
        """本文を設定する。最後の設定が有効。"""

        self._body = payload
        return self

    def build_url(self) -> str:
        """クエリ文字列まで解決したURLを返す。"""

        path = substitute_segments(self._endpoint, self._segments)
        url = urljoin(self._config.base_url, path)
        # caller pairs first, then process-wide defaults
        pairs = self._query + self._config.default_query_params()
        if not pairs:
            return url
        return f"{url}?{urlencode(pairs)}"

    def render(self, method: HttpMethod | str) -> RenderedRequest:
        """送信用の要求を新たに組み立てる。

        Args:
            method: HTTPメソッド。

        Returns:
            確定済み要求。本文は POST かつ本文設定済みのときだけ付与する。
        """

        method_norm = normalize_method(method)
        content: bytes | None = None
        headers: dict[str, str] = {}
        if method_norm in _WRITE_METHODS and self._body is not None:
            content = serialize_body(self._body)
            headers["Content-Type"] = JSON_MEDIA_TYPE
        return RenderedRequest(
            method=method_norm,
            url=self.build_url(),
            content=content,
            headers=headers,
        )

    def __repr__(self) -> str:
        return f"RestRequest(endpoint={self._endpoint!r}, query={self._query!r}, segments={self._segments!r})"
