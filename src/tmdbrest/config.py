"""設定値定義。"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_BASE_URL = "https://api.themoviedb.org/3/"
DEFAULT_USER_AGENT = "tmdbrest/0.1.0"
DEFAULT_RATE_LIMIT_WAIT = 1.0
DEFAULT_RATE_LIMIT_MAX_WAIT = 600.0
JSON_MEDIA_TYPE = "application/json"


@dataclass(slots=True, frozen=True)
class RetryConfig:
    """再試行設定。

    Attributes:
        max_retry_count: 429応答時の最大再試行回数。0 は1回だけ送信する。
        fallback_wait: Retry-After が無いか0以下のときの待機秒。
        max_wait: 1回の待機秒の上限。
    """

    max_retry_count: int = 0
    fallback_wait: float = DEFAULT_RATE_LIMIT_WAIT
    max_wait: float = DEFAULT_RATE_LIMIT_MAX_WAIT


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """クライアント共通設定。

    生成後は変更しない。複数の呼び出しから同時に読まれる。

    Attributes:
        base_url: APIベースURL。
        api_key: APIキー。既定クエリとして全要求に付与する。
        language: 既定言語。既定クエリとして全要求に付与する。
        extra_default_query: 追加の既定クエリ。
        timeout: タイムアウト秒。
        user_agent: User-Agent。
    """

    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    language: str | None = None
    extra_default_query: tuple[tuple[str, str], ...] = ()
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    def default_query_params(self) -> list[tuple[str, str]]:
        """全要求の末尾に付与するクエリを順序どおり返す。"""

        pairs: list[tuple[str, str]] = []
        if self.api_key is not None:
            pairs.append(("api_key", self.api_key))
        if self.language is not None:
            pairs.append(("language", self.language))
        pairs.extend(self.extra_default_query)
        return pairs
