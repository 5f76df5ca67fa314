"""HTTP実行補助。"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING

from tmdbrest.config import JSON_MEDIA_TYPE
from tmdbrest.enums import ResponseDisposition

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True)
class WaitDecision:
    """待機時間決定結果。

    Attributes:
        seconds: 待機秒。
        source: 待機根拠。
    """

    seconds: float
    source: str


def parse_retry_after(value: str | None) -> float | None:
    """Retry-Afterヘッダを秒へ変換する。

    delta-seconds と HTTP-date の両形式を受け付ける。解釈できない値はNone。
    """

    if not value:
        return None
    text = value.strip()
    if text.isascii() and text.isdigit():
        return float(text)
    try:
        dt = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        # "-0000" yields a naive datetime; the value is still UTC
        dt = dt.replace(tzinfo=timezone.utc)
    return max(0.0, dt.timestamp() - time.time())


def decide_rate_limit_wait(
    *,
    retry_after: float | None,
    fallback: float,
    max_wait: float,
) -> WaitDecision:
    """429応答後の待機秒を決定する。

    サーバが0秒やヘッダ無しで429を返すことがあるため、正の値以外は固定待機にする。
    Retry-After は ``max_wait`` を上限とする。
    """

    if retry_after is not None and retry_after > 0:
        if retry_after > max_wait:
            return WaitDecision(seconds=max_wait, source="retry_after_capped")
        return WaitDecision(seconds=retry_after, source="retry_after")
    return WaitDecision(seconds=min(fallback, max_wait), source="fallback")


def is_json_content_type(value: str | None) -> bool:
    """Content-Type が JSON か判定する。パラメータ部は無視する。"""

    if not value:
        return False
    media_type = value.split(";", 1)[0].strip().lower()
    return media_type == JSON_MEDIA_TYPE


def classify_status(status_code: int) -> ResponseDisposition:
    """HTTPステータスから処理方針を決定する。"""

    if status_code == 429:
        return ResponseDisposition.RATE_LIMITED
    if status_code == 401:
        return ResponseDisposition.UNAUTHORIZED
    if 200 <= status_code < 300 or status_code == 404:
        return ResponseDisposition.RETURN
    return ResponseDisposition.UPSTREAM_ERROR


def build_request_headers(user_agent: str) -> Mapping[str, str]:
    """標準ヘッダを構築する。"""

    return {
        "Accept": JSON_MEDIA_TYPE,
        "User-Agent": user_agent,
    }
