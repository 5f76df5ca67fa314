"""入力正規化と送信前バリデーション。"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from tmdbrest.enums import HttpMethod, ParameterType
from tmdbrest.errors import TmdbInvalidParameterKindError


def normalize_parameter_type(value: ParameterType | str) -> ParameterType:
    """パラメータ種別を正規化する。

    Args:
        value: 種別。列挙値または文字列（大文字小文字は無視）。

    Returns:
        正規化後の種別。

    Raises:
        TmdbInvalidParameterKindError: 値が不正な場合。
    """

    if isinstance(value, ParameterType):
        return value
    if not isinstance(value, str):
        raise TmdbInvalidParameterKindError(value)
    try:
        return ParameterType(value.strip().lower())
    except ValueError as exc:
        raise TmdbInvalidParameterKindError(value) from exc


def normalize_method(value: HttpMethod | str) -> HttpMethod:
    """HTTPメソッドを正規化する。"""

    if isinstance(value, HttpMethod):
        return value
    try:
        return HttpMethod(str(value).strip().upper())
    except ValueError as exc:
        raise ValueError(f"未対応のHTTPメソッドです: {value!r}") from exc


def validate_retry_settings(
    *,
    max_retry_count: int,
    fallback_wait: float,
    max_wait: float,
) -> None:
    """再試行設定を検証する。

    Raises:
        ValueError: 範囲外の値が指定された場合。
    """

    if max_retry_count < 0:
        raise ValueError("max_retry_count は0以上を指定してください。")
    if fallback_wait < 0:
        raise ValueError("rate_limit_fallback_wait は0以上を指定してください。")
    if max_wait <= 0:
        raise ValueError("rate_limit_max_wait は0より大きい値を指定してください。")


def normalize_query_pairs(
    value: Mapping[str, str] | Iterable[tuple[str, str]] | None,
) -> tuple[tuple[str, str], ...]:
    """既定クエリ入力を順序付きの組へ正規化する。"""

    if value is None:
        return ()
    items = value.items() if isinstance(value, Mapping) else value
    return tuple((str(k), str(v)) for k, v in items)
