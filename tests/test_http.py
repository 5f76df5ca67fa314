"""HTTP補助関数のテスト。"""

from __future__ import annotations

from email.utils import format_datetime
from datetime import datetime, timedelta, timezone

from tmdbrest.enums import ResponseDisposition
from tmdbrest.http import (
    build_request_headers,
    classify_status,
    decide_rate_limit_wait,
    is_json_content_type,
    parse_retry_after,
)


def test_parse_retry_after_seconds() -> None:
    assert parse_retry_after("2") == 2.0
    assert parse_retry_after(" 10 ") == 10.0
    assert parse_retry_after("0") == 0.0


def test_parse_retry_after_http_date() -> None:
    future = datetime.now(timezone.utc) + timedelta(seconds=30)
    seconds = parse_retry_after(format_datetime(future, usegmt=True))

    assert seconds is not None
    assert 25.0 <= seconds <= 30.0


def test_parse_retry_after_past_date_is_zero() -> None:
    past = datetime(2000, 1, 1, tzinfo=timezone.utc)

    assert parse_retry_after(format_datetime(past, usegmt=True)) == 0.0


def test_parse_retry_after_invalid() -> None:
    assert parse_retry_after(None) is None
    assert parse_retry_after("") is None
    assert parse_retry_after("soon") is None


def test_decide_rate_limit_wait_prefers_positive_retry_after() -> None:
    decision = decide_rate_limit_wait(retry_after=3.0, fallback=1.0, max_wait=600.0)

    assert decision.seconds == 3.0
    assert decision.source == "retry_after"


def test_decide_rate_limit_wait_falls_back_on_zero_or_missing() -> None:
    assert decide_rate_limit_wait(retry_after=0.0, fallback=1.0, max_wait=600.0).seconds == 1.0
    assert decide_rate_limit_wait(retry_after=None, fallback=1.0, max_wait=600.0).source == "fallback"


def test_parse_retry_after_minus_zero_offset_is_utc() -> None:
    future = datetime.now(timezone.utc) + timedelta(seconds=30)
    header = future.strftime("%a, %d %b %Y %H:%M:%S -0000")

    seconds = parse_retry_after(header)

    assert seconds is not None
    assert 25.0 <= seconds <= 30.0


def test_parse_retry_after_huge_delta_is_parsed() -> None:
    assert parse_retry_after("99999999999999999999999") == 1e23
    assert parse_retry_after("²") is None


def test_decide_rate_limit_wait_caps_huge_retry_after() -> None:
    retry_after = parse_retry_after("99999999999999999999999")

    decision = decide_rate_limit_wait(retry_after=retry_after, fallback=1.0, max_wait=600.0)

    assert decision.seconds == 600.0
    assert decision.source == "retry_after_capped"


def test_decide_rate_limit_wait_fallback_respects_cap() -> None:
    decision = decide_rate_limit_wait(retry_after=None, fallback=5.0, max_wait=2.0)

    assert decision.seconds == 2.0
    assert decision.source == "fallback"


def test_is_json_content_type() -> None:
    assert is_json_content_type("application/json")
    assert is_json_content_type("application/json;charset=utf-8")
    assert is_json_content_type("Application/JSON; charset=utf-8")
    assert not is_json_content_type("text/html")
    assert not is_json_content_type("text/json")
    assert not is_json_content_type(None)


def test_classify_status() -> None:
    assert classify_status(200) == ResponseDisposition.RETURN
    assert classify_status(201) == ResponseDisposition.RETURN
    assert classify_status(404) == ResponseDisposition.RETURN
    assert classify_status(429) == ResponseDisposition.RATE_LIMITED
    assert classify_status(401) == ResponseDisposition.UNAUTHORIZED
    assert classify_status(400) == ResponseDisposition.UPSTREAM_ERROR
    assert classify_status(503) == ResponseDisposition.UPSTREAM_ERROR
    assert classify_status(302) == ResponseDisposition.UPSTREAM_ERROR


def test_build_request_headers() -> None:
    headers = build_request_headers("tmdbrest/test")

    assert headers["User-Agent"] == "tmdbrest/test"
    assert headers["Accept"] == "application/json"
