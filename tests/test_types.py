"""返却型とエラー本文復元のテスト。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from tmdbrest.enums import ErrorKind
from tmdbrest.errors import TmdbDecodeError
from tmdbrest.types import RestResponse, TmdbStatusMessage, TypedRestResponse, decode_into


def test_status_message_from_error_body() -> None:
    message = TmdbStatusMessage.from_text(
        '{"status_code": 34, "status_message": "Not found.", "success": false}'
    )

    assert message == TmdbStatusMessage(status_code=34, status_message="Not found.", success=False)


@pytest.mark.parametrize(
    "text",
    ["", "<html></html>", "[1, 2]", '{"status_code": "x"}', '{"status_message": 5}'],
)
def test_status_message_tolerates_unexpected_bodies(text: str) -> None:
    assert TmdbStatusMessage.from_text(text) is None


def test_status_message_without_success_flag() -> None:
    message = TmdbStatusMessage.from_text('{"status_code": 6, "status_message": "Invalid id"}')

    assert message is not None
    assert message.success is None


@dataclass
class Genre:
    id: int
    name: str
    tags: list[str] = field(default_factory=list)


def test_decode_into_dataclass_ignores_unknown_keys() -> None:
    assert decode_into({"id": 18, "name": "Drama", "extra": 1}, Genre) == Genre(id=18, name="Drama")


def test_decode_into_callable() -> None:
    assert decode_into([1, 2], tuple) == (1, 2)


def test_typed_response_keeps_envelope_fields() -> None:
    raw = RestResponse(
        status_code=404,
        is_success=False,
        content='{"status_code": 34}',
        error_message=TmdbStatusMessage(status_code=34, status_message=None),
        headers={"Content-Type": "application/json"},
    )

    typed = TypedRestResponse.from_response(raw, dict)

    assert typed.status_code == 404
    assert not typed.is_success
    assert typed.error_message is raw.error_message
    assert typed.get_header("content-type") == "application/json"
    assert typed.get_data_object() == {"status_code": 34}


@pytest.mark.parametrize(
    ("content", "result_type", "cause"),
    [
        ('{"id": 1}', lambda d: d["title"], KeyError),
        ("[]", lambda d: d[0], IndexError),
        ('{"id": 1}', lambda d: d.title, AttributeError),
    ],
)
def test_typed_response_wraps_lookup_failures(
    content: str,
    result_type: Any,
    cause: type[Exception],
) -> None:
    typed = TypedRestResponse(
        status_code=200,
        is_success=True,
        content=content,
        error_message=None,
        headers={"content-type": "application/json"},
        result_type=result_type,
    )

    with pytest.raises(TmdbDecodeError) as excinfo:
        typed.get_data_object()

    assert excinfo.value.kind == ErrorKind.DECODE_FAILURE
    assert excinfo.value.status == 200
    assert isinstance(excinfo.value.__cause__, cause)
    assert excinfo.value.context.raw_response_excerpt == content
