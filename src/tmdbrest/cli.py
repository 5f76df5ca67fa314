"""CLIエントリポイント。"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tmdbrest.errors import TmdbError
from tmdbrest.types import RestResponse


def _require_typer() -> Any:
    try:
        import typer
    except ImportError as exc:
        raise RuntimeError(
            "CLIには typer が必要です。pip install 'tmdbrest[cli]' を実行してください。"
        ) from exc
    return typer


def _parse_pairs(values: list[str] | None) -> list[tuple[str, str]]:
    """``key=value`` 形式の指定を順序どおり分解する。"""

    pairs: list[tuple[str, str]] = []
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"key=value 形式で指定してください: {item!r}")
        pairs.append((key, value))
    return pairs


def _dump_response(response: RestResponse, out: Path) -> None:
    try:
        body: Any = response.json()
    except ValueError:
        body = response.content
    payload = {
        "status_code": response.status_code,
        "is_success": response.is_success,
        "headers": dict(response.headers),
        "body": body,
    }
    out.write_text(json.dumps(payload, ensure_ascii=False, indent=2, default=str), encoding="utf-8")


def _run(
    *,
    method: str,
    endpoint: str,
    segment: list[str] | None,
    query: list[str] | None,
    body: str | None,
    api_key: str | None,
    language: str | None,
    max_retry_count: int,
    out: Path,
) -> None:
    from tmdbrest import TmdbClient

    with TmdbClient(
        api_key=api_key,
        language=language,
        max_retry_count=max_retry_count,
    ) as client:
        request = client.create_request(endpoint)
        for key, value in _parse_pairs(segment):
            request.add_url_segment(key, value)
        for key, value in _parse_pairs(query):
            request.add_query_parameter(key, value)
        if body is not None:
            request.set_body(json.loads(body))
        execute = getattr(client.rest, method)
        _dump_response(execute(request), out)


def _run_or_exit(typer: Any, **kwargs: Any) -> None:
    """要求を実行し、ライブラリ例外や入力エラーは終了コード1へ変換する。"""

    try:
        _run(**kwargs)
    except (TmdbError, ValueError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def app_entry() -> None:
    """CLIアプリを起動する。"""

    typer = _require_typer()

    app = typer.Typer(no_args_is_help=True)

    def _command(method: str) -> None:
        @app.command(method)
        def command(
            endpoint: str = typer.Argument(...),
            segment: list[str] | None = typer.Option(None, "--segment"),
            query: list[str] | None = typer.Option(None, "--query"),
            body: str | None = typer.Option(None, "--body"),
            api_key: str | None = typer.Option(None, "--api-key", envvar="TMDB_API_KEY"),
            language: str | None = typer.Option(None, "--language"),
            max_retry_count: int = typer.Option(0, "--max-retry-count"),
            out: Path = typer.Option(..., "--out"),
        ) -> None:
            """1件の要求を実行し、応答をJSONで保存する。"""

            _run_or_exit(
                typer,
                method=method,
                endpoint=endpoint,
                segment=segment,
                query=query,
                body=body,
                api_key=api_key,
                language=language,
                max_retry_count=max_retry_count,
                out=out,
            )

    for name in ("get", "post", "delete"):
        _command(name)

    app()


if __name__ == "__main__":
    app_entry()
