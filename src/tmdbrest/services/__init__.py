"""サービス層モジュール。"""

from tmdbrest.services.executor import AsyncRestExecutor, RestExecutor

__all__ = [
    "AsyncRestExecutor",
    "RestExecutor",
]
