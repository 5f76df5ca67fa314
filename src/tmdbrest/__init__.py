"""tmdbrest 公開API。"""

from tmdbrest.client import AsyncTmdbClient, TmdbClient
from tmdbrest.enums import ErrorKind, HttpMethod, ParameterType
from tmdbrest.errors import (
    TmdbApiError,
    TmdbCancelledError,
    TmdbDecodeError,
    TmdbError,
    TmdbInvalidParameterKindError,
    TmdbNetworkError,
    TmdbRetryBudgetExceededError,
    TmdbUnauthorizedError,
    TmdbUnexpectedContentTypeError,
    TmdbUpstreamError,
)
from tmdbrest.request import RestRequest
from tmdbrest.types import RenderedRequest, RestResponse, TmdbStatusMessage, TypedRestResponse

__all__ = [
    "AsyncTmdbClient",
    "ErrorKind",
    "HttpMethod",
    "ParameterType",
    "RenderedRequest",
    "RestRequest",
    "RestResponse",
    "TmdbApiError",
    "TmdbCancelledError",
    "TmdbClient",
    "TmdbDecodeError",
    "TmdbError",
    "TmdbInvalidParameterKindError",
    "TmdbNetworkError",
    "TmdbRetryBudgetExceededError",
    "TmdbStatusMessage",
    "TmdbUnauthorizedError",
    "TmdbUnexpectedContentTypeError",
    "TmdbUpstreamError",
    "TypedRestResponse",
]
