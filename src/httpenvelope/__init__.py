"""Normalizing HTTP request client."""

from .networking.client import HttpClient
from .networking.config import HttpClientConfig, ProxyConfig
from .networking.errors import (
    HttpClientError,
    HttpStatusError,
    PreconditionError,
    TransportError,
)
from .networking.status import ResponseStatus, StatusCode
from .networking.types import (
    FormBody,
    RawBody,
    RequestAttempt,
    ResponseEnvelope,
    ResultData,
)

__all__ = [
    "FormBody",
    "HttpClient",
    "HttpClientConfig",
    "HttpClientError",
    "HttpStatusError",
    "PreconditionError",
    "ProxyConfig",
    "RawBody",
    "RequestAttempt",
    "ResponseEnvelope",
    "ResponseStatus",
    "ResultData",
    "StatusCode",
    "TransportError",
]
