"""Error taxonomy for the networking layer.

HttpClientError (base)
├── PreconditionError - request rejected before sending (empty url)
├── HttpStatusError   - server answered with an error-indicating status
└── TransportError    - no response was received at all

``HttpClient`` never raises these to its callers; it folds them into the
response envelope. Transports raise ``HttpStatusError`` and
``TransportError`` to report how an attempt failed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .transport import TransportResponse


class HttpClientError(Exception):
    """Base exception for all networking errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class PreconditionError(HttpClientError):
    """The request could not be attempted with the given arguments."""


class HttpStatusError(HttpClientError):
    """The server responded, but the transport judged the status a failure.

    Attributes:
        response: The converted response, when the transport had one.
    """

    def __init__(
        self, message: str, response: TransportResponse | None = None
    ) -> None:
        super().__init__(message)
        self.response = response


class TransportError(HttpClientError):
    """No HTTP response was obtained (connection, DNS, TLS, timeout...).

    Attributes:
        kind: Short name of the underlying failure class, used as the
            prefix of the synthesized response body.
    """

    def __init__(self, message: str, kind: str = "TransportError") -> None:
        super().__init__(message)
        self.kind = kind
