"""Well-known HTTP status codes and synthetic status classification.

Transport failures never produce a real HTTP status. For those, the
client scans the failure message against ``CUSTOM_STATUS_RULES`` and
reports the status of the *last* rule whose substring occurs in the
message, so narrower rules placed later in the table override broad ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, NamedTuple


class StatusCode(IntEnum):
    UNKNOWN = 0
    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    MOVED_PERMANENTLY = 301
    FOUND = 302
    NOT_MODIFIED = 304
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_SERVER_ERROR = 500

    @property
    def text(self) -> str:
        return CODE_TEXT[self]

    @classmethod
    def find(cls, code: int) -> StatusCode:
        """Return the member for ``code`` or ``UNKNOWN`` when unlisted."""
        try:
            return cls(int(code))
        except ValueError:
            return cls.UNKNOWN


CODE_TEXT = {
    StatusCode.INTERNAL_SERVER_ERROR: "Internal Server Error",
    StatusCode.CONFLICT: "Conflict",
    StatusCode.NOT_FOUND: "Not Found",
    StatusCode.FORBIDDEN: "Forbidden",
    StatusCode.UNAUTHORIZED: "Unauthorized",
    StatusCode.BAD_REQUEST: "Bad Request",
    StatusCode.NOT_MODIFIED: "Not Modified",
    StatusCode.FOUND: "Found",
    StatusCode.MOVED_PERMANENTLY: "Moved Permanently",
    StatusCode.NO_CONTENT: "No Content",
    StatusCode.CREATED: "Created",
    StatusCode.OK: "OK",
    StatusCode.UNKNOWN: "Unknown Code",
}


@dataclass(frozen=True)
class ResponseStatus:
    """A status code paired with its reason text."""

    code: int
    text: str

    def __str__(self) -> str:
        return f"{self.code} {self.text}"

    @classmethod
    def find_by_code(cls, code: int) -> ResponseStatus:
        status = StatusCode.find(code)
        return cls(int(status), status.text)

    @classmethod
    def unknown(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.UNKNOWN)

    @classmethod
    def ok(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.OK)

    @classmethod
    def created(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.CREATED)

    @classmethod
    def no_content(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.NO_CONTENT)

    @classmethod
    def moved_permanently(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.MOVED_PERMANENTLY)

    @classmethod
    def found(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.FOUND)

    @classmethod
    def not_modified(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.NOT_MODIFIED)

    @classmethod
    def bad_request(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.BAD_REQUEST)

    @classmethod
    def unauthorized(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.UNAUTHORIZED)

    @classmethod
    def forbidden(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.FORBIDDEN)

    @classmethod
    def not_found(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.NOT_FOUND)

    @classmethod
    def conflict(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.CONFLICT)

    @classmethod
    def internal_server_error(cls) -> ResponseStatus:
        return cls.find_by_code(StatusCode.INTERNAL_SERVER_ERROR)


class CustomStatusRule(NamedTuple):
    match: str
    code: StatusCode


# Order matters: later matches override earlier ones.
CUSTOM_STATUS_RULES: tuple[CustomStatusRule, ...] = (
    CustomStatusRule("Max retries exceeded", StatusCode.INTERNAL_SERVER_ERROR),
    CustomStatusRule("Connection refused", StatusCode.INTERNAL_SERVER_ERROR),
    CustomStatusRule("timed out", StatusCode.INTERNAL_SERVER_ERROR),
    CustomStatusRule("Exceeded 30 redirects", StatusCode.MOVED_PERMANENTLY),
    CustomStatusRule("Could not resolve host", StatusCode.NOT_FOUND),
    CustomStatusRule("Name or service not known", StatusCode.NOT_FOUND),
    CustomStatusRule("Failed to resolve", StatusCode.NOT_FOUND),
    CustomStatusRule("CERTIFICATE_VERIFY_FAILED", StatusCode.FORBIDDEN),
    CustomStatusRule("Proxy Authentication Required", StatusCode.UNAUTHORIZED),
)


def classify_error(
    message: str,
    rules: Iterable[CustomStatusRule] = CUSTOM_STATUS_RULES,
) -> ResponseStatus | None:
    """Map a transport failure message to a synthetic status.

    Args:
        message: Error text reported by the transport.
        rules: Ordered rule table; every rule is checked.

    Returns:
        The status of the last matching rule, or None if no rule matches.
    """
    matched: ResponseStatus | None = None
    for rule in rules:
        if rule.match in message:
            matched = ResponseStatus.find_by_code(rule.code)
    return matched
