"""Value types shared by the client and its transports."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class RawBody:
    """Request body sent verbatim.

    ``is_text`` is False when the call site passed a non-string scalar
    (a number, say); such bodies are never treated as JSON.
    """

    text: str = ""
    is_text: bool = True

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class FormBody:
    """Request body sent as urlencoded form fields."""

    fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "fields", MappingProxyType(dict(self.fields))
        )

    def render(self) -> dict[str, str]:
        return dict(self.fields)


Body = Union[RawBody, FormBody]
BodyInput = Union[Body, str, int, float, Mapping[str, Any], None]


def to_body(value: BodyInput) -> Body:
    """Coerce a call-site body into a ``Body`` variant."""
    if isinstance(value, (RawBody, FormBody)):
        return value
    if value is None:
        return RawBody()
    if isinstance(value, Mapping):
        return FormBody({str(k): str(v) for k, v in value.items()})
    if isinstance(value, str):
        return RawBody(value)
    return RawBody(str(value), is_text=False)


@dataclass(frozen=True)
class RequestAttempt:
    """One fully built request, as echoed back in the envelope."""

    url: str
    method: str
    body: Body
    headers: Mapping[str, str]
    retry_count: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "headers", MappingProxyType(dict(self.headers))
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "method": self.method,
            "body": self.body.render(),
            "headers": dict(self.headers),
            "retry_count": self.retry_count,
        }


@dataclass
class ResultData:
    """Normalized outcome of one attempt.

    ``headers`` maps each name to its ordered list of values, except for
    the retry counter header which carries plain text.
    """

    status_code: int
    status_text: str
    protocol_version: str
    body: str
    body_size: int
    headers: dict[str, Any] = field(default_factory=dict)

    def header_value(self, name: str) -> str | None:
        """Return the first value of a header, matched case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() != wanted:
                continue
            if isinstance(value, (list, tuple)):
                return str(value[0]) if value else None
            return str(value)
        return None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "status_text": self.status_text,
            "protocol_version": self.protocol_version,
            "body": self.body,
            "body_size": self.body_size,
            "headers": {
                key: list(value) if isinstance(value, (list, tuple)) else value
                for key, value in self.headers.items()
            },
        }


@dataclass
class ResponseEnvelope:
    """Uniform result of every request call, successful or not."""

    request: RequestAttempt
    config: Mapping[str, Any]
    message: str = ""
    success: bool = False
    result: ResultData | None = None

    @property
    def status_code(self) -> int:
        """Result status code, 0 when no result is available."""
        return self.result.status_code if self.result is not None else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "msg": self.message,
            "status": self.success,
            "result": self.result.as_dict() if self.result is not None else {},
            "config": dict(self.config),
            "request": self.request.as_dict(),
        }
