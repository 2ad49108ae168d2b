"""Transport collaborators that perform the actual network I/O.

The client only depends on the ``Transport`` protocol. ``RequestsTransport``
is the default implementation, built on a ``requests.Session``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Protocol

import requests
from requests.utils import get_encoding_from_headers, should_bypass_proxies

from .config import ProxyConfig
from .errors import HttpStatusError, TransportError
from .types import Body, FormBody

Timeout = float | tuple[float, float] | None

_PROTOCOL_VERSIONS = {9: "0.9", 10: "1.0", 11: "1.1", 20: "2", 30: "3"}


@dataclass(frozen=True)
class TransportResponse:
    """Transport-agnostic view of an HTTP response."""

    status_code: int
    reason: str
    protocol_version: str
    body: bytes
    body_size: int
    headers: Mapping[str, list[str]] = field(default_factory=dict)
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "headers",
            MappingProxyType(
                {key: list(values) for key, values in self.headers.items()}
            ),
        )

    @property
    def text(self) -> str:
        """Body decoded with the response charset."""
        try:
            return self.body.decode(self.encoding, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """Send one request and report a response or a classified failure."""

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Body,
        follow_redirects: bool,
        verify_tls: bool,
        proxy: ProxyConfig | None,
        timeout: Timeout,
    ) -> TransportResponse:
        """Raise HttpStatusError or TransportError on failure."""
        ...

    def close(self) -> None: ...


class RequestsTransport:
    """``Transport`` backed by a ``requests.Session``."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        raise_for_status: bool = True,
    ) -> None:
        self._session = session if session is not None else requests.Session()
        self._raise_for_status = raise_for_status

    @staticmethod
    def _protocol_version(response: requests.Response) -> str:
        version = getattr(response.raw, "version", None)
        if isinstance(version, int):
            return _PROTOCOL_VERSIONS.get(version, "1.1")
        return "1.1"

    @staticmethod
    def _headers(response: requests.Response) -> dict[str, list[str]]:
        """Keep repeated headers as separate values when urllib3 has them."""
        raw_headers = getattr(response.raw, "headers", None)
        if raw_headers is not None and hasattr(raw_headers, "getlist"):
            return {
                name: list(raw_headers.getlist(name))
                for name in raw_headers.keys()
            }
        return {name: [value] for name, value in response.headers.items()}

    @staticmethod
    def _encoding(response: requests.Response) -> str:
        return (
            response.encoding
            or get_encoding_from_headers(response.headers)
            or response.apparent_encoding
            or "utf-8"
        )

    @classmethod
    def convert(cls, response: requests.Response) -> TransportResponse:
        """Build a TransportResponse from a ``requests`` response."""
        content = response.content or b""
        return TransportResponse(
            status_code=response.status_code,
            reason=response.reason or "",
            protocol_version=cls._protocol_version(response),
            body=content,
            body_size=len(content),
            headers=cls._headers(response),
            encoding=cls._encoding(response),
        )

    @staticmethod
    def _proxies(
        url: str, proxy: ProxyConfig | None
    ) -> dict[str, str] | None:
        if proxy is None:
            return None
        if proxy.no_proxy and should_bypass_proxies(
            url, no_proxy=",".join(sorted(proxy.no_proxy))
        ):
            return None
        return {"https": proxy.https, "http": proxy.http}

    @staticmethod
    def _payload(body: Body) -> Any:
        if isinstance(body, FormBody):
            return body.render()
        return body.render().encode("utf-8")

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Body,
        follow_redirects: bool,
        verify_tls: bool,
        proxy: ProxyConfig | None,
        timeout: Timeout,
    ) -> TransportResponse:
        try:
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=self._payload(body),
                allow_redirects=follow_redirects,
                verify=verify_tls,
                proxies=self._proxies(url, proxy),
                timeout=timeout,
            )
            if self._raise_for_status:
                response.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            converted = (
                self.convert(exc.response)
                if exc.response is not None
                else None
            )
            raise HttpStatusError(str(exc), response=converted) from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(str(exc), kind=type(exc).__name__) from exc
        return self.convert(response)

    def close(self) -> None:
        self._session.close()
