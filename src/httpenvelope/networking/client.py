"""Synchronous HTTP client that normalizes every outcome into an envelope.

Callers never see exceptions from request methods. Successful responses,
error-status responses and transport failures all come back as a
``ResponseEnvelope`` whose ``success`` flag and ``message`` describe what
happened. Failures whose message contains the configured retry needle are
attempted again, up to ``retry_max_count`` extra times, without delay.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping

from .config import HttpClientConfig, ProxyConfig
from .errors import HttpStatusError, PreconditionError, TransportError
from .negotiation import (
    CONTENT_TYPE_FORM,
    CONTENT_TYPE_JSON,
    HEADER_CONTENT_TYPE,
    merge_headers,
    negotiate_headers,
)
from .status import CUSTOM_STATUS_RULES, ResponseStatus, classify_error
from .transport import RequestsTransport, Transport, TransportResponse
from .types import (
    BodyInput,
    RequestAttempt,
    ResponseEnvelope,
    ResultData,
    to_body,
)

logger = logging.getLogger(__name__)

RETRY_COUNT_HEADER = "WH-RETRY-COUNT"
SYNTHETIC_PROTOCOL_VERSION = "1.1"

_BODY_SIZE_HEADERS = ("Content-Length", "x-encoded-content-length")


def _result_from_response(response: TransportResponse) -> ResultData:
    return ResultData(
        status_code=response.status_code,
        status_text=response.reason,
        protocol_version=response.protocol_version,
        body=response.text,
        body_size=response.body_size,
        headers={
            key: list(values) for key, values in response.headers.items()
        },
    )


def _synthesized_result(message: str, kind: str) -> ResultData:
    """Result for a failure that produced no usable HTTP response."""
    status = classify_error(message, CUSTOM_STATUS_RULES)
    if status is None:
        status = ResponseStatus.unknown()
    return ResultData(
        status_code=status.code,
        status_text=status.text,
        protocol_version=SYNTHETIC_PROTOCOL_VERSION,
        body=f"{kind} {message}",
        body_size=0,
        headers={},
    )


def reconcile_body_size(result: ResultData) -> int:
    """Resolve the reported body size of a result.

    Length headers replace the transport's count in order, the encoded
    length last. A size still at zero falls back to the body's byte length.
    """
    size = result.body_size
    for name in _BODY_SIZE_HEADERS:
        value = result.header_value(name)
        if value is None:
            continue
        try:
            size = int(value.strip())
        except ValueError:
            logger.debug("Ignoring non-numeric %s header: %r", name, value)
    if size == 0:
        size = len(result.body.encode("utf-8"))
    return size


class HttpClient:
    """Normalizing HTTP client (sync).

    Configure the client first, then issue requests. Setters replace the
    stored ``HttpClientConfig`` and must not be called while requests are
    in flight on other threads.
    """

    METHOD_GET = "GET"
    METHOD_POST = "POST"
    METHOD_PUT = "PUT"
    METHOD_PATCH = "PATCH"
    METHOD_DELETE = "DELETE"

    AUTHORIZATION_TYPE_BASIC = "Basic"
    AUTHORIZATION_TYPE_BEARER = "Bearer"
    HEADER_AUTHORIZATION = "Authorization"
    HEADER_CONTENT_TYPE = HEADER_CONTENT_TYPE
    CONTENT_TYPE_JSON = CONTENT_TYPE_JSON
    CONTENT_TYPE_FORM = CONTENT_TYPE_FORM

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Create a new HttpClient.

        Args:
            config: Headers, TLS, redirect, proxy and retry settings.
            transport: Collaborator performing network I/O. Defaults to a
                ``RequestsTransport`` honouring ``config.raise_for_status``.
        """
        self._config = config if config is not None else HttpClientConfig()
        self._transport: Transport = (
            transport
            if transport is not None
            else RequestsTransport(
                raise_for_status=self._config.raise_for_status
            )
        )

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Configuration

    def _set_default_header(self, name: str, value: str) -> None:
        self._config = replace(
            self._config,
            default_headers=merge_headers(
                self._config.default_headers, {name: value}
            ),
        )

    def set_content_type(self, content_type: str) -> None:
        self._set_default_header(HEADER_CONTENT_TYPE, content_type)

    def set_authorization(
        self, credentials: str, type: str = AUTHORIZATION_TYPE_BASIC
    ) -> None:
        """Send ``Authorization: <type> <credentials>`` with every request."""
        self._set_default_header(
            self.HEADER_AUTHORIZATION, f"{type} {credentials}"
        )

    def set_retry_max_count(self, max_count: int) -> None:
        """Allow up to ``max_count`` retries after the first attempt.

        Raises:
            ValueError: If ``max_count`` is negative; the stored config is
                left unchanged.
        """
        self._config = replace(self._config, retry_max_count=max_count)

    def set_retry_msg_needle(self, needle: str | None) -> None:
        self._config = replace(self._config, retry_needle=needle)

    def set_proxy_config(
        self,
        https: str,
        http: str | None = None,
        no: Iterable[str] | None = None,
    ) -> None:
        """Route requests through a proxy.

        Args:
            https: Proxy used for https urls.
            http: Proxy used for http urls; defaults to ``https``.
            no: Hosts or domains that bypass the proxy, e.g.
                ``[".mit.edu", "foo.com"]``.
        """
        self._config = replace(
            self._config, proxy=ProxyConfig.build(https, http, no)
        )

    def allow_redirects(self, enabled: bool = True) -> None:
        self._config = replace(self._config, follow_redirects=enabled)

    # Execution

    def _build_attempt(
        self,
        url: str,
        method: str,
        body: BodyInput,
        headers: Mapping[str, str] | None,
        retry_count: int,
    ) -> RequestAttempt:
        request_body = to_body(body)
        merged = merge_headers(self._config.default_headers, headers)
        return RequestAttempt(
            url=url,
            method=method,
            body=request_body,
            headers=negotiate_headers(method, request_body, merged),
            retry_count=retry_count,
        )

    def _send(
        self, attempt: RequestAttempt, envelope: ResponseEnvelope
    ) -> None:
        """Run one attempt and fill in the envelope outcome."""
        config = self._config
        try:
            response = self._transport.send(
                attempt.method,
                attempt.url,
                headers=attempt.headers,
                body=attempt.body,
                follow_redirects=config.follow_redirects,
                verify_tls=config.verify_tls,
                proxy=config.proxy,
                timeout=config.timeout,
            )
        except HttpStatusError as exc:
            logger.debug(
                "HTTP status error for %s %s: %s",
                attempt.method,
                attempt.url,
                exc,
            )
            envelope.message = exc.message
            if exc.response is not None:
                envelope.result = _result_from_response(exc.response)
            else:
                envelope.result = _synthesized_result(
                    exc.message, type(exc).__name__
                )
            return
        except TransportError as exc:
            logger.debug(
                "Transport error for %s %s: %s",
                attempt.method,
                attempt.url,
                exc,
            )
            envelope.message = exc.message
            envelope.result = _synthesized_result(exc.message, exc.kind)
            return
        except Exception as exc:  # transport contract violated
            logger.debug(
                "Unexpected transport failure for %s %s",
                attempt.method,
                attempt.url,
                exc_info=True,
            )
            error = TransportError(str(exc), kind=type(exc).__name__)
            envelope.message = error.message
            envelope.result = _synthesized_result(
                error.message, error.kind
            )
            return
        envelope.success = True
        envelope.result = _result_from_response(response)

    def _should_retry(
        self, envelope: ResponseEnvelope, retry_count: int
    ) -> bool:
        needle = self._config.retry_needle
        if not needle or needle not in envelope.message:
            return False
        if retry_count >= self._config.retry_max_count:
            logger.info(
                "Retry budget of %d exhausted for %s %s",
                self._config.retry_max_count,
                envelope.request.method,
                envelope.request.url,
            )
            return False
        return True

    @staticmethod
    def _check_preconditions(attempt: RequestAttempt) -> None:
        if attempt.url == "":
            raise PreconditionError(f"(url) param is empty {attempt.url}")

    def _attempt(self, attempt: RequestAttempt) -> ResponseEnvelope:
        """Send a checked attempt and normalize its result."""
        envelope = ResponseEnvelope(
            request=attempt, config=self._config.as_dict()
        )
        logger.debug(
            "Sending %s %s (retry %d)",
            attempt.method,
            attempt.url,
            attempt.retry_count,
        )
        self._send(attempt, envelope)

        if envelope.result is not None:
            envelope.result.headers[RETRY_COUNT_HEADER] = str(
                attempt.retry_count
            )
            envelope.result.body_size = reconcile_body_size(envelope.result)
        return envelope

    def request(
        self,
        method: str,
        url: str,
        body: BodyInput = "",
        headers: Mapping[str, str] | None = None,
    ) -> ResponseEnvelope:
        """Send a request, retrying on needle-matching failures.

        Args:
            method: HTTP verb.
            url: Absolute URL; an empty url yields a failed envelope.
            body: Raw text, form fields mapping, or a ``Body`` variant.
            headers: Per-request headers overriding the defaults.

        Returns:
            The envelope of the last attempt made.
        """
        method = method.upper()
        retry_count = 0
        while True:
            attempt = self._build_attempt(
                url, method, body, headers, retry_count
            )
            try:
                self._check_preconditions(attempt)
            except PreconditionError as exc:
                logger.debug("Rejected %s request: %s", method, exc)
                return ResponseEnvelope(
                    request=attempt,
                    config=self._config.as_dict(),
                    message=exc.message,
                )

            envelope = self._attempt(attempt)
            if not self._should_retry(envelope, retry_count):
                return envelope
            retry_count += 1
            logger.warning(
                "Retrying %s %s (%d/%d): %s",
                method,
                url,
                retry_count,
                self._config.retry_max_count,
                envelope.message,
            )

    def get(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> ResponseEnvelope:
        return self.request(self.METHOD_GET, url, "", headers)

    def post(
        self,
        url: str,
        body: BodyInput = "",
        headers: Mapping[str, str] | None = None,
    ) -> ResponseEnvelope:
        return self.request(self.METHOD_POST, url, body, headers)

    def put(
        self,
        url: str,
        body: BodyInput = "",
        headers: Mapping[str, str] | None = None,
    ) -> ResponseEnvelope:
        return self.request(self.METHOD_PUT, url, body, headers)

    def patch(
        self,
        url: str,
        body: BodyInput = "",
        headers: Mapping[str, str] | None = None,
    ) -> ResponseEnvelope:
        return self.request(self.METHOD_PATCH, url, body, headers)

    def delete(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> ResponseEnvelope:
        return self.request(self.METHOD_DELETE, url, "", headers)

    GET = get
    POST = post
    PUT = put
    PATCH = patch
    DELETE = delete
