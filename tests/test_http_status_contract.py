# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
from unittest.mock import patch

import requests
from requests.structures import CaseInsensitiveDict

from httpenvelope.networking.client import HttpClient
from httpenvelope.networking.config import HttpClientConfig


def _requests_response(
    *,
    content: bytes = b"",
    status: int = 200,
    url: str = "http://example.com",
    reason: str = "OK",
):
    response = requests.Response()
    response._content = content
    response.status_code = status
    response.url = url
    response.reason = reason
    response.headers = CaseInsensitiveDict({"Content-Type": "text/plain"})
    return response


def test_get_404_is_http_error_with_status_data():
    client = HttpClient(HttpClientConfig(timeout_seconds=5.0))

    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _requests_response(
            content=b"not found",
            status=404,
            reason="Not Found",
            url="http://example.com/missing",
        )
        envelope = client.get("http://example.com/missing")

    assert envelope.success is False
    assert envelope.message == (
        "404 Client Error: Not Found for url: http://example.com/missing"
    )
    assert envelope.result is not None
    assert envelope.result.status_code == 404
    assert envelope.result.status_text == "Not Found"
    assert envelope.result.body == "not found"


def test_get_500_is_http_error_with_status_data():
    client = HttpClient(HttpClientConfig(timeout_seconds=5.0))

    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _requests_response(
            content=b"server error",
            status=500,
            reason="Internal Server Error",
        )
        envelope = client.get("http://example.com/error")

    assert envelope.success is False
    assert envelope.message.startswith("500 Server Error")
    assert envelope.result is not None
    assert envelope.result.status_code == 500
    assert envelope.result.status_text == "Internal Server Error"


def test_get_404_is_success_when_status_errors_disabled():
    client = HttpClient(
        HttpClientConfig(timeout_seconds=5.0, raise_for_status=False)
    )

    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _requests_response(
            content=b"not found",
            status=404,
            reason="Not Found",
        )
        envelope = client.get("http://example.com/missing")

    assert envelope.success is True
    assert envelope.message == ""
    assert envelope.result is not None
    assert envelope.result.status_code == 404


def test_get_302_no_redirect_is_success():
    client = HttpClient(HttpClientConfig(timeout_seconds=5.0))
    client.allow_redirects(False)

    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _requests_response(
            content=b"",
            status=302,
            reason="Found",
        )
        envelope = client.get("http://example.com/redirect")

    assert envelope.success is True
    assert envelope.result is not None
    assert envelope.result.status_code == 302
    assert envelope.result.status_text == "Found"
    assert mock_request.call_args.kwargs["allow_redirects"] is False


def test_needle_matching_status_error_is_retried():
    client = HttpClient(HttpClientConfig(timeout_seconds=5.0))
    client.set_retry_msg_needle("Server Error")

    with patch("requests.Session.request") as mock_request:
        mock_request.side_effect = [
            _requests_response(status=502, reason="Bad Gateway"),
            _requests_response(content=b"ok"),
        ]
        envelope = client.get("http://example.com")

    assert mock_request.call_count == 2
    assert envelope.success is True
    assert envelope.result is not None
    assert envelope.result.headers["WH-RETRY-COUNT"] == "1"


def test_latin1_body_is_decoded_from_charset():
    client = HttpClient(HttpClientConfig(timeout_seconds=5.0))
    response = _requests_response(content="café".encode("latin-1"))
    response.headers = CaseInsensitiveDict(
        {"Content-Type": "text/plain; charset=iso-8859-1"}
    )

    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = response
        envelope = client.get("http://example.com")

    assert envelope.result is not None
    assert envelope.result.body == "café"
