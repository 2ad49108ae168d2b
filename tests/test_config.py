# pyright: reportUnknownMemberType=false
import pytest

from httpenvelope.networking.config import (
    DEFAULT_USER_AGENT,
    HttpClientConfig,
    ProxyConfig,
)


def test_config_defaults_are_stable():
    config = HttpClientConfig()

    assert dict(config.default_headers) == {"User-Agent": DEFAULT_USER_AGENT}
    assert config.verify_tls is False
    assert config.follow_redirects is True
    assert config.proxy is None
    assert config.retry_max_count == 1
    assert config.retry_needle is None
    assert config.raise_for_status is True
    assert config.connect_timeout_seconds is None
    assert config.read_timeout_seconds is None
    assert config.timeout_seconds is None
    assert config.timeout is None


def test_config_default_headers_are_independent():
    first = HttpClientConfig()
    second = HttpClientConfig()

    assert first.default_headers is not second.default_headers


def test_config_default_headers_are_immutable():
    config = HttpClientConfig(default_headers={"X-Test": "1"})

    with pytest.raises(TypeError):
        config.default_headers["X-Test"] = "2"  # type: ignore[index]


def test_config_copies_external_headers_input():
    headers = {"X-Test": "1"}
    config = HttpClientConfig(default_headers=headers)
    headers["X-Test"] = "2"

    assert config.default_headers["X-Test"] == "1"


def test_config_rejects_partial_connect_read_timeout():
    with pytest.raises(ValueError):
        HttpClientConfig(connect_timeout_seconds=1.0)

    with pytest.raises(ValueError):
        HttpClientConfig(read_timeout_seconds=2.0)


def test_config_rejects_negative_retry_max_count():
    with pytest.raises(ValueError):
        HttpClientConfig(retry_max_count=-1)


def test_config_rejects_non_positive_timeouts():
    with pytest.raises(ValueError):
        HttpClientConfig(timeout_seconds=0)
    with pytest.raises(ValueError):
        HttpClientConfig(timeout_seconds=-1)

    with pytest.raises(ValueError):
        HttpClientConfig(connect_timeout_seconds=0, read_timeout_seconds=1)
    with pytest.raises(ValueError):
        HttpClientConfig(connect_timeout_seconds=1, read_timeout_seconds=0)


def test_timeout_prefers_connect_read_pair():
    config = HttpClientConfig(
        timeout_seconds=9.0,
        connect_timeout_seconds=1.0,
        read_timeout_seconds=3.0,
    )

    assert config.timeout == (1.0, 3.0)
    assert HttpClientConfig(timeout_seconds=9.0).timeout == 9.0


def test_proxy_build_defaults_http_to_https():
    proxy = ProxyConfig.build("http://user:pw@10.0.0.1:3128")

    assert proxy.https == "http://user:pw@10.0.0.1:3128"
    assert proxy.http == "http://user:pw@10.0.0.1:3128"
    assert proxy.no_proxy == frozenset()


def test_proxy_build_keeps_explicit_values():
    proxy = ProxyConfig.build(
        "http://secure:1", "http://plain:2", [".mit.edu", "foo.com"]
    )

    assert proxy.http == "http://plain:2"
    assert proxy.no_proxy == {".mit.edu", "foo.com"}
    assert proxy.as_dict() == {
        "https": "http://secure:1",
        "http": "http://plain:2",
        "no": [".mit.edu", "foo.com"],
    }


def test_proxy_urls_are_not_validated():
    proxy = ProxyConfig.build("")

    assert proxy.https == ""
    assert proxy.http == ""


def test_config_snapshot():
    config = HttpClientConfig(
        default_headers={"X-Test": "1"},
        retry_needle="timed out",
    )

    assert config.as_dict() == {
        "default_request_headers": {"X-Test": "1"},
        "verify_ssl": False,
        "allow_redirects": True,
        "proxy": None,
        "retry_max_count": 1,
        "retry_needle": "timed out",
    }
