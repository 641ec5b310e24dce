# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import socket
import ssl

import httpx
import pytest

from httpgroups import config
from httpgroups.config import DEFAULT_USER_AGENT, GroupConfig, load_group_configs
from httpgroups.errors import (
    ConfigurationError,
    ErrorCategory,
    HttpError,
    HttpServiceError,
    SerializationError,
    TransportError,
    categorize_exception,
    error_category_to_reason,
)
from httpgroups.log import setup_logging


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("HTTPGROUPS_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("HTTPGROUPS_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("HTTPGROUPS_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("HTTPGROUPS_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("HTTPGROUPS_HTTP_MAX_BODY_BYTES", "1024")

    settings = config.load_http_settings()

    assert settings.timeout == 5.5
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.verify_ssl is False
    assert settings.max_body_bytes == 1024


def test_http_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("HTTPGROUPS_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("HTTPGROUPS_HTTP_MAX_BODY_BYTES", "-5")
    monkeypatch.delenv("HTTPGROUPS_USER_AGENT", raising=False)

    settings = config.load_http_settings()

    assert settings.timeout == config.HttpSettings.timeout
    assert settings.max_body_bytes == config.HttpSettings.max_body_bytes
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_load_http_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("HTTPGROUPS_HTTP_TIMEOUT", "7.7")
    assert config.load_http_settings().timeout == 7.7
    monkeypatch.setenv("HTTPGROUPS_HTTP_TIMEOUT", "8.8")
    assert config.load_http_settings().timeout == 8.8


def test_load_group_configs_from_env(monkeypatch):
    monkeypatch.setenv(
        "HTTPGROUPS_GROUPS",
        '[{"pattern": "github", "base_url": "https://api.github.com", "headers": {"Accept": "application/vnd.github.v3+json"}},'
        ' {"name": "jsonplaceholder", "base_url": "https://jsonplaceholder.typicode.com/"}]',
    )
    configs = load_group_configs()
    assert [c.pattern for c in configs] == ["github", "jsonplaceholder"]
    assert configs[0].headers == {"Accept": "application/vnd.github.v3+json"}
    assert configs[1].headers == {}


def test_load_group_configs_empty_and_invalid(monkeypatch):
    monkeypatch.delenv("HTTPGROUPS_GROUPS", raising=False)
    assert load_group_configs() == []
    assert load_group_configs("  ") == []

    with pytest.raises(ConfigurationError):
        load_group_configs("{not json")
    with pytest.raises(ConfigurationError):
        load_group_configs('{"pattern": "x"}')
    with pytest.raises(ConfigurationError):
        load_group_configs('[{"base_url": "https://x"}]')
    with pytest.raises(ConfigurationError):
        load_group_configs('[{"pattern": "x", "headers": ["a"]}]')
    with pytest.raises(ConfigurationError):
        GroupConfig.from_mapping({"pattern": "x", "base_url": 42})


def test_error_hierarchy_and_http_error_fields():
    for exc_type in (ConfigurationError, HttpError, SerializationError, TransportError):
        assert issubclass(exc_type, HttpServiceError)

    err = HttpError(404, '{"missing": true}', method="GET", url="https://example/todos/9999")
    assert err.status_code == 404
    assert err.body == '{"missing": true}'
    assert str(err) == "HTTP 404 for GET https://example/todos/9999"
    assert str(HttpError(500)) == "HTTP 500"


def test_categorize_exception_variants():
    assert categorize_exception(httpx.ReadTimeout("slow")) is ErrorCategory.TIMEOUT
    assert categorize_exception(httpx.ConnectError("refused")) is ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ssl.SSLError("bad cert")) is ErrorCategory.SSL_ERROR
    assert categorize_exception(socket.gaierror("nodename")) is ErrorCategory.DNS_ERROR
    assert categorize_exception(ConnectionResetError()) is ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ValueError("x")) is ErrorCategory.UNKNOWN_ERROR


def test_categorize_exception_uses_httpx_cause():
    try:
        try:
            raise socket.gaierror("nodename nor servname provided")
        except socket.gaierror as inner:
            raise httpx.ConnectError("dns failure") from inner
    except httpx.ConnectError as exc:
        assert categorize_exception(exc) is ErrorCategory.DNS_ERROR


def test_error_category_reasons():
    assert error_category_to_reason(ErrorCategory.TIMEOUT) == "Network timeout"
    assert error_category_to_reason(None) == ""


@pytest.fixture
def restore_logger_levels():
    names = ("httpgroups", "httpx", "httpcore")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_setup_logging_levels_package_and_transport_loggers(monkeypatch, restore_logger_levels):
    monkeypatch.delenv("HTTPGROUPS_LOG_LEVEL", raising=False)
    assert setup_logging("debug") == logging.DEBUG
    assert logging.getLogger("httpgroups").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.DEBUG

    assert setup_logging("info") == logging.INFO
    assert logging.getLogger("httpgroups").level == logging.INFO
    assert logging.getLogger("httpcore").level == logging.WARNING

    monkeypatch.setenv("HTTPGROUPS_LOG_LEVEL", "error")
    assert setup_logging() == logging.ERROR
    assert logging.getLogger("httpx").level == logging.ERROR
    assert setup_logging("nonsense") == logging.WARNING
