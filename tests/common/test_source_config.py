from __future__ import annotations

import pytest

from deltasync.config import (
    ConfigurationError,
    MissingConfigurationError,
    RateLimit,
    RetryPolicy,
    get_source_config,
)

_SUFFIXES = ("BASE_URL", "API_TOKEN", "USER_AGENT", "RATE_LIMIT", "RETRIES", "TIMEOUT_SECONDS")


@pytest.fixture(autouse=True)
def _clean_source_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for suffix in _SUFFIXES:
        monkeypatch.delenv(f"DELTASYNC_SAP_B1_{suffix}", raising=False)


def test_source_config_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DELTASYNC_SAP_B1_BASE_URL", "https://sap.test/b1s/v1/")
    monkeypatch.setenv("DELTASYNC_SAP_B1_API_TOKEN", " secret ")
    monkeypatch.setenv("DELTASYNC_SAP_B1_RATE_LIMIT", "5")
    monkeypatch.setenv("DELTASYNC_SAP_B1_RETRIES", "0")
    monkeypatch.setenv("DELTASYNC_SAP_B1_TIMEOUT_SECONDS", "12")

    resilience = get_source_config("sap-b1").resilience

    assert resilience.name == "sap-b1"
    assert resilience.base_url == "https://sap.test/b1s/v1/"
    assert resilience.default_headers == {
        "User-Agent": "deltasync",
        "Authorization": "Bearer secret",
    }
    assert resilience.ratelimit == RateLimit(max_calls=5)
    assert resilience.retry == RetryPolicy(total=0)
    assert resilience.timeout_seconds == 12.0
    assert resilience.cache is None


def test_source_config_defaults_without_optional_values() -> None:
    resilience = get_source_config("sap-b1", base_url="https://sap.test/").resilience

    assert resilience.ratelimit is None
    assert resilience.retry == RetryPolicy()
    assert resilience.default_headers == {"User-Agent": "deltasync"}


def test_source_config_requires_base_url() -> None:
    with pytest.raises(MissingConfigurationError, match="DELTASYNC_SAP_B1_BASE_URL"):
        get_source_config("sap-b1")


def test_source_config_rejects_invalid_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DELTASYNC_SAP_B1_RATE_LIMIT", "0")

    with pytest.raises(ConfigurationError, match="RATE_LIMIT"):
        get_source_config("sap-b1", base_url="https://sap.test/")


def test_with_headers_extends_defaults() -> None:
    resilience = get_source_config("sap-b1", base_url="https://sap.test/").resilience

    extended = resilience.with_headers({"X-Company": "DEMO"})

    assert extended.default_headers == {"User-Agent": "deltasync", "X-Company": "DEMO"}
    assert resilience.default_headers == {"User-Agent": "deltasync"}
