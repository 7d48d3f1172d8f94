"""
Tests for WebGeocalc settings read from the environment.

Invalid deployment values must surface as configuration errors when the
settings are built, never later from inside a sleep or an HTTP call.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from footprint.services.config import DEFAULT_WGC_URL, WgcSettings
from footprint.services.errors import FootprintConfigError

WGC_VARS = (
    "WGC_URL",
    "WGC_POLL_INTERVAL_S",
    "WGC_MAX_POLL_ATTEMPTS",
    "WGC_REQUEST_TIMEOUT_S",
    "WGC_DEBUG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in WGC_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment() -> None:
    settings = WgcSettings.from_env()
    assert settings.base_url == DEFAULT_WGC_URL
    assert settings.poll_interval_s == 5.0
    assert settings.max_poll_attempts == 12
    assert settings.request_timeout_s == 30.0
    assert settings.debug_payloads is False


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("WGC_URL", "https://wgc.test/api/")
    monkeypatch.setenv("WGC_POLL_INTERVAL_S", "0")
    monkeypatch.setenv("WGC_MAX_POLL_ATTEMPTS", "3")
    monkeypatch.setenv("WGC_REQUEST_TIMEOUT_S", "2.5")
    monkeypatch.setenv("WGC_DEBUG", "1")
    settings = WgcSettings.from_env()
    assert settings.base_url == "https://wgc.test/api"
    assert settings.poll_interval_s == 0.0
    assert settings.max_poll_attempts == 3
    assert settings.request_timeout_s == 2.5
    assert settings.debug_payloads is True


@pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "-1", "abc"])
def test_rejects_bad_poll_interval(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("WGC_POLL_INTERVAL_S", raw)
    with pytest.raises(FootprintConfigError) as info:
        WgcSettings.from_env()
    assert "WGC_POLL_INTERVAL_S" in info.value.message
    assert info.value.status_code == 400


@pytest.mark.parametrize("raw", ["nan", "inf", "-1", "0"])
def test_rejects_bad_request_timeout(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("WGC_REQUEST_TIMEOUT_S", raw)
    with pytest.raises(FootprintConfigError) as info:
        WgcSettings.from_env()
    assert "WGC_REQUEST_TIMEOUT_S" in info.value.message


@pytest.mark.parametrize("raw", ["0", "-2", "1.5"])
def test_rejects_bad_poll_attempts(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("WGC_MAX_POLL_ATTEMPTS", raw)
    with pytest.raises(FootprintConfigError):
        WgcSettings.from_env()
