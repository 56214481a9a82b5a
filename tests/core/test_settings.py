from __future__ import annotations

import pytest

from transcript_proxy.core.settings import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("APP_ENV", raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 3000
    assert settings.is_development is False
    assert settings.upstream_url == "https://api.abacus.ai/api/v0/evaluatePrompt"
    assert settings.upstream_llm_name == "route-llm"
    assert settings.rate_limit_max_requests == 20
    assert settings.rate_limit_window_seconds == 300
    assert settings.max_body_bytes == 10 * 1024 * 1024
    assert settings.trusted_origin_prefixes == ["chrome-extension://"]


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("APP_ENV", " Development ")
    monkeypatch.setenv("TRUSTED_ORIGIN_PREFIXES", '["moz-extension://", "chrome-extension://"]')
    settings = Settings(_env_file=None)
    assert settings.port == 8080
    assert settings.is_development is True
    assert settings.trusted_origin_prefixes == ["moz-extension://", "chrome-extension://"]


def test_invalid_port_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "0")
    with pytest.raises(ValueError):
        Settings(_env_file=None)
