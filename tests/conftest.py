from __future__ import annotations

import pytest

from tests._helpers import StubLLMClient


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("NODE_ENV", raising=False)
    # Settings are cached via @lru_cache; clear so each test sees its own environment.
    from transcript_proxy.core.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def llm_stub() -> StubLLMClient:
    return StubLLMClient(generated="# Steps\n1. Do X")


@pytest.fixture
def client(llm_stub: StubLLMClient):
    from fastapi.testclient import TestClient

    from transcript_proxy.core.llm.deps import get_abacus_client
    from transcript_proxy.main import create_app

    app = create_app()
    app.dependency_overrides[get_abacus_client] = lambda: llm_stub
    with TestClient(app) as c:
        yield c
