from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tests._helpers import VALID_BODY, StubLLMClient
from transcript_proxy.core.llm.deps import get_abacus_client
from transcript_proxy.core.middleware.ingress import cors_origin_regex, is_origin_allowed
from transcript_proxy.core.settings import get_settings
from transcript_proxy.main import create_app

PATH = "/api/process-transcript"
EXTENSION_ORIGIN = "chrome-extension://abcdefghijklmnop"


def _make_client() -> TestClient:
    app = create_app()
    app.dependency_overrides[get_abacus_client] = lambda: StubLLMClient(generated="# ok")
    return TestClient(app)


@pytest.mark.parametrize(
    ("origin", "development", "expected"),
    [
        (None, False, True),
        ("", False, True),
        (EXTENSION_ORIGIN, False, True),
        ("https://evil.example", False, False),
        ("https://chrome-extension.example", False, False),
        ("https://evil.example", True, True),
    ],
)
def test_is_origin_allowed(origin, development: bool, expected: bool) -> None:
    assert (
        is_origin_allowed(
            origin, trusted_prefixes=["chrome-extension://"], development=development
        )
        is expected
    )


def test_cors_origin_regex() -> None:
    assert cors_origin_regex(trusted_prefixes=["chrome-extension://"], development=True) == ".*"
    assert (
        cors_origin_regex(trusted_prefixes=["chrome-extension://"], development=False)
        == r"^(?:chrome\-extension://).*$"
    )


def test_extension_origin_is_accepted_with_cors_headers(client: TestClient) -> None:
    res = client.post(PATH, json=VALID_BODY, headers={"Origin": EXTENSION_ORIGIN})
    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == EXTENSION_ORIGIN
    assert res.headers["access-control-allow-credentials"] == "true"


def test_request_without_origin_is_accepted(client: TestClient) -> None:
    res = client.post(PATH, json=VALID_BODY)
    assert res.status_code == 200
    assert "access-control-allow-origin" not in res.headers


def test_untrusted_origin_is_rejected(client: TestClient) -> None:
    res = client.post(PATH, json=VALID_BODY, headers={"Origin": "https://evil.example"})
    assert res.status_code == 403
    assert res.json() == {"success": False, "error": "Not allowed by CORS"}


def test_untrusted_origin_is_rejected_on_health_too(client: TestClient) -> None:
    res = client.get("/health", headers={"Origin": "https://evil.example"})
    assert res.status_code == 403


def test_any_origin_allowed_in_development(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "development")
    get_settings.cache_clear()
    with _make_client() as client:
        res = client.post(PATH, json=VALID_BODY, headers={"Origin": "http://localhost:5173"})
    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_node_env_alias_enables_development(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.setenv("NODE_ENV", "development")
    get_settings.cache_clear()
    with _make_client() as client:
        res = client.get("/health", headers={"Origin": "https://anything.example"})
    assert res.status_code == 200


def test_preflight_from_extension(client: TestClient) -> None:
    res = client.options(
        PATH,
        headers={
            "Origin": EXTENSION_ORIGIN,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )
    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == EXTENSION_ORIGIN


def test_rate_limit_allows_20_then_rejects_21st(client: TestClient) -> None:
    for i in range(20):
        res = client.post(PATH, json=VALID_BODY)
        assert res.status_code == 200, f"request {i + 1}: {res.text}"
        assert res.headers["ratelimit-limit"] == "20"
        assert res.headers["ratelimit-remaining"] == str(19 - i)

    res = client.post(PATH, json=VALID_BODY)
    assert res.status_code == 429
    assert res.json() == {
        "success": False,
        "error": "Too many requests from this IP, please try again later.",
    }
    assert res.headers["ratelimit-limit"] == "20"
    assert res.headers["ratelimit-remaining"] == "0"
    assert "ratelimit-reset" in res.headers
    assert "retry-after" in res.headers
    assert "x-ratelimit-limit" not in res.headers


def test_rate_limit_counts_rejected_validation_requests(client: TestClient) -> None:
    for _ in range(20):
        assert client.post(PATH, json={}).status_code == 400
    assert client.post(PATH, json=VALID_BODY).status_code == 429


def test_rate_limit_skips_non_api_routes(client: TestClient) -> None:
    for _ in range(25):
        assert client.get("/health").status_code == 200


def test_rate_limit_configurable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "2")
    get_settings.cache_clear()
    with _make_client() as client:
        assert client.post(PATH, json=VALID_BODY).status_code == 200
        assert client.post(PATH, json=VALID_BODY).status_code == 200
        assert client.post(PATH, json=VALID_BODY).status_code == 429


def test_declared_oversized_body_returns_413(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_BODY_BYTES", "100")
    get_settings.cache_clear()
    with _make_client() as client:
        res = client.post(PATH, json={**VALID_BODY, "transcript": "a" * 500})
    assert res.status_code == 413
    assert res.json() == {"success": False, "error": "Request body is too large"}


def test_chunked_oversized_body_returns_413(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_BODY_BYTES", "100")
    get_settings.cache_clear()

    def chunks():
        yield b'{"transcript": "'
        yield b"a" * 500
        yield b'", "videoTitle": "T", "apiKey": "k"}'

    with _make_client() as client:
        res = client.post(PATH, content=chunks(), headers={"Content-Type": "application/json"})
    assert res.status_code == 413
