from __future__ import annotations

from transcript_proxy.core.llm.abacus_client import AbacusClient, AbacusConfig
from transcript_proxy.core.settings import get_settings


def get_abacus_client() -> AbacusClient:
    """Dependency provider for the upstream client (overridden in tests)."""

    settings = get_settings()
    config = AbacusConfig(
        url=settings.upstream_url,
        llm_name=settings.upstream_llm_name,
        timeout_seconds=float(settings.upstream_timeout_seconds),
    )
    return AbacusClient(config=config)
