from __future__ import annotations

import logging

import uvicorn

from transcript_proxy.core.settings import get_settings
from transcript_proxy.main import app

logger = logging.getLogger("transcript_proxy")


def main() -> None:
    settings = get_settings()
    logger.info(
        "Proxy server starting",
        extra={"port": settings.port, "environment": settings.app_env},
    )
    # log_config=None keeps the JSON logging installed by transcript_proxy.core.logging.
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
