"""
Campaigns API - entry point.

    python -m campaigns.main
"""

from __future__ import annotations

import uvicorn

from campaigns.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "campaigns.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=settings.debug and not settings.is_production,
    )


if __name__ == "__main__":
    main()
