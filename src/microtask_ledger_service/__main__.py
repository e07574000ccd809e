"""Entry point for the ledger service.

Usage::

    python -m microtask_ledger_service
"""

from __future__ import annotations

import uvicorn

from microtask_ledger_service.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "microtask_ledger_service.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.server.log_level,
    )


if __name__ == "__main__":
    main()
