"""Entry point for running the storage service as a module.

Usage:
    python -m ttl_storage
"""

import uvicorn

from ttl_storage.config.settings import settings


def main() -> None:
    from ttl_storage.api.app import app

    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
