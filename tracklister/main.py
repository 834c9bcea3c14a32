"""Entry: start the API server."""
import logging

import uvicorn

from tracklister.config import Settings


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s: %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("listening on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "tracklister.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        access_log=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
