"""Process entry point: load settings, load the store, serve HTTP."""

import uvicorn

from taskboard.api import create_app
from taskboard.config import get_settings
from taskboard.logging import Loggers, configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    logger = Loggers.server()

    # A malformed snapshot aborts startup here instead of being overwritten by the next save
    app = create_app(settings)

    logger.info(
        "server_starting",
        host=settings.host,
        port=settings.port,
        tasks_file=str(settings.tasks_file),
        app_env=settings.app_env,
    )
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
