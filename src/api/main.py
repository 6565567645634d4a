"""HTTP service entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from src.api.routes import router, unhandled_error
from src.app import App, create_app
from src.config.logging import configure_logging
from src.config.settings import load_settings

logger = logging.getLogger(__name__)


def create_api(container: App) -> FastAPI:
    """Build the FastAPI application around an application container."""

    # Error details are exposed by `unhandled_error` in development, not by a debug traceback page.
    api = FastAPI(title="Schedule phrase resolver")
    api.state.container = container
    api.include_router(router)
    api.add_exception_handler(Exception, unhandled_error)
    return api


def main() -> None:
    """Run the HTTP service with uvicorn."""

    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)

    api = create_api(create_app(settings))
    logger.info("listening on http://%s:%d", settings.http_host, settings.http_port)
    uvicorn.run(api, host=settings.http_host, port=settings.http_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
