#!/usr/bin/env python3
"""Main entry point for the ComradeZone dating API.

Runs the FastAPI application with Uvicorn using the host, port, log level
and reload settings from `comradezone.config`.

Environment Variables:
    DATABASE_URL (str): SQLAlchemy database URL.
    API_HOST (str): The host to bind the server to.
    API_PORT (int): The port to bind the server to.
    LOG_LEVEL (str): The logging level (e.g., 'INFO', 'DEBUG').
    DEBUG (bool): Whether to enable auto-reload for development.
"""

import uvicorn

from comradezone.config import settings
from comradezone.utils.logging import get_logger

logger = get_logger(__name__)

if __name__ == "__main__":
    logger.info(f"Starting ComradeZone dating API on {settings.API_HOST}:{settings.API_PORT}")

    uvicorn.run(
        "comradezone.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )
