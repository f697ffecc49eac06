"""
Run the service:

    python -m kanascribe

The model and analyzer are loaded before uvicorn binds the port; if either
fails the process exits with status 1.
"""

import sys

import uvicorn
from loguru import logger

from kanascribe.config import get_settings
from kanascribe.exceptions import ServiceInitError
from kanascribe.main import create_app
from kanascribe.services import load_speech_services


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        services = load_speech_services(settings)
    except ServiceInitError as exc:
        logger.critical(f"Failed to initialize services: {exc}")
        sys.exit(1)

    logger.info(f"Starting server on {settings.host}:{settings.port}")
    uvicorn.run(create_app(services), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
