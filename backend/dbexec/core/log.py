"""
Process logging setup: root logger level and optional Sentry reporting.
"""

import logging

import sentry_sdk

from dbexec.core.config import settings

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger; init Sentry when SENTRY_DSN is set outside local."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=_LOG_FORMAT,
    )
    if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
        sentry_sdk.init(
            dsn=str(settings.SENTRY_DSN),
            environment=settings.ENVIRONMENT,
        )
        logging.getLogger(__name__).info("Sentry enabled (%s)", settings.ENVIRONMENT)
