"""Application-wide logging initialization

Call `initialize_logging()` once at startup (the app lifespan does this)
before any other logging is done. Modules only ever do
`logging.getLogger(__name__)`.

Logging format:
    2026-01-01 12:00:00,000 INFO shortlink_app.recorder.visit_recorder: Visit recorder started
"""

import logging
import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_initialized = False


def initialize_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single stream handler.

    Repeated calls only adjust the level so that re-running the app lifespan
    (tests, reloads) does not stack handlers.
    """
    global _initialized

    level = level.upper()
    if _initialized:
        logging.getLogger().setLevel(level)
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {
                # SQL echo stays off unless explicitly asked for
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
    _initialized = True
