"""
structlog setup for the API process.

Events go through the standard ``logging`` module so uvicorn and SQLAlchemy
records share one handler. Development gets a readable console renderer,
everything else one JSON object per line.
"""

import logging

import structlog

# Third-party loggers that are too chatty below WARNING
_NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "uvicorn.access")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(debug: bool) -> structlog.types.Processor:
    if debug:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(debug: bool, level: str = "INFO") -> None:
    """Configure stdlib logging and structlog.

    Args:
        debug: Force DEBUG level and use the console renderer
        level: Level name from settings, e.g. ``"WARNING"``
    """
    root_level = logging.DEBUG if debug else getattr(logging, level.upper())
    logging.basicConfig(format="%(message)s")
    # basicConfig ignores level once a handler exists (uvicorn, pytest)
    logging.getLogger().setLevel(root_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))

    structlog.configure(
        processors=[*_shared_processors(), _renderer(debug)],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
