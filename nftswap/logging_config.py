"""
Structured logging for the swap registry service.

Registry, ledger and HTTP logs all go through one structlog pipeline: JSON
lines at INFO and above, a console renderer at DEBUG. Every entry carries the
service name so registry logs can be told apart from uvicorn's.
"""

import logging
import sys
from typing import Optional

import structlog

from .config import Settings, settings

SERVICE_NAME = "nftswap"

# Third-party loggers that only add noise next to the request log
_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


def _add_service(_, __, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(config: Optional[Settings] = None, log_level: Optional[str] = None) -> None:
    """Route structlog and stdlib loggers through a shared formatter.

    Args:
        config: Settings to read the level from (default: module settings)
        log_level: Explicit level, wins over ``config.log_level``
    """
    config = config or settings
    level = getattr(logging, (log_level or config.log_level).upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if level == logging.DEBUG:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # The registry and ledger log through logging.getLogger(__name__)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
