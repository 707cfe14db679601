"""structlog setup and per-session log context.

Every record goes through the same processor chain whether it came
from structlog (services) or stdlib ``logging`` (infrastructure, pluggy).
Rendering is either a colored console (default) or JSON lines
(``--log-json``), always on stderr so stdout stays clean for results.

The acting user is bound into the structlog context when someone logs
in (:func:`bind_actor`), so each domain event names who caused it.
"""

from __future__ import annotations

import logging
import sys

import structlog

MILAAN_LOGGER = "milaan"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        verbose: ``milaan.*`` loggers at DEBUG instead of WARNING.
        log_json: JSON lines instead of the console renderer.
    """
    shared = _shared_processors()
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(MILAAN_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    # pluggy traces every hook call at DEBUG.
    logging.getLogger("pluggy").setLevel(logging.WARNING)


def bind_actor(user_id: str | None) -> None:
    """Attach the acting user to all subsequent log records (None clears it)."""
    if user_id is None:
        structlog.contextvars.unbind_contextvars("actor")
    else:
        structlog.contextvars.bind_contextvars(actor=user_id)
