"""Log routing for the ``fieldguard`` logger tree.

Engine, registry and plugin modules log through ``logging.getLogger(__name__)``
and never install handlers. :func:`configure_logging` attaches one structlog
handler to the ``fieldguard`` logger only, so an embedding application keeps
its own root handlers and fieldguard's records are not rendered twice.

Two renderers, both on stderr by default: the console renderer (colored on
a TTY) and, with ``--log-json``, one JSON object per record.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "fieldguard"

# Marks the handler this module installed so a reconfigure replaces it.
_HANDLER_ATTR = "_fieldguard_handler"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(*, log_json: bool, out: TextIO) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=out.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Render ``fieldguard.*`` records through structlog.

    Calling it again swaps the handler rather than adding a second one.

    Args:
        verbose: Emit DEBUG records (schema compilation, rule registration,
            plugin loading). Otherwise WARNING and above.
        log_json: JSON lines instead of the console renderer.
        stream: Destination; ``sys.stderr`` at call time when omitted.
    """
    out = stream if stream is not None else sys.stderr
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json=log_json, out=out),
            ],
        )
    )
    setattr(handler, _HANDLER_ATTR, True)

    package_logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in package_logger.handlers if getattr(h, _HANDLER_ATTR, False)]:
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.propagate = False
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
