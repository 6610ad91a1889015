"""structlog setup for the server and the CLI.

stdout belongs to the MCP stdio transport, so every log line goes to
stderr: a console rendering by default, one JSON object per line with
``--log-json``. Records from stdlib loggers (our own modules, the mcp
SDK, SQLAlchemy) pass through the same processor chain.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Libraries that log per request at DEBUG; kept at WARNING even with -v.
QUIET_LOGGERS = ("mcp", "sqlalchemy", "httpx", "anyio")

_SHARED: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging to stderr.

    Safe to call more than once: the root handler is replaced, not added.

    Args:
        verbose: DEBUG for ``applemcp.*`` loggers; otherwise WARNING.
        log_json: JSON lines instead of the console renderer.
    """
    structlog.configure(
        processors=[*_SHARED, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("applemcp").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
