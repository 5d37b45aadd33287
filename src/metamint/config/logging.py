"""structlog configuration for metamint.

The pipeline logs one event per step through ``structlog.get_logger``:
``publish.start`` (record and signer), ``content.written`` (content
address), ``mint.confirmed`` (transaction hash) and ``publish.failed``
(error code plus whatever address or hash the attempt produced).
Adapters log through stdlib ``logging.getLogger(__name__)``; both routes
end in the same stderr handler.

Two output modes:
- Human (default): console-rendered output to stderr
- JSON (--log-json): one JSON object per line on stderr, for piping into
  a log collector alongside ``--json`` results on stdout
"""

from __future__ import annotations

import logging
import sys

import structlog

APP_LOGGER = "metamint"

# Request-level chatter from the RPC and IPFS clients.
NOISY_LOGGERS = ("web3", "httpx", "httpcore", "urllib3")


def _processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib records to a single stderr handler.

    Args:
        verbose: ``metamint`` loggers emit DEBUG (every pipeline step).
            When False, only WARNING+ such as ``publish.failed``.
        log_json: Use the JSON renderer instead of the console renderer.

    Safe to call more than once; the root handler is replaced, not stacked.
    """
    shared = _processors()
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
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

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
