import sys
import logging
import json
from typing import Callable, Dict, TextIO

import structlog

from ..constants import DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT, DEFAULT_LOG_DEST

# stdout carries the ExecCredential, so stderr is the only target. The stream is
# looked up at configure time so that a swapped sys.stderr (click's test runner)
# is honoured.
_LOG_TARGETS: Dict[str, Callable[[], TextIO]] = {
    "stderr": lambda: sys.stderr,
}


def _console_renderer() -> structlog.types.Processor:
    return structlog.dev.ConsoleRenderer(colors=False)


def _json_renderer() -> structlog.types.Processor:
    return structlog.processors.JSONRenderer(serializer=json.dumps)


def _keyvalue_renderer() -> structlog.types.Processor:
    return structlog.processors.KeyValueRenderer(
        key_order=["event", "stage"],
        drop_missing=True,
        sort_keys=True,
    )


_LOG_FORMATS: Dict[str, Callable[[], structlog.types.Processor]] = {
    "console": _console_renderer,
    "json": _json_renderer,
    "keyvalue": _keyvalue_renderer,
}


def configure_logging(log_level: str, log_format: str, log_target: str) -> None:
    """Route structlog and stdlib logging through a single handler on the chosen stream.

    Safe to call more than once; each call replaces the root handler.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(remove_positional_args=False),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    pre_chain = [
        # Add the log level and a timestamp to the event_dict if the log entry
        # is not from structlog.
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=_LOG_FORMATS[log_format.lower()](), foreign_pre_chain=pre_chain
    )

    handler = logging.StreamHandler(_LOG_TARGETS[log_target.lower()]())
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(logging.getLevelName(log_level.upper()))

    root_logger.debug("Logging configured")


configure_logging(DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT, DEFAULT_LOG_DEST)


get_logger = structlog.get_logger
"""
Alias get_logger in structlog to encourage structlog usage.
"""

getLogger = get_logger
"""
Alias getLogger and get_logger to this module to try and make people use it.
"""
