"""structlog based logging shared by every command. Logs go to stderr unless told otherwise."""
from ._logging import configure_logging, get_logger, getLogger  # noqa F401
from ._click import logging_options

__all__ = ["configure_logging", "get_logger", "getLogger", "logging_options"]
