"""Click options which configure logging before any command body runs."""
from typing import Callable, Any, Union

import logging
import click

from ..constants import DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT, DEFAULT_LOG_DEST

from ._logging import _LOG_TARGETS, _LOG_FORMATS, configure_logging

_LOGGING_OPTIONS = [name.lower() for name in logging._nameToLevel.keys()]
_LOGGING_TARGETS = [name.lower() for name in _LOG_TARGETS.keys()]
_LOGGING_FORMATS = [name.lower() for name in _LOG_FORMATS.keys()]

_PARAM_NAMES = ("log_level", "log_format", "log_target")


def _early_logging(  # noqa: U100
    ctx: click.Context, param: Union[click.Option, click.Parameter], value: Any
) -> Any:
    """Callback which sets up logging as soon as all the logging options have been parsed."""
    if not isinstance(value, (str,)):
        raise click.ClickException("option must be string")

    # Collected per invocation on the context so repeated invocations in one
    # process (tests) start from a clean slate.
    collected = ctx.meta.setdefault("kubectl_aws_sso_auth.logging", {})
    collected[param.name] = value

    if all(collected.get(name) is not None for name in _PARAM_NAMES):
        configure_logging(collected["log_level"], collected["log_format"], collected["log_target"])


def logging_options(clickFn: Callable[..., None]) -> Callable[..., None]:
    """Attach a set of common logging configuration options to a command with click."""
    clickFn = click.option(
        "--log-level",
        type=click.Choice(_LOGGING_OPTIONS, case_sensitive=False),
        default=DEFAULT_LOG_LEVEL,
        show_default=True,
        is_eager=True,
        expose_value=False,
        callback=_early_logging,
        help="Minimum level of log messages written to the log target",
    )(clickFn)

    clickFn = click.option(
        "--log-format",
        type=click.Choice(_LOGGING_FORMATS, case_sensitive=False),
        default=DEFAULT_LOG_FORMAT,
        show_default=True,
        is_eager=True,
        expose_value=False,
        callback=_early_logging,
        help="Rendering of log messages",
    )(clickFn)

    clickFn = click.option(
        "--log-target",
        type=click.Choice(_LOGGING_TARGETS, case_sensitive=False),
        default=DEFAULT_LOG_DEST,
        show_default=True,
        is_eager=True,
        expose_value=False,
        callback=_early_logging,
        help="Stream log messages are written to",
    )(clickFn)

    return clickFn
