"""
The get-token flow: make sure there is a live SSO session, then exchange it for an
EKS token via the AWS CLI.

Stages run strictly in order and any failure ends the run. The only recovery is
a single ``aws sso login`` when no valid session is cached.
"""
import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO

import click

from . import logging, sso_cache
from .aws_cli import CLIInvoker
from .errors import ConfigError, HomeResolutionError, SessionNotFound
from .exec_credential import ExecCredential, build_credential, print_credential

logger = logging.get_logger()


class Stage(enum.Enum):
    CheckingCLI = "checking-cli"
    EnsuringSession = "ensuring-session"
    FetchingToken = "fetching-token"
    Emitting = "emitting"
    Done = "done"


@dataclass(frozen=True)
class GetTokenConfig:
    """Everything the flow needs, read once at startup"""
    cluster_name: str
    region: str
    # Empty means "let the AWS CLI pick its default profile".
    profile: str = field(default="")
    cache_dir: Optional[Path] = field(default=None)

    def validate(self) -> None:
        if self.cluster_name == "":
            raise ConfigError("--cluster-name is required")
        if self.region == "":
            raise ConfigError("--region is required")


def ensure_session(config: GetTokenConfig, cli: CLIInvoker) -> sso_cache.SSOSession:
    """Return a valid cached session, logging in once if there isn't one."""
    try:
        return sso_cache.find_valid_session(config.cache_dir)
    except (SessionNotFound, HomeResolutionError) as e:
        click.echo(f"SSO session status: {e.message}", err=True)

    cli.login(config.profile)

    try:
        return sso_cache.find_valid_session(config.cache_dir)
    except (SessionNotFound, HomeResolutionError) as e:
        raise SessionNotFound(f"failed to find valid session after login: {e.message}") from e


def get_token(config: GetTokenConfig, cli: CLIInvoker) -> ExecCredential:
    """Run every stage up to, but not including, emitting the credential."""
    config.validate()
    log = logger.bind(cluster_name=config.cluster_name, region=config.region, profile=config.profile)

    log.debug("Starting", stage=Stage.CheckingCLI.value)
    cli.check_available()

    log.debug("Starting", stage=Stage.EnsuringSession.value)
    session = ensure_session(config, cli)
    log.debug("SSO session is valid", stage=Stage.EnsuringSession.value,
              start_url=session.start_url, expires_at=session.expires_at)

    log.debug("Starting", stage=Stage.FetchingToken.value)
    token = cli.get_token(config.cluster_name, config.region, config.profile)

    return build_credential(token.token, token.expiration_timestamp)


def run(config: GetTokenConfig, cli: CLIInvoker, stream: Optional[TextIO] = None) -> ExecCredential:
    """The full flow: fetch the credential and print it."""
    credential = get_token(config, cli)

    logger.debug("Starting", stage=Stage.Emitting.value)
    print_credential(credential, stream)

    logger.debug("Finished", stage=Stage.Done.value)
    return credential
