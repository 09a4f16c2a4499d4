"""
Wrappers around the AWS CLI binary.

Every call blocks until the child exits. Nothing is retried and there are no
timeouts: ``aws sso login`` in particular waits on the user finishing the browser
flow.
"""
import abc
import datetime
import json
import subprocess
import sys
from dataclasses import dataclass, field
from typing import List, Optional

import click
import pyrfc3339

from . import logging
from .constants import DEFAULT_AWS_CLI
from .errors import LoginFailed, TokenFetchFailed, ToolingMissing

logger = logging.get_logger()


@dataclass
class EKSToken:
    """The parts of ``aws eks get-token`` output this tool relies on"""
    token: str
    expiration_timestamp: Optional[datetime.datetime]
    kind: str = field(default="")
    api_version: str = field(default="")

    @classmethod
    def from_json(cls, data: str) -> "EKSToken":
        try:
            raw = json.loads(data)
            status = raw["status"]
            token = status["token"]
            expiration = status.get("expirationTimestamp")
            if not isinstance(token, str):
                raise ValueError("status.token is not a string")
            expires = pyrfc3339.parse(expiration) if expiration else None
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise TokenFetchFailed(f"failed to parse EKS token response: {e}") from e

        return cls(
            token=token,
            expiration_timestamp=expires,
            kind=raw.get("kind", ""),
            api_version=raw.get("apiVersion", ""),
        )


class CLIInvoker(abc.ABC):
    """The three operations the token flow needs from the cloud CLI"""

    @abc.abstractmethod
    def check_available(self) -> None:
        """:raises ToolingMissing:"""

    @abc.abstractmethod
    def login(self, profile: str) -> None:
        """:raises LoginFailed:"""

    @abc.abstractmethod
    def get_token(self, cluster_name: str, region: str, profile: str) -> EKSToken:
        """:raises TokenFetchFailed:"""


def _with_profile(args: List[str], profile: str) -> List[str]:
    # An empty profile leaves profile resolution to the AWS CLI itself.
    if profile != "":
        return args + ["--profile", profile]
    return args


class AWSCLI(CLIInvoker):
    """CLIInvoker backed by the real ``aws`` executable"""

    def __init__(self, executable: str = DEFAULT_AWS_CLI):
        self.executable = executable

    def _command(self, *args: str) -> List[str]:
        return [self.executable, *args]

    def check_available(self) -> None:
        cmd = self._command("--version")
        logger.debug("Checking AWS CLI is available", cmd=cmd)
        try:
            subprocess.run(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise ToolingMissing(f"AWS CLI is not installed or not in PATH: {e}") from e

    def login(self, profile: str) -> None:
        click.echo("Starting AWS SSO login...", err=True)
        cmd = self._command(*_with_profile(["sso", "login"], profile))
        logger.debug("Running AWS SSO login", cmd=cmd)
        # The login flow prints progress on stdout, which is reserved for the
        # ExecCredential, so both streams go to our stderr.
        try:
            subprocess.run(cmd, stdout=sys.stderr, stderr=sys.stderr, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise LoginFailed(f"AWS SSO login failed: {e}") from e

    def get_token(self, cluster_name: str, region: str, profile: str) -> EKSToken:
        args = [
            "eks", "get-token",
            "--cluster-name", cluster_name,
            "--region", region,
        ]
        cmd = self._command(*_with_profile(args, profile))
        logger.debug("Requesting EKS token", cmd=cmd)

        try:
            result = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                    universal_newlines=True)
        except OSError as e:
            raise TokenFetchFailed(f"failed to get EKS token: {e}") from e

        if result.returncode != 0:
            raise TokenFetchFailed(
                f"failed to get EKS token: exit status {result.returncode}\nstderr: {result.stderr}"
            )

        return EKSToken.from_json(result.stdout)
