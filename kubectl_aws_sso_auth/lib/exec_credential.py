"""The client.authentication.k8s.io ExecCredential document kubectl reads from exec plugins."""
import collections
import datetime
import json
from dataclasses import dataclass
from typing import Optional, TextIO

import click
import pyrfc3339

from .constants import EXEC_CREDENTIAL_API_VERSION, EXEC_CREDENTIAL_KIND
from .errors import SerializationFailed


@dataclass(frozen=True)
class ExecCredentialStatus:
    token: str
    expiration_timestamp: str = ""


@dataclass(frozen=True)
class ExecCredential:
    status: ExecCredentialStatus
    api_version: str = EXEC_CREDENTIAL_API_VERSION
    kind: str = EXEC_CREDENTIAL_KIND

    def to_dict(self) -> "collections.OrderedDict[str, object]":
        status = collections.OrderedDict([("token", self.status.token)])
        if self.status.expiration_timestamp != "":
            status["expirationTimestamp"] = self.status.expiration_timestamp

        return collections.OrderedDict([
            ("apiVersion", self.api_version),
            ("kind", self.kind),
            ("status", status),
        ])

    def to_json(self) -> str:
        try:
            return json.dumps(self.to_dict(), indent=2)
        except (TypeError, ValueError) as e:
            raise SerializationFailed(f"failed to marshal ExecCredential to JSON: {e}") from e


def build_credential(token: str, expiry: Optional[datetime.datetime]) -> ExecCredential:
    expiration = pyrfc3339.generate(expiry) if expiry is not None else ""
    return ExecCredential(status=ExecCredentialStatus(token=token, expiration_timestamp=expiration))


def print_credential(credential: ExecCredential, stream: Optional[TextIO] = None) -> None:
    """Write the credential to stdout (or ``stream``) as indented JSON followed by a newline"""
    click.echo(credential.to_json(), file=stream)
