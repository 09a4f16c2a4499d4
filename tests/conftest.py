"""
Shared pytest fixtures for kubectl-aws-sso-auth tests.
"""
import datetime
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from kubectl_aws_sso_auth.lib import errors
from kubectl_aws_sso_auth.lib.aws_cli import CLIInvoker, EKSToken


def rfc3339(delta: datetime.timedelta) -> str:
    when = datetime.datetime.now(datetime.timezone.utc) + delta
    return when.strftime("%Y-%m-%dT%H:%M:%SZ")


@pytest.fixture
def home_dir(tmp_path, monkeypatch):
    """Point the home directory at an empty temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    return home


@pytest.fixture
def sso_cache_dir(home_dir):
    """Create an empty ~/.aws/sso/cache."""
    cache_dir = home_dir / ".aws" / "sso" / "cache"
    cache_dir.mkdir(parents=True)
    return cache_dir


@pytest.fixture
def write_cache_file(sso_cache_dir):
    """Factory fixture writing a raw JSON document (or text) into the SSO cache."""
    def _write(name: str, content: Any) -> Path:
        path = sso_cache_dir / name
        path.write_text(content if isinstance(content, str) else json.dumps(content, indent=2))
        return path

    return _write


@pytest.fixture
def create_sso_token_file(write_cache_file):
    """Factory fixture creating an SSO session file expiring relative to now."""
    def _create(expires_in_seconds: int,
                access_token: str = "fake-access-token",
                name: str = "d033e22ae348aeb5660fc2140aec35850c4da997.json") -> Path:
        return write_cache_file(name, {
            "startUrl": "https://my-sso-portal.awsapps.com/start",
            "region": "us-east-1",
            "accessToken": access_token,
            "expiresAt": rfc3339(datetime.timedelta(seconds=expires_in_seconds)),
        })

    return _create


@pytest.fixture
def client_registration_file(write_cache_file):
    """Create a client registration cache file, which has no access token."""
    return write_cache_file("botocore-client-id-us-east-1.json", {
        "clientId": "client-123",
        "clientSecret": "secret-456",
        "expiresAt": rfc3339(datetime.timedelta(days=90)),
    })


class FakeCLI(CLIInvoker):
    """Scripted CLIInvoker which records calls instead of spawning processes."""
    def __init__(self,
                 available: bool = True,
                 login_error: Optional[Exception] = None,
                 on_login=None,
                 token: Optional[EKSToken] = None,
                 token_error: Optional[Exception] = None):
        self.available = available
        self.login_error = login_error
        self.on_login = on_login
        self.token = token or EKSToken(
            token="k8s-aws-v1.fake",
            expiration_timestamp=datetime.datetime(2030, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc),
        )
        self.token_error = token_error
        self.calls: List[Dict[str, Any]] = []

    def check_available(self) -> None:
        self.calls.append({"op": "check_available"})
        if not self.available:
            raise errors.ToolingMissing("AWS CLI is not installed or not in PATH")

    def login(self, profile: str) -> None:
        self.calls.append({"op": "login", "profile": profile})
        if self.login_error is not None:
            raise self.login_error
        if self.on_login is not None:
            self.on_login()

    def get_token(self, cluster_name: str, region: str, profile: str) -> EKSToken:
        self.calls.append({"op": "get_token", "cluster_name": cluster_name, "region": region,
                           "profile": profile})
        if self.token_error is not None:
            raise self.token_error
        return self.token

    @property
    def ops(self) -> List[str]:
        return [call["op"] for call in self.calls]


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test."""
    import logging
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.fixture
def make_fake_cli():
    """Factory fixture for scripted CLIInvokers."""
    return FakeCLI
