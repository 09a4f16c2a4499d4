import io
import json

import pytest

from kubectl_aws_sso_auth.lib import errors
from kubectl_aws_sso_auth.lib.get_token import GetTokenConfig, ensure_session, get_token, run


@pytest.fixture
def config():
    return GetTokenConfig(cluster_name="prod", region="us-west-2", profile="dev")


def test_valid_session_skips_login(config, create_sso_token_file, make_fake_cli):
    create_sso_token_file(3600, access_token="tok")
    cli = make_fake_cli()

    output = io.StringIO()
    run(config, cli, output)

    assert cli.ops == ["check_available", "get_token"]
    assert cli.calls[1] == {"op": "get_token", "cluster_name": "prod", "region": "us-west-2", "profile": "dev"}
    credential = json.loads(output.getvalue())
    assert credential["status"] == {"token": "k8s-aws-v1.fake", "expirationTimestamp": "2030-01-02T03:04:05Z"}


def test_expired_session_login_does_not_help(config, create_sso_token_file, make_fake_cli):
    create_sso_token_file(-3600)
    cli = make_fake_cli()

    with pytest.raises(errors.SessionNotFound) as excinfo:
        run(config, cli, io.StringIO())

    assert cli.ops == ["check_available", "login"]
    assert "after login" in excinfo.value.message


def test_login_creates_session(config, create_sso_token_file, make_fake_cli):
    create_sso_token_file(-3600)
    cli = make_fake_cli(on_login=lambda: create_sso_token_file(3600, access_token="fresh"))

    credential = get_token(config, cli)

    assert cli.ops == ["check_available", "login", "get_token"]
    assert cli.calls[1]["profile"] == "dev"
    assert credential.status.token == "k8s-aws-v1.fake"


def test_login_when_cache_missing(config, home_dir, make_fake_cli):
    def login():
        cache_dir = home_dir / ".aws" / "sso" / "cache"
        cache_dir.mkdir(parents=True)
        (cache_dir / "session.json").write_text(json.dumps({
            "accessToken": "tok",
            "expiresAt": "2999-01-01T00:00:00Z",
        }))

    cli = make_fake_cli(on_login=login)
    session = ensure_session(config, cli)
    assert session.access_token == "tok"


def test_login_failure_stops(config, sso_cache_dir, make_fake_cli):
    cli = make_fake_cli(login_error=errors.LoginFailed("AWS SSO login failed: exit status 1"))

    with pytest.raises(errors.LoginFailed):
        get_token(config, cli)

    assert cli.ops == ["check_available", "login"]


def test_cli_missing_stops_before_session_check(config, make_fake_cli, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("session cache should not be consulted")

    monkeypatch.setattr("kubectl_aws_sso_auth.lib.sso_cache.find_valid_session", fail)
    cli = make_fake_cli(available=False)

    with pytest.raises(errors.ToolingMissing):
        get_token(config, cli)

    assert cli.ops == ["check_available"]


def test_token_fetch_failure(config, create_sso_token_file, make_fake_cli):
    create_sso_token_file(3600)
    cli = make_fake_cli(token_error=errors.TokenFetchFailed("failed to get EKS token"))

    output = io.StringIO()
    with pytest.raises(errors.TokenFetchFailed):
        run(config, cli, output)

    assert output.getvalue() == ""


def test_explicit_cache_dir(tmp_path, make_fake_cli):
    (tmp_path / "session.json").write_text(json.dumps({
        "accessToken": "tok",
        "expiresAt": "2999-01-01T00:00:00Z",
    }))
    config = GetTokenConfig(cluster_name="prod", region="us-west-2", cache_dir=tmp_path)
    cli = make_fake_cli()

    get_token(config, cli)

    assert cli.ops == ["check_available", "get_token"]
    assert cli.calls[1]["profile"] == ""


@pytest.mark.parametrize("cluster_name,region", [("", "us-west-2"), ("prod", "")])
def test_config_validation(cluster_name, region, make_fake_cli):
    cli = make_fake_cli()
    with pytest.raises(errors.ConfigError):
        get_token(GetTokenConfig(cluster_name=cluster_name, region=region), cli)
    assert cli.ops == []


def test_unknown_home_triggers_login(config, make_fake_cli, monkeypatch):
    def no_home():
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr("kubectl_aws_sso_auth.lib.sso_cache.Path.home", staticmethod(no_home))
    cli = make_fake_cli()

    with pytest.raises(errors.SessionNotFound) as excinfo:
        ensure_session(config, cli)

    assert cli.ops == ["login"]
    assert "failed to get home directory" in excinfo.value.message
