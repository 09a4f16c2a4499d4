#!/usr/bin/env python3
# kubectl exec credential plugin which makes sure an AWS SSO session is live before
# asking the AWS CLI for an EKS token.
from pathlib import Path
from typing import Optional

import click
import tabulate

from ...lib import logging, sso_cache, tabulate_utils
from ...lib import click_utils
from ...lib.aws_cli import AWSCLI, CLIInvoker
from ...lib.constants import DEFAULT_AWS_CLI, ENV_AWS_PROFILE
from ...lib.get_token import GetTokenConfig, run

def _make_aws_cli() -> AWSCLI:
    root = click.get_current_context().find_root()
    return AWSCLI(root.params.get("aws_cli") or DEFAULT_AWS_CLI)

"""pass_cli late-instantiates the AWS CLI wrapper unless an invoker is already on the context stack"""
pass_cli = click_utils.make_pass_decorator_with_constructor(CLIInvoker, _make_aws_cli)

def _cache_dir_callback(ctx, param, value: Optional[str]) -> Optional[Path]:
    return Path(value) if value else None

@click.group("kubectl-aws-sso-auth")
@click.option("--aws-cli", show_default=True, default=DEFAULT_AWS_CLI,
              help="AWS CLI executable to invoke")
@click.option("--sso-cache-dir", default=None, callback=_cache_dir_callback,
              help="Override the AWS SSO cache directory (defaults to ~/.aws/sso/cache)")
@click.pass_context
@logging.logging_options
def entrypoint(ctx, aws_cli: str, sso_cache_dir: Optional[Path]):
    """Authenticate kubectl to EKS clusters using AWS SSO sessions"""
    ctx.meta["sso_cache_dir"] = sso_cache_dir

@entrypoint.command("get-token")
@click.option("--cluster-name", required=True, help="EKS cluster name")
@click.option("--region", required=True, help="AWS region")
@click.option("--profile", envvar=ENV_AWS_PROFILE, default="", show_envvar=True,
              help="AWS profile (empty uses the AWS CLI default)")
@pass_cli
@click.pass_context
def get_token(ctx, cli: CLIInvoker, cluster_name: str, region: str, profile: str):
    """Get EKS authentication token with AWS SSO"""
    config = GetTokenConfig(
        cluster_name=cluster_name,
        region=region,
        profile=profile or "",
        cache_dir=ctx.meta.get("sso_cache_dir"),
    )
    run(config, cli)

@entrypoint.command("sessions")
@click.option("--output-format", "-O", default=tabulate_utils.OutputFmt.Table.value, is_eager=True, expose_value=False,
              show_default=True,
              type=click_utils.EnumType(tabulate_utils.OutputFmt),
              callback=lambda ctx,param,value: tabulate_utils.set_output_format(value),
              help="Output Format")
@click.option("--table-format", "-T", default="simple", is_eager=True, expose_value=False,
              type=click.Choice(choices=tabulate.tabulate_formats, case_sensitive=False),
              callback=lambda ctx,param,value: tabulate_utils.set_table_format(value),
              help="Table format")
@click.option("--table-headers/--no-table-headers", " /-N", is_eager=True, expose_value=False,
              default=True, show_default=True,
              callback=lambda ctx,param,value: tabulate_utils.set_headers(value),
              help="Include headers in table outputs")
@click.pass_context
def list_sessions(ctx):
    """List cached SSO sessions and whether they are still valid"""
    headers = ["File", "Start URL", "Region", "Expires At", "Valid"]
    data = []
    for path, session in sso_cache.iter_sessions(ctx.meta.get("sso_cache_dir")):
        data.append((
            path.name,
            session.start_url,
            session.region,
            session.expires_at,
            session.is_valid(),
        ))

    click.echo(tabulate_utils.tabulate(data, headers))
