#!/usr/bin/env python3
"""
Bootstrap AWS clients from the ambient environment.

Loads the default credentials and region, creates an S3 client with them,
assumes the configured IAM role and creates a DynamoDB client scoped to it.
Each step prints a status line; the first failure is printed and the run
stops without building any further clients.

Usage:
    aws-bootstrap
    aws-bootstrap --role-arn arn:aws:iam::123456789012:role/DynamoReadRole
    aws-bootstrap --region eu-west-1 --timeout 10 --verbose
    python -m aws_bootstrap --profile dev
"""

from dataclasses import dataclass
from typing import Any, Optional

import click
import structlog

from .auth import RoleManager
from .clients import new_dynamodb_client, new_s3_client
from .config import AwsConfig, load_default_config
from .context import ExecutionContext
from .errors import BootstrapError
from .logging_config import configure_logging
from .settings import Settings, get_settings
from .version import __version__

logger = structlog.get_logger(__name__)


@dataclass
class BootstrapResult:
    """Clients built by a run; fields after the first failure stay None."""

    config: Optional[AwsConfig] = None
    s3_client: Any = None
    scoped_config: Optional[AwsConfig] = None
    dynamodb_client: Any = None
    error: Optional[BootstrapError] = None


def run(settings: Settings, ctx: Optional[ExecutionContext] = None) -> BootstrapResult:
    """Resolve configuration, assume the role and build clients.

    Errors are reported once, where they occur, and end the run.
    """
    ctx = ctx or ExecutionContext(timeout=settings.timeout)
    result = BootstrapResult()

    try:
        result.config = load_default_config(ctx, region=settings.region, profile=settings.profile)
    except BootstrapError as e:
        click.echo("Error creating AWS configuration for the ambient role:")
        click.echo(e.format())
        result.error = e
        return result

    click.echo(
        f"AWS configuration loaded (region={result.config.region}, "
        f"credentials={result.config.credential_source})"
    )

    result.s3_client = new_s3_client(result.config)
    click.echo(f"S3 client created successfully (region={result.s3_client.meta.region_name})")

    if not settings.role_arn:
        click.echo("No role ARN configured (BOOTSTRAP_ROLE_ARN / --role-arn); skipping role assumption")
        return result

    role_manager = RoleManager(result.config, role_arn=settings.role_arn, session_name=settings.session_name)
    try:
        result.scoped_config = role_manager.assume(ctx)
    except BootstrapError as e:
        click.echo(f"Error assuming role {settings.role_arn}:")
        click.echo(e.format())
        result.error = e
        return result

    click.echo(f"Assumed role {settings.role_arn} (expires {result.scoped_config.expires_at.isoformat()})")

    result.dynamodb_client = new_dynamodb_client(result.scoped_config)
    click.echo(f"DynamoDB client created successfully (region={result.dynamodb_client.meta.region_name})")

    return result


@click.command()
@click.version_option(version=__version__, prog_name="aws-bootstrap")
@click.option("--role-arn", default=None, help="IAM role to assume for the DynamoDB client [env: BOOTSTRAP_ROLE_ARN]")
@click.option("--region", default=None, help="AWS region override [env: AWS_REGION]")
@click.option("--profile", "-p", default=None, help="Named AWS profile [env: AWS_PROFILE]")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="Deadline in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def main(
    role_arn: Optional[str],
    region: Optional[str],
    profile: Optional[str],
    timeout: Optional[float],
    verbose: bool,
):
    """Bootstrap S3 and DynamoDB clients from the ambient AWS environment."""
    try:
        settings = get_settings()
    except ValueError as e:
        raise click.ClickException(str(e))

    # Command-line options win over the environment
    if role_arn:
        settings.role_arn = role_arn
    if region:
        settings.region = region
    if profile:
        settings.profile = profile
    if timeout:
        settings.timeout = timeout
    if verbose:
        settings.log_level = "DEBUG"

    configure_logging(settings.log_level, settings.use_json_logs)
    logger.debug("Starting bootstrap", version=__version__, has_role=bool(settings.role_arn))

    run(settings)


if __name__ == "__main__":
    main()
