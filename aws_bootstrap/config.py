"""Ambient AWS configuration resolution.

Resolves credentials and region the same way the AWS CLI does (environment
variables, shared config/credentials files, container or instance metadata)
and packages them as an immutable ``AwsConfig`` value that client
construction and role assumption build on.

Usage:
    from aws_bootstrap.config import load_default_config
    from aws_bootstrap.context import ExecutionContext

    cfg = load_default_config(ExecutionContext(timeout=10))
    print(f"Region: {cfg.region}")
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import boto3
import structlog
from botocore.config import Config as BotocoreConfig
from botocore.credentials import Credentials, ReadOnlyCredentials
from botocore.exceptions import BotoCoreError, ProfileNotFound
from botocore.session import Session

from .context import ExecutionContext
from .errors import ConfigurationError

logger = structlog.get_logger(__name__)

#: Retry/timeout defaults applied to every client built from a resolved config
DEFAULT_CLIENT_CONFIG = BotocoreConfig(
    retries={"max_attempts": 3, "mode": "standard"},
    connect_timeout=5,
    read_timeout=10,
)


@dataclass(frozen=True)
class AwsConfig:
    """Resolved credentials, region and client defaults.

    Ambient values come from ``load_default_config``; role-scoped values come
    from ``assume_role`` and additionally carry the role ARN and the expiry of
    the first issued credentials. Refresh after that expiry is handled by
    botocore.

    Attributes:
        session: boto3 session bound to the resolved credentials
        region: AWS region used for every client built from this config
        credential_source: botocore credential method (env, iam-role, sts-assume-role, ...)
        client_config: botocore retry/timeout defaults for clients
        role_arn: Assumed role ARN (scoped configs only)
        expires_at: Expiry of the initial temporary credentials (scoped configs only)
    """

    session: boto3.Session = field(compare=False, repr=False)
    region: str
    credential_source: str
    client_config: BotocoreConfig = field(default_factory=lambda: DEFAULT_CLIENT_CONFIG, compare=False, repr=False)
    role_arn: Optional[str] = None
    expires_at: Optional[datetime] = None

    @property
    def is_scoped(self) -> bool:
        return self.role_arn is not None

    @property
    def credentials(self) -> Credentials:
        return self.session.get_credentials()

    def frozen_credentials(self) -> ReadOnlyCredentials:
        """Snapshot of the current access key, secret and token."""
        return self.credentials.get_frozen_credentials()


def _build_session(ctx: ExecutionContext, region: Optional[str], profile: Optional[str]) -> boto3.Session:
    botocore_session = Session(profile=profile)

    # Instance/container metadata lookups must not outlive the context
    remaining = ctx.remaining()
    if remaining is not None:
        current = botocore_session.get_config_variable("metadata_service_timeout")
        botocore_session.set_config_variable("metadata_service_timeout", min(float(current), remaining))

    return boto3.Session(botocore_session=botocore_session, region_name=region)


def load_default_config(
    ctx: ExecutionContext,
    region: Optional[str] = None,
    profile: Optional[str] = None,
    client_config: BotocoreConfig = DEFAULT_CLIENT_CONFIG,
) -> AwsConfig:
    """Resolve ambient credentials and region into an AwsConfig.

    Args:
        ctx: Execution context; checked before and after credential resolution
        region: Region override (default: AWS_REGION / AWS_DEFAULT_REGION / profile)
        profile: Named profile from the shared config files (default: AWS_PROFILE)
        client_config: botocore retry/timeout defaults for clients

    Returns:
        AwsConfig with resolved credentials and a non-empty region

    Raises:
        ConfigurationError: If no credentials or region can be resolved
        OperationCancelledError: If the context is cancelled or expired
    """
    ctx.check("LoadDefaultConfig")

    logger.debug("Resolving ambient AWS configuration", region_override=region, profile=profile)

    try:
        session = _build_session(ctx, region, profile)
        credentials = session.get_credentials()
    except ProfileNotFound as e:
        raise ConfigurationError(
            f"AWS profile not found: {profile}",
            "Check the profile name or unset AWS_PROFILE",
            "Profiles are read from ~/.aws/config and ~/.aws/credentials",
        ) from e
    except BotoCoreError as e:
        ctx.check("LoadDefaultConfig")
        raise ConfigurationError(
            f"Failed to resolve AWS credentials: {e}",
            "Check AWS credentials and permissions",
        ) from e

    ctx.check("LoadDefaultConfig")

    if credentials is None:
        raise ConfigurationError(
            "No AWS credentials found",
            "Configure credentials via AWS_ACCESS_KEY_ID/AWS_SECRET_ACCESS_KEY, a profile, or an execution role",
            "Searched: environment, shared credentials/config files, container and instance metadata",
        )

    resolved_region = session.region_name
    if not resolved_region:
        raise ConfigurationError(
            "No AWS region configured",
            "Set AWS_REGION (e.g., us-east-1), pass --region, or add a region to your profile",
        )

    config = AwsConfig(
        session=session,
        region=resolved_region,
        credential_source=credentials.method or "unknown",
        client_config=client_config,
    )

    logger.info(
        "AWS configuration loaded",
        region=config.region,
        credential_source=config.credential_source,
        profile=profile,
    )

    return config
