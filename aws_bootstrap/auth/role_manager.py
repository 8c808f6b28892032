"""IAM role assumption via STS.

Exchanges an ambient AwsConfig plus a role ARN for a new AwsConfig whose
credentials are temporary and refreshed by botocore before they expire.
"""

import re
import socket
import time
from typing import Optional

import boto3
import structlog
from botocore.config import Config as BotocoreConfig
from botocore.credentials import RefreshableCredentials
from botocore.exceptions import BotoCoreError, ClientError
from botocore.session import Session

from ..clients import ServiceKind, new_client
from ..config import AwsConfig
from ..context import ExecutionContext, background
from ..errors import AssumeRoleError

logger = structlog.get_logger(__name__)

SESSION_NAME_PREFIX = "aws-bootstrap"
MAX_SESSION_NAME_LENGTH = 64
DEFAULT_DURATION_SECONDS = 3600

_INVALID_SESSION_NAME_CHARS = re.compile(r"[^\w+=,.@-]")

# Role ARNs go to STS as given; STS is the only validator
_NO_PARAMETER_VALIDATION = BotocoreConfig(parameter_validation=False)

_SUGGESTIONS = {
    "AccessDenied": "Ensure the caller may call sts:AssumeRole and the role's trust policy allows the caller",
    "ValidationError": "Check the role ARN format: arn:aws:iam::<account>:role/<name>",
    "RegionDisabledException": "Activate STS in this region or use a different region",
    "ExpiredToken": "Refresh the ambient credentials and retry",
}


def generate_session_name() -> str:
    """Generate a session name for role assumption.

    Session names include the hostname for CloudTrail auditing.

    Returns:
        Session name in format: "aws-bootstrap-{hostname}-{timestamp}"
    """
    try:
        hostname = socket.gethostname()
    except Exception:
        hostname = "unknown"

    hostname = _INVALID_SESSION_NAME_CHARS.sub("-", hostname) or "unknown"

    timestamp = str(int(time.time()))
    # Reserve room for prefix, timestamp and two separators
    budget = MAX_SESSION_NAME_LENGTH - len(SESSION_NAME_PREFIX) - len(timestamp) - 2
    return f"{SESSION_NAME_PREFIX}-{hostname[:budget]}-{timestamp}"


def _to_metadata(credentials: dict) -> dict:
    return {
        "access_key": credentials["AccessKeyId"],
        "secret_key": credentials["SecretAccessKey"],
        "token": credentials["SessionToken"],
        "expiry_time": credentials["Expiration"].isoformat(),
    }


def _sts_client_config(base: BotocoreConfig) -> BotocoreConfig:
    return base.merge(_NO_PARAMETER_VALIDATION)


def _call_assume_role(sts_client, role_arn: str, params: dict) -> dict:
    try:
        response = sts_client.assume_role(RoleArn=role_arn, **params)
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        raise AssumeRoleError(
            f"Failed to assume role: {e.response['Error'].get('Message', error_code)}",
            role_arn=role_arn,
            error_code=error_code,
            suggestion=_SUGGESTIONS.get(error_code, "Check AWS credentials and permissions"),
            details=f"Role ARN: {role_arn}",
        ) from e

    credentials = response.get("Credentials")
    if not credentials:
        raise AssumeRoleError("AssumeRole response missing credentials", role_arn=role_arn)

    return credentials


def assume_role(
    ctx: ExecutionContext,
    cfg: AwsConfig,
    role_arn: str,
    session_name: Optional[str] = None,
    duration_seconds: int = DEFAULT_DURATION_SECONDS,
    external_id: Optional[str] = None,
) -> AwsConfig:
    """Assume an IAM role and return a role-scoped configuration.

    Issues a single STS AssumeRole call using the credentials of ``cfg``. The
    returned config carries refreshable credentials; when they near expiry
    botocore re-assumes the role with the same parameters. ``cfg`` itself is
    left untouched.

    Args:
        ctx: Execution context; caps the STS call's timeouts
        cfg: Configuration whose identity is allowed to assume the role
        role_arn: ARN of IAM role to assume (passed through unvalidated)
        session_name: RoleSessionName (default: generated from hostname and time)
        duration_seconds: Requested credential lifetime
        external_id: Optional ExternalId required by the role's trust policy

    Returns:
        AwsConfig scoped to the role, in the same region as ``cfg``

    Raises:
        AssumeRoleError: If STS denies or rejects the request or cannot be reached
        OperationCancelledError: If the context is cancelled or expired
    """
    ctx.check("AssumeRole")

    params = {
        "RoleSessionName": session_name or generate_session_name(),
        "DurationSeconds": duration_seconds,
    }
    if external_id:
        params["ExternalId"] = external_id

    logger.debug(
        "Assuming IAM role",
        role_arn=role_arn,
        session_name=params["RoleSessionName"],
        region=cfg.region,
    )

    try:
        sts_client = new_client(
            cfg,
            ServiceKind.STS,
            client_config=_sts_client_config(ctx.client_config(cfg.client_config)),
        )
        credentials = _call_assume_role(sts_client, role_arn, params)
    except AssumeRoleError as e:
        logger.debug(
            "Failed to assume role",
            role_arn=role_arn,
            error=e.message,
            error_code=e.error_code,
        )
        raise
    except BotoCoreError as e:
        # Timeouts caused by the context deadline surface as cancellation
        ctx.check("AssumeRole")
        logger.debug(
            "Failed to assume role",
            role_arn=role_arn,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise AssumeRoleError(
            f"STS unavailable: {e}",
            role_arn=role_arn,
            error_code=type(e).__name__,
            suggestion="Check network access to the STS endpoint",
            details=f"Region: {cfg.region}",
        ) from e

    expiration = credentials["Expiration"]

    logger.info(
        "Role assumed successfully",
        role_arn=role_arn,
        expires_at=expiration.isoformat(),
    )

    def refresh_credentials():
        """Refresh credentials by assuming role again."""
        logger.debug("Refreshing credentials", role_arn=role_arn)
        refresh_client = new_client(cfg, ServiceKind.STS, client_config=_sts_client_config(cfg.client_config))
        return _to_metadata(_call_assume_role(refresh_client, role_arn, params))

    session_credentials = RefreshableCredentials.create_from_metadata(
        metadata=_to_metadata(credentials),
        refresh_using=refresh_credentials,
        method="sts-assume-role",
    )

    botocore_session = Session()
    botocore_session._credentials = session_credentials

    return AwsConfig(
        session=boto3.Session(botocore_session=botocore_session, region_name=cfg.region),
        region=cfg.region,
        credential_source=session_credentials.method,
        client_config=cfg.client_config,
        role_arn=role_arn,
        expires_at=expiration,
    )


class RoleManager:
    """Binds an ambient configuration to a target role.

    Usage:
        role_manager = RoleManager(
            cfg,
            role_arn="arn:aws:iam::123456789012:role/DynamoReadRole",
        )

        scoped = role_manager.assume(ctx)
        dynamodb = new_dynamodb_client(scoped)

    Attributes:
        config: Ambient configuration used to call STS
        role_arn: Optional ARN of the IAM role to assume
        session_name: Optional fixed RoleSessionName
        duration_seconds: Requested credential lifetime
        external_id: Optional ExternalId for the role's trust policy
    """

    def __init__(
        self,
        config: AwsConfig,
        role_arn: Optional[str] = None,
        session_name: Optional[str] = None,
        duration_seconds: int = DEFAULT_DURATION_SECONDS,
        external_id: Optional[str] = None,
    ):
        self.config = config
        self.role_arn = role_arn
        self.session_name = session_name
        self.duration_seconds = duration_seconds
        self.external_id = external_id

        logger.info(
            "RoleManager initialized",
            has_role=bool(role_arn),
            region=config.region,
        )

    def assume(self, ctx: Optional[ExecutionContext] = None) -> AwsConfig:
        """Assume the configured role.

        Raises:
            AssumeRoleError: If no role is configured or the exchange fails
        """
        if not self.role_arn:
            raise AssumeRoleError(
                "No role ARN configured",
                role_arn="",
                suggestion="Set BOOTSTRAP_ROLE_ARN or pass --role-arn",
            )

        return assume_role(
            ctx or background(),
            self.config,
            self.role_arn,
            session_name=self.session_name,
            duration_seconds=self.duration_seconds,
            external_id=self.external_id,
        )

    def validate_role(self, ctx: Optional[ExecutionContext] = None) -> dict:
        """Check that the role can be assumed with the ambient credentials.

        Returns:
            Dictionary with validation results:
            {"configured": bool, "valid": bool, "error": str}
        """
        result = {
            "configured": bool(self.role_arn),
            "valid": False,
            "error": None,
        }

        if not self.role_arn:
            return result

        try:
            self.assume(ctx)
            result["valid"] = True
            logger.info("Role validated successfully", role_arn=self.role_arn)
        except AssumeRoleError as e:
            result["error"] = e.message
            logger.error("Role validation failed", role_arn=self.role_arn, error=e.message)

        return result
