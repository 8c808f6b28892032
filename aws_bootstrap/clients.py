"""Service client factory.

Clients are built from exactly one AwsConfig and inherit its credentials,
region and retry/timeout defaults. Construction is local: botocore loads the
service model and resolves the endpoint without calling AWS.
"""

from enum import Enum
from typing import Optional

import structlog
from botocore.config import Config as BotocoreConfig

from .config import AwsConfig

logger = structlog.get_logger(__name__)


class ServiceKind(str, Enum):
    """AWS services the bootstrapper builds clients for."""

    S3 = "s3"
    DYNAMODB = "dynamodb"
    STS = "sts"


def new_client(cfg: AwsConfig, kind: ServiceKind, client_config: Optional[BotocoreConfig] = None):
    """Create a botocore client for ``kind`` bound to ``cfg``.

    Args:
        cfg: Ambient or role-scoped configuration
        kind: Service to build a client for
        client_config: Override for ``cfg.client_config`` (e.g. context-capped timeouts)

    Returns:
        boto3 client for the service in ``cfg.region``

    Raises:
        ValueError: If ``kind`` is not a supported service
    """
    kind = ServiceKind(kind)

    client = cfg.session.client(
        kind.value,
        region_name=cfg.region,
        config=client_config or cfg.client_config,
    )

    logger.debug(
        "Service client created",
        service=kind.value,
        region=cfg.region,
        scoped=cfg.is_scoped,
        role_arn=cfg.role_arn,
    )

    return client


def new_s3_client(cfg: AwsConfig):
    return new_client(cfg, ServiceKind.S3)


def new_dynamodb_client(cfg: AwsConfig):
    return new_client(cfg, ServiceKind.DYNAMODB)
