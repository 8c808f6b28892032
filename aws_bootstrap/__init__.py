"""Bootstrap AWS SDK configuration and clients, optionally through an assumed role."""

from .auth import RoleManager, assume_role
from .clients import ServiceKind, new_client, new_dynamodb_client, new_s3_client
from .config import AwsConfig, load_default_config
from .context import ExecutionContext, background
from .errors import AssumeRoleError, BootstrapError, ConfigurationError, OperationCancelledError
from .version import __version__

__all__ = [
    "AssumeRoleError",
    "AwsConfig",
    "BootstrapError",
    "ConfigurationError",
    "ExecutionContext",
    "OperationCancelledError",
    "RoleManager",
    "ServiceKind",
    "__version__",
    "assume_role",
    "background",
    "load_default_config",
    "new_client",
    "new_dynamodb_client",
    "new_s3_client",
]
