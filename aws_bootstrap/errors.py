"""Error types raised while bootstrapping AWS configuration and clients.

Every error carries a short message plus an optional suggestion and details
block, so callers can print something actionable without inspecting the
underlying botocore exception.
"""

from typing import Optional


class BootstrapError(Exception):
    """Base class for configuration and role assumption failures."""

    label = "Bootstrap Error"

    def __init__(self, message: str, suggestion: Optional[str] = None, details: Optional[str] = None):
        # Include all parts in the base exception message for better error reporting
        full_message = message
        if suggestion:
            full_message += f"\n\n{suggestion}"
        if details:
            full_message += f"\n\n{details}"
        super().__init__(full_message)
        self.message = message
        self.suggestion = suggestion
        self.details = details

    def format(self) -> str:
        """Format error for console output with suggestions."""
        output = f"❌ {self.label}: {self.message}"
        if self.suggestion:
            output += f"\n   💡 {self.suggestion}"
        if self.details:
            output += f"\n   ℹ️  {self.details}"
        return output


class ConfigurationError(BootstrapError):
    """Raised when ambient credentials or region cannot be resolved."""

    label = "Configuration Error"


class AssumeRoleError(BootstrapError):
    """Raised when the STS role exchange fails."""

    label = "Assume Role Error"

    def __init__(
        self,
        message: str,
        role_arn: str,
        error_code: Optional[str] = None,
        suggestion: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, suggestion, details)
        self.role_arn = role_arn
        self.error_code = error_code


class OperationCancelledError(BootstrapError):
    """Raised when an execution context is cancelled or past its deadline."""

    label = "Cancelled"

    def __init__(self, operation: str, reason: str):
        super().__init__(f"{operation} aborted: {reason}")
        self.operation = operation
        self.reason = reason
