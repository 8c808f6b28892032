"""Tests for error formatting."""

from aws_bootstrap.errors import AssumeRoleError, BootstrapError, ConfigurationError, OperationCancelledError


def test_message_includes_suggestion_and_details():
    error = ConfigurationError("No AWS region configured", "Set AWS_REGION", "Searched: environment")

    assert str(error) == "No AWS region configured\n\nSet AWS_REGION\n\nSearched: environment"
    assert isinstance(error, BootstrapError)


def test_format_configuration_error():
    error = ConfigurationError("No AWS credentials found", "Configure credentials")

    assert error.format() == "❌ Configuration Error: No AWS credentials found\n   💡 Configure credentials"


def test_format_without_suggestion():
    assert ConfigurationError("boom").format() == "❌ Configuration Error: boom"


def test_assume_role_error_attributes():
    error = AssumeRoleError(
        "Failed to assume role: denied",
        role_arn="arn:aws:iam::123456789012:role/DynamoReadRole",
        error_code="AccessDenied",
        details="Role ARN: arn:aws:iam::123456789012:role/DynamoReadRole",
    )

    assert error.role_arn.endswith("role/DynamoReadRole")
    assert error.error_code == "AccessDenied"
    assert error.format().startswith("❌ Assume Role Error: Failed to assume role: denied")
    assert "ℹ️  Role ARN" in error.format()


def test_operation_cancelled_error():
    error = OperationCancelledError("AssumeRole", "deadline exceeded")

    assert error.message == "AssumeRole aborted: deadline exceeded"
    assert error.operation == "AssumeRole"
    assert error.reason == "deadline exceeded"
