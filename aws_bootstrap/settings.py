"""Runtime settings read from the environment.

Environment variables:
    - BOOTSTRAP_ROLE_ARN: IAM role to assume for the DynamoDB client (optional)
    - BOOTSTRAP_SESSION_NAME: Fixed RoleSessionName (default: generated)
    - BOOTSTRAP_TIMEOUT: Deadline in seconds for the whole run (default: none)
    - AWS_REGION: Region override (default: botocore resolution)
    - AWS_PROFILE: Named profile (default: botocore resolution)
    - LOG_LEVEL: Logging level (default: INFO)
    - APP_ENV: "production" switches logs to JSON (default: development)

A ``.env`` file in the working directory is loaded first, without overriding
variables that are already set.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class Settings:
    role_arn: Optional[str] = None
    session_name: Optional[str] = None
    timeout: Optional[float] = None
    region: Optional[str] = None
    profile: Optional[str] = None
    log_level: str = "INFO"
    app_env: str = "development"

    def __post_init__(self):
        self.role_arn = os.getenv("BOOTSTRAP_ROLE_ARN") or None
        self.session_name = os.getenv("BOOTSTRAP_SESSION_NAME") or None
        self.region = os.getenv("AWS_REGION") or None
        self.profile = os.getenv("AWS_PROFILE") or None
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.app_env = os.getenv("APP_ENV", "development").lower()

        timeout = os.getenv("BOOTSTRAP_TIMEOUT", "")
        self.timeout = self._parse_timeout(timeout) if timeout else None

        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL: {self.log_level!r}\n"
                f"Expected one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    @staticmethod
    def _parse_timeout(value: str) -> float:
        try:
            timeout = float(value)
        except ValueError:
            raise ValueError(f"Invalid BOOTSTRAP_TIMEOUT: {value!r}\nExpected a number of seconds, e.g. 30")
        if timeout <= 0:
            raise ValueError(f"Invalid BOOTSTRAP_TIMEOUT: {value!r}\nTimeout must be greater than zero")
        return timeout

    @property
    def use_json_logs(self) -> bool:
        return self.app_env == "production"


def get_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Load ``.env`` (if present) and read settings from the environment."""
    load_dotenv(dotenv_path)
    return Settings()
