"""Execution context carrying a deadline and a cancellation signal.

boto3 calls block until they finish, so cancellation is cooperative: every
resolution or exchange step calls ``check()`` before talking to AWS, and the
remaining time caps the botocore connect/read timeouts of the call itself.

Usage:
    ctx = ExecutionContext(timeout=10)
    cfg = load_default_config(ctx)

    # From another thread
    ctx.cancel()
"""

import threading
import time
from datetime import datetime, timezone
from typing import Optional

from botocore.config import Config as BotocoreConfig

from .errors import OperationCancelledError


class ExecutionContext:
    """Deadline and cancellation signal shared by one bootstrap run."""

    def __init__(self, timeout: Optional[float] = None):
        self._cancelled = threading.Event()
        self._deadline: Optional[float] = None
        if timeout is not None:
            self._deadline = time.monotonic() + timeout

    @classmethod
    def with_deadline(cls, deadline: datetime) -> "ExecutionContext":
        """Create a context that expires at an absolute (timezone-aware) time."""
        now = datetime.now(deadline.tzinfo or timezone.utc)
        return cls(timeout=(deadline - now).total_seconds())

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Signal cancellation. Safe to call from any thread."""
        self._cancelled.set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def check(self, operation: str) -> None:
        """Raise OperationCancelledError if the context is cancelled or expired."""
        if self._cancelled.is_set():
            raise OperationCancelledError(operation, "context cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise OperationCancelledError(operation, "deadline exceeded")

    def client_config(self, base: BotocoreConfig) -> BotocoreConfig:
        """Return ``base`` with connect/read timeouts capped by the remaining time."""
        remaining = self.remaining()
        if remaining is None:
            return base

        return base.merge(
            BotocoreConfig(
                connect_timeout=min(base.connect_timeout, remaining),
                read_timeout=min(base.read_timeout, remaining),
            )
        )


def background() -> ExecutionContext:
    """Context with no deadline that is never cancelled unless asked to be."""
    return ExecutionContext()
