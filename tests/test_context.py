"""Tests for ExecutionContext."""

import threading
from datetime import datetime, timedelta, timezone

import pytest
from botocore.config import Config as BotocoreConfig

from aws_bootstrap.context import ExecutionContext, background
from aws_bootstrap.errors import OperationCancelledError


def test_background_never_expires():
    ctx = background()

    assert ctx.remaining() is None
    assert ctx.cancelled is False
    ctx.check("noop")


def test_cancel_from_another_thread():
    ctx = ExecutionContext()
    thread = threading.Thread(target=ctx.cancel)
    thread.start()
    thread.join()

    assert ctx.cancelled is True
    with pytest.raises(OperationCancelledError, match="noop aborted: context cancelled"):
        ctx.check("noop")


def test_remaining_counts_down():
    ctx = ExecutionContext(timeout=30)

    remaining = ctx.remaining()
    assert 0 < remaining <= 30


def test_with_deadline_in_future():
    ctx = ExecutionContext.with_deadline(datetime.now(timezone.utc) + timedelta(minutes=5))

    ctx.check("noop")
    assert ctx.remaining() > 250


def test_with_deadline_in_past():
    ctx = ExecutionContext.with_deadline(datetime.now(timezone.utc) - timedelta(minutes=5))

    with pytest.raises(OperationCancelledError, match="deadline exceeded"):
        ctx.check("noop")


def test_client_config_without_deadline_is_unchanged():
    base = BotocoreConfig(connect_timeout=5, read_timeout=10)

    assert background().client_config(base) is base


def test_client_config_caps_timeouts():
    base = BotocoreConfig(retries={"max_attempts": 3, "mode": "standard"}, connect_timeout=5, read_timeout=10)

    capped = ExecutionContext(timeout=2).client_config(base)

    assert capped.connect_timeout <= 2
    assert capped.read_timeout <= 2
    assert capped.retries == {"max_attempts": 3, "mode": "standard"}


def test_client_config_keeps_shorter_timeouts():
    base = BotocoreConfig(connect_timeout=1, read_timeout=3)

    capped = ExecutionContext(timeout=60).client_config(base)

    assert capped.connect_timeout == 1
    assert capped.read_timeout == 3
