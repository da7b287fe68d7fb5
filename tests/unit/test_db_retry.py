"""Unit tests for transient database retry handling."""

from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from briefplanner.core.db_retry import is_transient_connection_error, run_with_transient_db_retry


@pytest.fixture(autouse=True)
def _no_backoff(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _no_sleep(_: float) -> None:
        return None

    monkeypatch.setattr("briefplanner.core.db_retry.asyncio.sleep", _no_sleep)


def test_is_transient_connection_error_classification() -> None:
    assert is_transient_connection_error(OperationalError("SELECT 1", {}, Exception("x")))
    assert is_transient_connection_error(ConnectionResetError("reset"))
    assert is_transient_connection_error(RuntimeError("underlying connection is closed"))
    assert not is_transient_connection_error(IntegrityError("INSERT", {}, Exception("duplicate key")))
    assert not is_transient_connection_error(ValueError("bad input"))


@pytest.mark.asyncio
async def test_retry_succeeds_after_transient_failure() -> None:
    calls = 0

    async def _operation() -> str:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise OperationalError("SELECT 1", {}, Exception("connection is closed"))
        return "ok"

    result = await run_with_transient_db_retry(_operation, operation_name="test", attempts=3)

    assert result == "ok"
    assert calls == 2


@pytest.mark.asyncio
async def test_retry_raises_non_transient_immediately() -> None:
    calls = 0

    async def _operation() -> None:
        nonlocal calls
        calls += 1
        raise IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(IntegrityError):
        await run_with_transient_db_retry(_operation, operation_name="test", attempts=3)

    assert calls == 1


@pytest.mark.asyncio
async def test_retry_gives_up_after_last_attempt() -> None:
    calls = 0

    async def _operation() -> None:
        nonlocal calls
        calls += 1
        raise ConnectionRefusedError("refused")

    with pytest.raises(ConnectionRefusedError):
        await run_with_transient_db_retry(_operation, operation_name="test", attempts=2)

    assert calls == 2


@pytest.mark.asyncio
async def test_timeout_is_not_retried() -> None:
    calls = 0

    async def _operation() -> None:
        nonlocal calls
        calls += 1
        await asyncio.Event().wait()

    with pytest.raises(asyncio.TimeoutError):
        await run_with_transient_db_retry(
            _operation,
            operation_name="test",
            attempts=3,
            timeout_seconds=0.01,
        )

    assert calls == 1


@pytest.mark.asyncio
async def test_attempts_must_be_positive() -> None:
    async def _operation() -> None:
        return None

    with pytest.raises(ValueError):
        await run_with_transient_db_retry(_operation, operation_name="test", attempts=0)
