"""
Unit tests for core/async_manager.py
"""
import asyncio

import httpx
import pytest

from app.core.async_manager import Outcome, guarded
from app.utils.tracer import Tracer


async def _value(v, delay=0.0):
    if delay:
        await asyncio.sleep(delay)
    return v


async def _raise(exc):
    raise exc


@pytest.mark.unit
class TestGuarded:

    @pytest.mark.asyncio
    async def test_success(self):
        outcome = await guarded(_value(42), timeout=1, default=0, label="demo", tracer=Tracer())
        assert outcome.ok
        assert outcome.value == 42
        assert outcome.error is None
        assert outcome.elapsed_ms >= 0

    @pytest.mark.asyncio
    async def test_timeout_returns_default(self):
        outcome = await guarded(_value(42, delay=1.0), timeout=0.05, default=-1, label="slow", tracer=Tracer())
        assert not outcome.ok
        assert outcome.value == -1
        assert outcome.error == "slow timed out"

    @pytest.mark.asyncio
    async def test_http_error_returns_default(self):
        request = httpx.Request("POST", "http://lt.test/v2/check")
        exc = httpx.ConnectError("refused", request=request)
        outcome = await guarded(_raise(exc), timeout=1, default=[], label="languagetool", tracer=Tracer())
        assert outcome.value == []
        assert outcome.error.startswith("languagetool unavailable")

    @pytest.mark.asyncio
    async def test_programming_errors_propagate(self):
        with pytest.raises(ZeroDivisionError):
            await guarded(_raise(ZeroDivisionError()), timeout=1, default=None, label="bug", tracer=Tracer())

    def test_outcome_ok(self):
        assert Outcome(value=1).ok
        assert not Outcome(value=None, error="boom").ok


@pytest.mark.unit
class TestTracer:

    def test_disabled_tracer_spans_are_noops(self):
        tracer = Tracer()
        assert tracer.enabled is False
        with tracer.span("noop", input={"a": 1}) as span:
            span.update(output="ignored")
        tracer.flush()
