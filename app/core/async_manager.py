# app/core/async_manager.py
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Optional, TypeVar

import httpx
import openai

from app.utils.tracer import Tracer, get_tracer

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures of an external collaborator that degrade to a neutral default.
# Anything else is a bug and propagates.
RECOVERABLE_ERRORS = (
    asyncio.TimeoutError,
    httpx.HTTPError,
    ValueError,
    KeyError,
    TypeError,
    OSError,
    openai.OpenAIError,
)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a guarded collaborator call.

    `error` is None on success; otherwise `value` holds the neutral default.
    """
    value: T
    error: Optional[str] = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


async def guarded(
    call: Awaitable[T],
    *,
    timeout: float,
    default: T,
    label: str,
    tracer: Optional[Tracer] = None,
) -> Outcome[T]:
    """Await `call` bounded by `timeout`; never raise for expected failures."""
    tracer = tracer or get_tracer()
    started = time.perf_counter()
    with tracer.span(name=label, input={"timeout_s": timeout}) as span:
        try:
            value = await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError:
            elapsed = (time.perf_counter() - started) * 1000.0
            logger.warning(f"{label} timed out after {timeout}s, using neutral default")
            span.update(level="ERROR", status_message="timeout")
            return Outcome(value=default, error=f"{label} timed out", elapsed_ms=elapsed)
        except RECOVERABLE_ERRORS as e:
            elapsed = (time.perf_counter() - started) * 1000.0
            logger.warning(f"{label} unavailable ({e.__class__.__name__}: {e}), using neutral default")
            span.update(level="ERROR", status_message=str(e))
            return Outcome(value=default, error=f"{label} unavailable: {e}", elapsed_ms=elapsed)

        elapsed = (time.perf_counter() - started) * 1000.0
        logger.debug(f"{label} completed in {elapsed:.1f}ms")
        span.update(output=value if isinstance(value, (int, float, str, type(None))) else repr(value)[:500])
        return Outcome(value=value, elapsed_ms=elapsed)
