# app/utils/tracer.py
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional
import logging

from langfuse import Langfuse

from app.core.config import settings

logger = logging.getLogger(__name__)


class _NoopSpan:
    def update(self, **kwargs: Any) -> None:
        pass


class Tracer:
    """Langfuse spans around external collaborator calls.

    Disabled (every span is a no-op) unless Langfuse credentials are set.
    """

    def __init__(self, client: Optional[Langfuse] = None):
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.client is not None

    @contextmanager
    def span(self, name: str, input: Optional[Dict[str, Any]] = None) -> Iterator[Any]:
        if self.client is None:
            yield _NoopSpan()
            return
        with self.client.start_as_current_span(name=name, input=input) as span:
            yield span

    def flush(self) -> None:
        if self.client is None:
            return
        try:
            self.client.flush()
        except Exception as e:  # noqa: BLE001
            logger.debug(f"Langfuse flush failed: {e}")


_tracer: Optional[Tracer] = None

def get_tracer() -> Tracer:
    global _tracer
    if _tracer is None:
        if settings.LANGFUSE_PUBLIC_KEY and settings.LANGFUSE_SECRET_KEY:
            client = Langfuse(
                public_key=settings.LANGFUSE_PUBLIC_KEY,
                secret_key=settings.LANGFUSE_SECRET_KEY,
                host=settings.LANGFUSE_HOST,
            )
            logger.info(f"Langfuse initialized. Host: {settings.LANGFUSE_HOST}")
            _tracer = Tracer(client)
        else:
            logger.info("Langfuse credentials not set. Tracing disabled.")
            _tracer = Tracer()
    return _tracer
