# counsel_vault/core/context.py

import contextvars
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

correlation_id_ctx = contextvars.ContextVar("correlation_id", default=None)
actor_id_ctx = contextvars.ContextVar("actor_id", default=None)


@contextmanager
def request_context(correlation_id: Optional[str] = None, actor_id: Optional[str] = None) -> Iterator[str]:
    """Bind correlation and actor ids for log lines emitted inside the block. Yields the correlation id."""
    correlation_id = correlation_id or str(uuid.uuid4())
    correlation_token = correlation_id_ctx.set(correlation_id)
    actor_token = actor_id_ctx.set(actor_id)
    try:
        yield correlation_id
    finally:
        actor_id_ctx.reset(actor_token)
        correlation_id_ctx.reset(correlation_token)
