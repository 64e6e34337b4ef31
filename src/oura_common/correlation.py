from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

_corr_id_ctx: ContextVar[str | None] = ContextVar("oura_corr_id", default=None)


def current_corr_id() -> str | None:
    """Correlation id of the tool call being dispatched, or None outside one."""
    return _corr_id_ctx.get()


@contextmanager
def corr_id_scope(corr_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id for one tool call and restore the previous one on exit."""
    cid = corr_id or uuid.uuid4().hex
    token = _corr_id_ctx.set(cid)
    try:
        yield cid
    finally:
        _corr_id_ctx.reset(token)
