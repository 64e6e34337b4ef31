from __future__ import annotations

import functools
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from oura_common.correlation import corr_id_scope
from oura_common.errors import ErrorKind, GatewayError
from oura_common.telemetry import log_event


logger = logging.getLogger(__name__)

_REDACTION_KEYS = {"authorization", "token", "access_token", "api_key", "apikey"}


def sanitize_args_for_log(args: dict | None) -> dict:
    """Remove obvious secrets from args (telemetry layer also redacts)."""
    out: dict[str, Any] = {}
    for k, v in (args or {}).items():
        out[str(k)] = "***redacted***" if str(k).lower() in _REDACTION_KEYS else v
    return out


@dataclass(frozen=True)
class InstrumentConfig:
    kind: str
    client_id: str
    name_param: str = "name"
    args_param: str = "arguments"


def _error_kind(exc: BaseException) -> str:
    if isinstance(exc, GatewayError):
        return exc.kind.value
    return ErrorKind.INTERNAL_ERROR.value


def instrument_dispatch(cfg: InstrumentConfig):
    """
    Decorator for async tool dispatchers: one correlation id, one log line and one
    telemetry record per call. Exceptions are re-raised unchanged.
    """

    def decorator(fn: Callable[..., Awaitable[Any]]):
        fn_sig = inspect.signature(fn)

        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any):
            bound = fn_sig.bind_partial(*args, **kwargs)
            tool_name = str(bound.arguments.get(cfg.name_param, ""))
            raw_args = bound.arguments.get(cfg.args_param)
            args_for_log: dict[str, Any] = {
                "args": sanitize_args_for_log(raw_args if isinstance(raw_args, dict) else None),
            }

            with corr_id_scope() as corr_id:
                t0 = time.perf_counter()
                try:
                    result = await fn(*args, **kwargs)
                except Exception as e:
                    ms = int((time.perf_counter() - t0) * 1000)
                    args_for_log["error"] = {"kind": _error_kind(e), "message": str(e)}
                    logger.info("tool=%s corr_id=%s ok=False ms=%s error=%s", tool_name, corr_id, ms, args_for_log["error"]["kind"])
                    log_event(cfg.kind, tool_name, args_for_log, ok=False, ms=ms, client_id=cfg.client_id, corr_id=corr_id)
                    raise

                ms = int((time.perf_counter() - t0) * 1000)
                logger.info("tool=%s corr_id=%s ok=True ms=%s", tool_name, corr_id, ms)
                log_event(cfg.kind, tool_name, args_for_log, ok=True, ms=ms, client_id=cfg.client_id, corr_id=corr_id)
                return result

        wrapper.__signature__ = fn_sig  # type: ignore[attr-defined]
        return wrapper

    return decorator
