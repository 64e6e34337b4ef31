from __future__ import annotations

import datetime as _dt
import json
from typing import Any

from oura_config.settings import telemetry_dir, telemetry_enabled
from oura_common.correlation import current_corr_id
from oura_common.errors import REDACT_TOKEN

TELEMETRY_FILE = "mcp-telemetry.jsonl"

_SECRET_KEYS = {"authorization", "access_token", "token", "api_key", "apikey", "oura_api_key"}


def redact_secrets(obj: Any) -> Any:
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if isinstance(k, str) and k.strip().lower() in _SECRET_KEYS:
                if isinstance(v, str) and v.strip().lower().startswith("bearer "):
                    out[k] = "Bearer " + REDACT_TOKEN
                else:
                    out[k] = REDACT_TOKEN
            else:
                out[k] = redact_secrets(v)
        return out
    if isinstance(obj, list):
        return [redact_secrets(x) for x in obj]
    return obj


def log_event(
    kind: str,
    name: str,
    args: dict | None = None,
    ok: bool = True,
    ms: int = 0,
    *,
    client_id: str | None = None,
    corr_id: str | None = None,
    telemetry_file: str = TELEMETRY_FILE,
) -> None:
    """
    Append one JSONL telemetry record for a tool call.
    No-op unless OURA_TELEMETRY is enabled.
    """
    if not telemetry_enabled():
        return

    rec = {
        "ts": _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z"),
        "kind": kind,
        "name": name,
        "client_id": client_id,
        "corr_id": corr_id or current_corr_id(),
        "args": {} if args is None else dict(args),
        "ok": bool(ok),
        "ms": int(ms),
    }

    out_dir = telemetry_dir()
    out_dir.mkdir(parents=True, exist_ok=True)
    with (out_dir / telemetry_file).open("a", encoding="utf-8") as f:
        f.write(json.dumps(redact_secrets(rec), ensure_ascii=False) + "\n")
