import json

import pytest

import oura_common.tooling as tooling
from oura_common.correlation import corr_id_scope, current_corr_id
from oura_common.errors import ErrorKind, GatewayError
from oura_common.telemetry import log_event
from oura_common.tooling import InstrumentConfig, instrument_dispatch, sanitize_args_for_log


def test_sanitize_args_for_log_redacts_secret_keys():
    out = sanitize_args_for_log({"start_date": "2025-01-01", "api_key": "k", "Authorization": "Bearer x"})
    assert out == {"start_date": "2025-01-01", "api_key": "***redacted***", "Authorization": "***redacted***"}


@pytest.mark.asyncio
async def test_instrument_dispatch_records_success(monkeypatch):
    events = []
    monkeypatch.setattr(tooling, "log_event", lambda *a, **k: events.append((a, k)))

    @instrument_dispatch(InstrumentConfig(kind="tool", client_id="C1"))
    async def dispatch(name, arguments=None):
        return "ok"

    assert await dispatch("oura_sleep", {"start_date": "2025-01-01"}) == "ok"

    (args, kwargs), = events
    assert args[0] == "tool"
    assert args[1] == "oura_sleep"
    assert args[2]["args"] == {"start_date": "2025-01-01"}
    assert kwargs["ok"] is True
    assert kwargs["client_id"] == "C1"
    assert kwargs["corr_id"]


@pytest.mark.asyncio
async def test_instrument_dispatch_reraises_and_records_error_kind(monkeypatch):
    events = []
    monkeypatch.setattr(tooling, "log_event", lambda *a, **k: events.append((a, k)))

    @instrument_dispatch(InstrumentConfig(kind="tool", client_id="C1"))
    async def dispatch(name, arguments=None):
        raise GatewayError(ErrorKind.METHOD_NOT_FOUND, f"Unknown tool: {name}")

    with pytest.raises(GatewayError):
        await dispatch("oura_weather", {})

    (args, kwargs), = events
    assert kwargs["ok"] is False
    assert args[2]["error"]["kind"] == "MethodNotFound"


@pytest.mark.asyncio
async def test_each_call_gets_a_fresh_corr_id(monkeypatch):
    events = []
    monkeypatch.setattr(tooling, "log_event", lambda *a, **k: events.append(k["corr_id"]))

    @instrument_dispatch(InstrumentConfig(kind="tool", client_id="C1"))
    async def dispatch(name, arguments=None):
        return None

    await dispatch("oura_sleep")
    await dispatch("oura_sleep")
    assert len(set(events)) == 2


def test_log_event_is_noop_unless_enabled(tmp_path, monkeypatch):
    monkeypatch.setenv("OURA_TELEMETRY_DIR", str(tmp_path))
    log_event("tool", "oura_sleep", {"args": {}})
    assert not (tmp_path / "mcp-telemetry.jsonl").exists()


def test_log_event_writes_redacted_jsonl(tmp_path, monkeypatch):
    monkeypatch.setenv("OURA_TELEMETRY", "1")
    monkeypatch.setenv("OURA_TELEMETRY_DIR", str(tmp_path))

    log_event("tool", "oura_sleep", {"args": {"authorization": "Bearer abc", "api_key": "xyz"}}, ok=True, ms=5, client_id="C1")

    line = (tmp_path / "mcp-telemetry.jsonl").read_text(encoding="utf-8").strip()
    rec = json.loads(line)
    assert rec["name"] == "oura_sleep"
    assert rec["ok"] is True
    assert rec["args"]["args"]["authorization"] == "Bearer ***redacted***"
    assert rec["args"]["args"]["api_key"] == "***redacted***"


@pytest.mark.asyncio
async def test_corr_id_is_bound_during_the_call_and_restored_after(monkeypatch):
    logged = []
    monkeypatch.setattr(tooling, "log_event", lambda *a, **k: logged.append(k["corr_id"]))
    seen = []

    @instrument_dispatch(InstrumentConfig(kind="tool", client_id="C1"))
    async def dispatch(name, arguments=None):
        seen.append(current_corr_id())
        raise GatewayError(ErrorKind.INVALID_PARAMS, "Invalid parameters: start_date: Field required")

    assert current_corr_id() is None
    with pytest.raises(GatewayError):
        await dispatch("oura_sleep", {})

    assert seen == logged
    assert seen[0]
    assert current_corr_id() is None


def test_corr_id_scope_nests_and_restores():
    with corr_id_scope("outer") as outer:
        with corr_id_scope() as inner:
            assert current_corr_id() == inner != outer
        assert current_corr_id() == "outer"
    assert current_corr_id() is None
