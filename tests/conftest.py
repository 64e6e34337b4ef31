from __future__ import annotations

import pytest
import pytest_asyncio

from tests.helpers.mcp_runtime import build_test_env, mcp_stdio_session


class FakeOuraClient:
    """Records calls; returns canned payloads or raises a canned error per method."""

    def __init__(self, payload=None, error: Exception | None = None):
        self.payload = {"data": []} if payload is None else payload
        self.error = error
        self.calls: list[tuple[str, str, str | None]] = []

    def _respond(self, method: str, start_date: str, end_date: str | None):
        self.calls.append((method, start_date, end_date))
        if self.error is not None:
            raise self.error
        return self.payload

    def get_daily_sleep(self, start_date, end_date=None):
        return self._respond("get_daily_sleep", start_date, end_date)

    def get_daily_readiness(self, start_date, end_date=None):
        return self._respond("get_daily_readiness", start_date, end_date)

    def get_daily_activity(self, start_date, end_date=None):
        return self._respond("get_daily_activity", start_date, end_date)

    def get_heart_rate(self, start_date, end_date=None):
        return self._respond("get_heart_rate", start_date, end_date)


@pytest.fixture()
def fake_client():
    return FakeOuraClient()


@pytest.fixture()
def gateway(fake_client):
    from oura_mcp.gateway import OuraGateway

    return OuraGateway(fake_client)


@pytest_asyncio.fixture
async def server_session(tmp_path):
    """Initialized session for the Oura MCP server (stdio transport)."""
    env = build_test_env(tmp_path)
    async with mcp_stdio_session("oura_mcp.server", env=env) as session:
        yield session
