"""Pytest configuration and shared fixtures."""
import os
import sys

import pytest

# Ensure project root and src/ on sys.path for absolute imports
ROOT = os.path.dirname(os.path.abspath(__file__))
for p in (ROOT, os.path.join(ROOT, "src")):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep unit tests hermetic: no telemetry files, no real credential."""
    monkeypatch.delenv("OURA_TELEMETRY", raising=False)
    monkeypatch.setenv("OURA_TELEMETRY_DIR", str(tmp_path / "telemetry"))
    monkeypatch.delenv("OURA_API_KEY", raising=False)
    monkeypatch.delenv("OURA_API_BASE_URL", raising=False)
