"""
Lightweight shared HTTP client.

Goals:
- Centralize timeouts and error logging for the Oura API.
- Keep dependencies limited to `requests`.
- Never retry: one tool call maps to exactly one upstream request.

This module intentionally avoids any framework coupling (MCP etc.).
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import requests
from requests import Response
from requests.adapters import HTTPAdapter


logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


DEFAULT_CONNECT_TIMEOUT_S = 3.05
DEFAULT_READ_TIMEOUT_S = 20.0


def _default_timeout() -> tuple[float, float]:
    return (
        _env_float("OURA_HTTP_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT_S),
        _env_float("OURA_HTTP_READ_TIMEOUT", DEFAULT_READ_TIMEOUT_S),
    )


@dataclass(frozen=True)
class HttpClientConfig:
    timeout: tuple[float, float] = field(default_factory=_default_timeout)
    user_agent: str = field(default_factory=lambda: os.getenv("OURA_HTTP_USER_AGENT", "oura-mcp/0.1.0"))


class HttpClient:
    """A small wrapper around `requests.Session` with fixed headers and timeouts."""

    def __init__(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        config: HttpClientConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or HttpClientConfig()
        self.session = session or requests.Session()
        self._configure_session(self.session, self.config, headers)

    @staticmethod
    def _configure_session(
        session: requests.Session,
        config: HttpClientConfig,
        headers: Mapping[str, str] | None,
    ) -> None:
        session.headers["User-Agent"] = config.user_agent
        if headers:
            session.headers.update(headers)

        adapter = HTTPAdapter(max_retries=0)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

    def get(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout: tuple[float, float] | float | None = None,
    ) -> Response:
        """Perform a GET and raise for non-2xx responses."""
        t0 = time.perf_counter()
        try:
            resp = self.session.get(
                url,
                params=dict(params) if params else None,
                timeout=timeout or self.config.timeout,
            )
            resp.raise_for_status()
            return resp
        except requests.RequestException as e:
            ms = int((time.perf_counter() - t0) * 1000)
            status = getattr(getattr(e, "response", None), "status_code", None)
            logger.warning("HTTP GET %s failed (status=%s, ms=%s): %s", url, status, ms, str(e))
            raise

    def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout: tuple[float, float] | float | None = None,
    ) -> Any:
        return self.get(url, params=params, timeout=timeout).json()
