from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.ouraring.com/v2"
API_KEY_ENV = "OURA_API_KEY"
API_KEY_HINT_URL = "https://cloud.ouraring.com/personal-access-tokens"


def _find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward until we find pyproject.toml or .git.
    """
    start = start.resolve()
    for p in (start, *start.parents):
        if (p / "pyproject.toml").exists() or (p / ".git").exists():
            return p
    return None


@lru_cache(maxsize=1)
def repo_root() -> Path:
    """Best-effort repository root discovery.

    Order of precedence:
      1) OURA_REPO_ROOT (explicit override)
      2) walk upward from current working directory
      3) walk upward from this module file's directory
    """
    explicit = os.getenv("OURA_REPO_ROOT")
    if explicit:
        p = Path(explicit).expanduser().resolve()
        if not p.is_dir():
            raise RuntimeError(f"OURA_REPO_ROOT does not exist or is not a directory: {p}")
        return p

    cwd = Path.cwd().resolve()
    root = _find_repo_root(cwd)
    if root:
        return root

    here_dir = Path(__file__).resolve().parent
    root = _find_repo_root(here_dir)
    if root:
        return root

    # Fallback: typical layout (repo/src/oura_config/settings.py)
    if len(here_dir.parents) >= 2:
        return here_dir.parents[1]

    return cwd


@lru_cache(maxsize=1)
def load_env_once() -> Optional[Path]:
    """
    Load dotenv exactly once. Precedence:
      1) OURA_ENV_FILE (explicit path)
      2) repo-root/.env
      3) repo-root/config/.env
    """
    explicit = os.getenv("OURA_ENV_FILE")
    candidates = []

    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(repo_root() / ".env")
    candidates.append(repo_root() / "config" / ".env")

    for p in candidates:
        p = p.resolve()
        if p.is_file():
            # Do NOT override already-set environment variables
            load_dotenv(dotenv_path=str(p), override=False)
            return p

    return None


def api_key() -> Optional[str]:
    value = os.getenv(API_KEY_ENV, "").strip()
    return value or None


def require_api_key() -> str:
    """
    Startup precondition: the credential must be present before the gateway is built.
    Exits the process with status 1 otherwise.
    """
    key = api_key()
    if not key:
        logger.error("Error: %s environment variable is required", API_KEY_ENV)
        logger.error("Get your API key from: %s", API_KEY_HINT_URL)
        raise SystemExit(1)
    return key


def api_base_url() -> str:
    return (os.getenv("OURA_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/")


def telemetry_enabled() -> bool:
    return os.getenv("OURA_TELEMETRY", "0").strip().lower() in {"1", "true", "yes"}


def telemetry_dir() -> Path:
    """
    Default telemetry dir. Override with OURA_TELEMETRY_DIR.
    """
    p = os.getenv("OURA_TELEMETRY_DIR")
    if p:
        return Path(p).expanduser().resolve()
    return (repo_root() / "artifacts" / "telemetry").resolve()


def configure_logging() -> None:
    """
    Configure logging explicitly. No import-time side effects.
    Idempotent: if logging is already configured, do nothing.

    Handlers write to stderr; stdout carries the MCP stdio stream.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = os.getenv("OURA_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = os.getenv(
        "OURA_LOG_FORMAT",
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logging.basicConfig(level=level, format=fmt)


def init_runtime(*, configure_logs: bool = True, load_env: bool = True) -> None:
    """
    Call this from entrypoints only (servers, scripts).
    """
    if load_env:
        load_env_once()
    if configure_logs:
        configure_logging()
