"""Process-level request settings.

TLS material, proxy and timeout are fixed for the life of the process and are
read from the environment (a `.env` file is loaded first when present).
Empty values mean "not set".
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://emailrep.io"
DEFAULT_TIMEOUT = 30


def load_env_file() -> Optional[Path]:
    """Load the first .env found (current dir, then home dir)."""
    for env_path in [Path(".env"), Path.home() / ".env", Path.home() / ".emailrep.env"]:
        if env_path.exists():
            load_dotenv(env_path)
            return env_path
    return None


def _env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def _env_bool(name: str) -> bool:
    return (_env(name) or "").lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class RequestSettings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    # Paths to PEM files.
    cert: Optional[str] = None
    key: Optional[str] = None
    passphrase: Optional[str] = None
    ca: Optional[str] = None

    # Supports basic auth embedded in the URL.
    proxy: Optional[str] = None

    log_level: str = "INFO"
    fail_fast: bool = False

    @classmethod
    def from_env(cls, *, load_dotenv_file: bool = True) -> RequestSettings:
        if load_dotenv_file:
            load_env_file()

        timeout_raw = _env("EMAILREP_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ValueError(f"Invalid EMAILREP_TIMEOUT: {timeout_raw}") from e

        return cls(
            base_url=(_env("EMAILREP_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout=timeout,
            cert=_env("EMAILREP_CERT"),
            key=_env("EMAILREP_KEY"),
            passphrase=_env("EMAILREP_PASSPHRASE"),
            ca=_env("EMAILREP_CA"),
            proxy=_env("EMAILREP_PROXY"),
            log_level=(_env("EMAILREP_LOG_LEVEL") or "INFO").upper(),
            fail_fast=_env_bool("EMAILREP_FAIL_FAST"),
        )


def default_logger(settings: RequestSettings) -> logging.Logger:
    logger = logging.getLogger("email_reputation")
    level = getattr(logging, settings.log_level, None)
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    return logger
