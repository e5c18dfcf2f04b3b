"""Application settings loaded from environment variables and a local .env file."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Optional

DEFAULT_STORAGE_DIR = "data/storage"
DEFAULT_STORAGE_KEY = "subx-user-storage"
DEFAULT_BASELINE_COUNT = 137582
DEFAULT_INCOME_RANGES_FILE = "data/income_ranges.json"
DEFAULT_REFERRAL_BASE_URL = "https://subx.ng/r/"
DEFAULT_SUBMIT_DELAY = 1.0
DEFAULT_LOG_LEVEL = "INFO"

ENV_PREFIX = "SUBX_"

_ENV_LOADED = False
_ENV_LOCK = Lock()
_LOGGING_CONFIGURED = False


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the waitlist app."""

    storage_dir: str = DEFAULT_STORAGE_DIR
    storage_key: str = DEFAULT_STORAGE_KEY
    baseline_count: int = DEFAULT_BASELINE_COUNT
    income_ranges_file: str = DEFAULT_INCOME_RANGES_FILE
    referral_base_url: str = DEFAULT_REFERRAL_BASE_URL
    submit_delay: float = DEFAULT_SUBMIT_DELAY
    log_level: str = DEFAULT_LOG_LEVEL


def load_env_file(env_path: str = ".env") -> None:
    """
    Load SUBX_* variables from a .env file if present.

    Behavior:
        - Runs once per process
        - Skips blank lines and comments
        - Never overrides variables already set in the environment
    """
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        path = Path(env_path)
        if path.exists():
            for raw_line in path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key.startswith(ENV_PREFIX) and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got: {raw}") from e
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got: {raw}")
    return value


def _read_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got: {raw}") from e
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got: {raw}")
    return value


def get_settings() -> Settings:
    """
    Build settings from the environment.

    Returns:
        Settings: Values from SUBX_* variables, defaults for the rest

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    load_env_file()

    base_url = os.getenv("SUBX_REFERRAL_BASE_URL", DEFAULT_REFERRAL_BASE_URL)
    if not base_url.endswith("/"):
        base_url = f"{base_url}/"

    return Settings(
        storage_dir=os.getenv("SUBX_STORAGE_DIR", DEFAULT_STORAGE_DIR),
        storage_key=os.getenv("SUBX_STORAGE_KEY", DEFAULT_STORAGE_KEY),
        baseline_count=_read_int("SUBX_BASELINE_COUNT", DEFAULT_BASELINE_COUNT),
        income_ranges_file=os.getenv("SUBX_INCOME_RANGES_FILE", DEFAULT_INCOME_RANGES_FILE),
        referral_base_url=base_url,
        submit_delay=_read_float("SUBX_SUBMIT_DELAY", DEFAULT_SUBMIT_DELAY),
        log_level=os.getenv("SUBX_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the app process."""
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    logging.basicConfig(
        level=getattr(logging, (level or DEFAULT_LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _LOGGING_CONFIGURED = True
