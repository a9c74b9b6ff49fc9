# occucalc/config.py

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_URL = "https://occupancy-backend-4.onrender.com"


@dataclass
class Settings:
    state_dir: Path
    api_url: str
    api_timeout: float
    log_file: str


def load_settings(environ=None) -> Settings:
    """Settings from OCCUCALC_* environment variables, with defaults for local use."""
    env = os.environ if environ is None else environ
    try:
        timeout = float(env.get("OCCUCALC_API_TIMEOUT", 10))
    except ValueError:
        timeout = 10.0
    return Settings(
        state_dir=Path(env.get("OCCUCALC_STATE_DIR", "~/.occucalc")).expanduser(),
        api_url=env.get("OCCUCALC_API_URL", DEFAULT_API_URL).rstrip("/"),
        api_timeout=timeout,
        log_file=env.get("OCCUCALC_LOG_FILE", "occucalc.log"),
    )
