"""
Environment helpers.

Problems this module solves:
- Developers often keep connection strings in a repo-local `.env` file.
- The SQL configuration file is keyed by an environment name (development,
  test, production, ...) that must be picked from the process environment.

This module provides:
- `load_dotenv_if_present()`: `.env` loading from the working directory (does not override existing env vars)
- `get_environment_name()`: the active configuration environment (`GEOPOINTS_ENV`, default `development`)
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_ENVIRONMENT = "development"


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `.env` once if present; returns the loaded env path (or None)."""
    # Respect explicit env file path if provided.
    explicit = os.getenv("GEOPOINTS_ENV_FILE")
    if explicit:
        env_path = Path(explicit).expanduser().resolve()
        if env_path.is_file():
            load_dotenv(dotenv_path=env_path, override=False)
            return env_path
        return None

    env_path = Path.cwd() / ".env"
    if env_path.is_file():
        load_dotenv(dotenv_path=env_path, override=False)
        return env_path
    return None


def get_environment_name() -> str:
    """Return the active configuration environment name."""
    load_dotenv_if_present()
    name = os.getenv("GEOPOINTS_ENV", "").strip()
    return name or DEFAULT_ENVIRONMENT
