# src/geopoints/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/geopoints/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GEOPOINTS_LOG_LEVEL`, `GEOPOINTS_GEOCODER_URL`)
- an external YAML file via `GEOPOINTS_CONFIG_PATH`

The SQL backend has its own per-environment file (`config/geo.yml` in the working
directory, see `get_sql_conf`). When that file is absent the `sql` block of the
settings is the default configuration.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from geopoints.core.env import get_environment_name, load_dotenv_if_present
from geopoints.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SQL_CONFIG_PATH = "config/geo.yml"


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geopoints.config`."""
    text = resources.files("geopoints.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "geopoints"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class GeocoderSettings(BaseModel):
    base_url: str = "http://open.mapquestapi.com/nominatim/v1"
    user_agent: str | None = None


class SQLConf(BaseModel):
    """Connection and schema settings for the SQL-backed Mapper."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    driver: str = Field(..., min_length=1)
    open_str: str = Field(..., min_length=1, alias="openStr")
    table: str = Field(..., min_length=1)
    lat_col: str = Field(..., min_length=1, alias="latCol")
    lng_col: str = Field(..., min_length=1, alias="lngCol")

    def url(self) -> str:
        """Return the SQLAlchemy URL (`open_str` verbatim if it already is one)."""
        if "://" in self.open_str:
            return self.open_str
        return f"{self.driver}://{self.open_str}"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    geocoder: GeocoderSettings = Field(default_factory=GeocoderSettings)
    sql: SQLConf


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GEOPOINTS_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    geocoder_url = os.getenv("GEOPOINTS_GEOCODER_URL")
    if geocoder_url:
        data.setdefault("geocoder", {})["base_url"] = geocoder_url

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached).

    Raises:
        ConfigurationError: If the settings file is unreadable, not a YAML mapping,
            or fails validation.
    """
    load_dotenv_if_present()
    config_path = os.getenv("GEOPOINTS_CONFIG_PATH")
    source = config_path or "packaged defaults.yaml"
    try:
        raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
        raw = _apply_env_overrides(raw)
        return Settings.model_validate(raw)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Invalid settings in {source}: {exc}") from exc


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")


def default_sql_conf() -> SQLConf:
    """Return the fallback SQL configuration used when no `config/geo.yml` exists."""
    return get_settings().sql


def get_sql_conf(path: str | Path | None = None, *, environment: str | None = None) -> SQLConf:
    """Load the SQL configuration for the active environment.

    The file defaults to `config/geo.yml` relative to the working directory
    (`GEOPOINTS_SQL_CONFIG` overrides it). Its top-level keys are environment
    names, each holding `driver`, `openStr`, `table`, `latCol` and `lngCol`.

    Returns `default_sql_conf()` when the file does not exist.

    Raises:
        ConfigurationError: If the file is malformed or the selected environment
            lacks a required key.
    """
    load_dotenv_if_present()
    if path is None:
        path = os.getenv("GEOPOINTS_SQL_CONFIG") or DEFAULT_SQL_CONFIG_PATH
    config_path = Path(path).expanduser()
    if not config_path.is_absolute():
        config_path = Path.cwd() / config_path

    if not config_path.is_file():
        logger.debug("No SQL config at %s; using defaults", config_path)
        return default_sql_conf()

    env = environment or get_environment_name()
    try:
        data = _read_yaml_file(config_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Invalid SQL configuration file {config_path}: {exc}") from exc

    block = data.get(env)
    if not isinstance(block, dict):
        raise ConfigurationError(f"{config_path} has no '{env}' environment block")

    for key in ("driver", "openStr", "table", "latCol", "lngCol"):
        value = block.get(key)
        if value is None or str(value).strip() == "":
            raise ConfigurationError(f"{config_path} is missing required key '{env}.{key}'")

    try:
        conf = SQLConf.model_validate({k: str(v) for k, v in block.items()})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid '{env}' block in {config_path}: {exc}") from exc

    logger.info("Loaded SQL config for environment '%s' from %s", env, config_path)
    return conf
