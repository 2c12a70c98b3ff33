"""
Logging configuration.

The packaged YAML (`src/geopoints/config/logging.yaml`) is applied with
`dictConfig`; the level comes from the caller, else from settings
(`GEOPOINTS_LOG_LEVEL`).
"""

from __future__ import annotations

import copy
import logging.config

from geopoints.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure the Python logging system for the CLI and other entrypoints."""
    level = (level or get_settings().app.log_level).upper()
    config = copy.deepcopy(get_logging_config())

    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level
    config.setdefault("loggers", {}).setdefault("geopoints", {})["level"] = level

    logging.config.dictConfig(config)
