"""Client configuration handling.

Settings are resolved in this order, later entries winning:

1. Built-in defaults (`protorunner.util.defaults`)
2. The `[client]` section of an INI file (`~/.protorunner/config.ini` by default)
3. The `PROTORUNNER_API_URL` environment variable
4. Explicit overrides (e.g. CLI options)

The INI file format:

[client]
api_url = http://robot-host:8000
timeout = 60
tick_interval = 0.5
simulate = true
"""

from __future__ import annotations

import os
from configparser import ConfigParser
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from .defaults import (
    API_URL_ENV_VAR,
    CONFIG_DIR,
    CONFIG_SECTION,
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    PROGRESS_TICK_INTERVAL,
)


@dataclass(frozen=True)
class ClientConfig:
    """Resolved client settings."""

    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    tick_interval: float = PROGRESS_TICK_INTERVAL
    simulate: bool = True


def default_config_path() -> Path:
    return CONFIG_DIR.joinpath("config.ini")


def load_client_config(
    config_path: Optional[str | Path] = None, **overrides: Any
) -> ClientConfig:
    """Load the client configuration.

    Parameters
    ----------
    config_path : str | Path, optional
        INI file to read. Defaults to `~/.protorunner/config.ini`; a missing
        file is not an error.
    **overrides
        Field values that take precedence over everything else. `None` values
        are ignored so CLI options can be passed straight through.

    Returns
    -------
    ClientConfig
        The resolved configuration

    Raises
    ------
    ValueError
        If a value in the INI file cannot be parsed
    """
    config = ClientConfig()
    path = Path(config_path) if config_path else default_config_path()

    if path.exists():
        parser = ConfigParser()
        parser.read(path)
        if parser.has_section(CONFIG_SECTION):
            section = parser[CONFIG_SECTION]
            try:
                config = replace(
                    config,
                    api_url=section.get("api_url", config.api_url),
                    timeout=section.getfloat("timeout", config.timeout),
                    tick_interval=section.getfloat(
                        "tick_interval", config.tick_interval
                    ),
                    simulate=section.getboolean("simulate", config.simulate),
                )
            except ValueError as e:
                raise ValueError(f"Invalid value in config file {path}: {e}") from e
            logger.debug("Loaded client config from {}", path)
        else:
            logger.warning("Config file {} has no [{}] section", path, CONFIG_SECTION)

    env_url = os.environ.get(API_URL_ENV_VAR)
    if env_url:
        config = replace(config, api_url=env_url)

    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        config = replace(config, **overrides)

    return replace(config, api_url=config.api_url.rstrip("/"))
