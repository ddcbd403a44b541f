# -*- coding: utf-8 -*-
"""
Utility functions and constants for protorunner.

- Logging configuration and management
- Client configuration (INI file + environment)
- Default constants

See Also
--------
protorunner.util.logging : Logging configuration
protorunner.util.config : Client configuration
"""

from .config import ClientConfig, default_config_path, load_client_config
from .defaults import (
    API_URL_ENV_VAR,
    DEFAULT_API_URL,
    DEFAULT_LOGLEVEL,
    DEFAULT_TIMEOUT,
    TEST_LOGLEVEL,
)
from .logging import (
    clear_log,
    get_log_filename,
    log_default_path_client,
    shutdown_client_log,
    start_client_log,
)
