# -*- coding: utf-8 -*-

import pathlib

DEFAULT_API_URL = "http://localhost:8000"
API_URL_ENV_VAR = "PROTORUNNER_API_URL"
DEFAULT_TIMEOUT = 30  # seconds, per request (runs on hardware can be slow)
DEFAULT_CONNECT_TIMEOUT = 10  # seconds
DEFAULT_LOGLEVEL = "INFO"
TEST_LOGLEVEL = "TRACE"

CONFIG_DIR = pathlib.Path.home().joinpath(".protorunner")
CONFIG_SECTION = "client"

# run progress simulation
PROGRESS_TICK_INTERVAL = 0.5  # seconds
PROGRESS_START = 10
PROGRESS_CEILING = 90
PROGRESS_MAX_INCREMENT = 5
PROGRESS_DONE = 100

NOTIF_QUEUE_MAXSIZE = 256  # private controller queue; oldest dropped when full

DESCRIPTION_TRUNCATE_LEN = 150
