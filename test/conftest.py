import copy

import pytest

from protorunner.types import Protocol, ProtocolResult

SPEED_PROTOCOL = {
    "id": "mixer",
    "name": "Plate Mixer",
    "description": "Shake a plate at a set speed.",
    "tags": ["mixing", "plates"],
    "params_schema": {
        "title": "MixerParams",
        "type": "object",
        "properties": {
            "speed": {
                "type": "integer",
                "title": "Speed",
                "minimum": 0,
                "maximum": 200,
                "default": 50,
            },
            "label": {"type": "string", "enum": ["A", "B"]},
        },
        "required": ["speed"],
    },
}

TWO_COMMAND_RESULT = {
    "status": "OK",
    "command_count": 2,
    "results": [
        {"status": "SUCCESS", "errors": [], "data": {}},
        {"status": "FAILED", "errors": ["timeout"], "data": {"temp": 37}},
    ],
}


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: marks test as slow running test")


@pytest.fixture
def speed_payload():
    return copy.deepcopy(SPEED_PROTOCOL)


@pytest.fixture
def speed_protocol():
    return Protocol.from_dict(copy.deepcopy(SPEED_PROTOCOL))


@pytest.fixture
def result_payload():
    return copy.deepcopy(TWO_COMMAND_RESULT)


@pytest.fixture
def two_command_result():
    return ProtocolResult.from_dict(copy.deepcopy(TWO_COMMAND_RESULT))
