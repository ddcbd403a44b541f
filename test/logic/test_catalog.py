"""Tests for catalog search, tags and card descriptions."""

from protorunner.catalog import (
    NO_DESCRIPTION,
    filter_protocols,
    matches,
    truncate_description,
    unique_tags,
)
from protorunner.types import Protocol

PROTOCOLS = [
    Protocol.from_dict(
        {
            "id": "mixer",
            "name": "Plate Mixer",
            "description": "Shake a plate at a set speed.",
            "tags": ["mixing", "plates"],
        }
    ),
    Protocol.from_dict(
        {
            "id": "pcr",
            "name": "PCR Cycle",
            "description": "Thermal cycling for amplification.",
            "tags": ["thermal", "plates"],
        }
    ),
    Protocol.from_dict({"id": "noop", "name": "Noop"}),
]


def test_empty_query_matches_everything():
    assert filter_protocols(PROTOCOLS) == PROTOCOLS
    assert filter_protocols(PROTOCOLS, "") == PROTOCOLS


def test_search_name_description_and_tags():
    assert [p.id for p in filter_protocols(PROTOCOLS, "mixer")] == ["mixer"]
    assert [p.id for p in filter_protocols(PROTOCOLS, "AMPLIFICATION")] == ["pcr"]
    assert [p.id for p in filter_protocols(PROTOCOLS, "plates")] == ["mixer", "pcr"]
    assert filter_protocols(PROTOCOLS, "centrifuge") == []


def test_matches_protocol_without_description():
    assert matches(PROTOCOLS[2], "noop")
    assert not matches(PROTOCOLS[2], "plate")


def test_unique_tags_first_seen_order():
    assert unique_tags(PROTOCOLS) == ["mixing", "plates", "thermal"]
    assert unique_tags([]) == []


def test_truncate_description():
    assert truncate_description("Short.") == "Short."
    assert truncate_description("") == NO_DESCRIPTION
    assert truncate_description(None) == NO_DESCRIPTION
    long = "x" * 200
    assert truncate_description(long) == "x" * 150 + "..."
    assert truncate_description("x" * 150) == "x" * 150
    assert truncate_description("abcdef", limit=3) == "abc..."
