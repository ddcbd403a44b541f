"""Tests for the form value mapping bound to one protocol."""

import pytest

from protorunner.form import ProtocolForm
from protorunner.types import FormValidationError, Protocol


@pytest.fixture
def form(speed_protocol):
    return ProtocolForm(speed_protocol)


def test_initial_values_are_defaults(form):
    assert form.values == {"speed": 50}
    assert form.is_valid()
    assert form.errors() == {}


def test_set_raw_validates_on_the_fly(form):
    assert form.set_raw("speed", "250") == 250
    assert form.errors() == {"speed": ["Must be less than or equal to 200"]}
    form.set_raw("speed", "120")
    assert form.is_valid()
    assert form.display("speed") == "120"


def test_clear_required_field(form):
    form.clear("speed")
    assert "speed" not in form.values
    assert form.errors() == {"speed": ["Required"]}
    with pytest.raises(FormValidationError) as excinfo:
        form.submission()
    assert excinfo.value.errors == {"speed": ["Required"]}
    assert "speed: Required" in str(excinfo.value)


def test_blank_input_unsets(form):
    form.set_raw("label", "A")
    assert form.get("label") == "A"
    form.set_raw("label", "")
    assert form.get("label") is None
    assert "label" not in form.values


def test_unknown_parameter(form):
    with pytest.raises(KeyError):
        form.set("colour", "red")
    with pytest.raises(KeyError):
        form.set_raw("colour", "red")


def test_submission_contains_only_set_values(form):
    assert form.submission() == {"speed": 50}
    form.set_raw("speed", "120")
    form.set_raw("label", "B")
    assert form.submission() == {"speed": 120, "label": "B"}


def test_submission_is_a_copy():
    protocol = Protocol.from_dict(
        {
            "id": "tagger",
            "name": "Tagger",
            "params_schema": {
                "properties": {
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                        "default": ["a"],
                    }
                }
            },
        }
    )
    form = ProtocolForm(protocol)
    sent = form.submission()
    sent["tags"].append("b")
    assert form.get("tags") == ["a"]
    assert form.plan.defaults == {"tags": ["a"]}


def test_reset_restores_defaults(form):
    form.set_raw("speed", "10")
    form.set_raw("label", "A")
    form.reset()
    assert form.values == {"speed": 50}


def test_display_of_unset_fields(form):
    assert form.display("label") == ""
    form.clear("speed")
    assert form.display("speed") == ""


def test_toggle_field():
    protocol = Protocol.from_dict(
        {
            "id": "heater",
            "name": "Heater",
            "params_schema": {
                "properties": {"enabled": {"type": "boolean", "default": False}}
            },
        }
    )
    form = ProtocolForm(protocol)
    assert form.display("enabled") == "Disabled"
    form.set_raw("enabled", "on")
    assert form.get("enabled") is True
    assert form.display("enabled") == "Enabled"
    assert form.submission() == {"enabled": True}


def test_form_without_parameters():
    form = ProtocolForm(Protocol.from_dict({"id": "noop", "name": "Noop"}))
    assert form.values == {}
    assert form.submission() == {}


def test_large_integer_kept_exactly():
    protocol = Protocol.from_dict(
        {
            "id": "counter",
            "name": "Counter",
            "params_schema": {"properties": {"n": {"type": "integer"}}},
        }
    )
    form = ProtocolForm(protocol)
    assert form.set_raw("n", "9007199254740993") == 9007199254740993
    assert form.submission() == {"n": 9007199254740993}
