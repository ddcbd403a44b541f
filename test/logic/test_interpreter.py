"""Tests for interpreting parameter set schemas into form plans.

Covers:
1. Defaults - copied verbatim, only for parameters that declare one
2. Classification - schema fragments map to kinds and controls
3. Validation - required, type and bound rules with their messages
"""

import math

import pytest

from protorunner.form import (
    MSG_REQUIRED,
    ControlKind,
    ParamKind,
    interpret,
    is_empty,
    validation_model,
)
from protorunner.types import ParameterSetSchema


def _schema(properties, required=()):
    return ParameterSetSchema.from_dict(
        {"properties": properties, "required": list(required)}
    )


# ============================================================================
# defaults
# ============================================================================


def test_defaults_only_declared(speed_protocol):
    plan = interpret(speed_protocol.params_schema)
    assert plan.defaults == {"speed": 50}


def test_defaults_keep_null_and_falsy():
    plan = interpret(
        _schema(
            {
                "note": {"type": "string", "default": None},
                "flag": {"type": "boolean", "default": False},
                "count": {"type": "integer", "default": 0},
                "name": {"type": "string"},
            }
        )
    )
    assert plan.defaults == {"note": None, "flag": False, "count": 0}


def test_empty_schema():
    plan = interpret(ParameterSetSchema())
    assert len(plan) == 0
    assert plan.defaults == {}
    assert plan.validation.validate({}) == {}
    assert plan.validation.validate({"stray": 1}) == {}


# ============================================================================
# classification and controls
# ============================================================================


def test_fields_follow_schema_order(speed_protocol):
    plan = interpret(speed_protocol.params_schema)
    assert [fp.name for fp in plan] == ["speed", "label"]
    assert plan["speed"].label == "Speed"
    assert plan["label"].label == "label"
    assert plan["speed"].required
    assert not plan["label"].required
    assert "speed" in plan
    assert "missing" not in plan
    with pytest.raises(KeyError):
        plan["missing"]


@pytest.mark.parametrize(
    "fragment,kind,control",
    [
        ({"type": "string"}, ParamKind.STRING, ControlKind.TEXT),
        ({"type": "string", "enum": ["A", "B"]}, ParamKind.ENUM, ControlKind.SELECT),
        ({"type": "string", "enum": []}, ParamKind.STRING, ControlKind.TEXT),
        ({"type": "number"}, ParamKind.NUMBER, ControlKind.NUMBER),
        (
            {"type": "number", "minimum": 0, "maximum": 1},
            ParamKind.NUMBER,
            ControlKind.RANGE,
        ),
        ({"type": "integer", "minimum": 0}, ParamKind.INTEGER, ControlKind.NUMBER),
        ({"type": "boolean"}, ParamKind.BOOLEAN, ControlKind.TOGGLE),
        (
            {"type": "array", "items": {"type": "string"}},
            ParamKind.STRING_ARRAY,
            ControlKind.MULTI_TEXT,
        ),
        (
            {"type": "array", "items": {"type": "number"}},
            ParamKind.ARRAY,
            ControlKind.MULTI_TEXT,
        ),
        ({"type": "object"}, ParamKind.UNKNOWN, ControlKind.TEXT),
        ({}, ParamKind.UNKNOWN, ControlKind.TEXT),
    ],
)
def test_classification(fragment, kind, control):
    plan = interpret(_schema({"p": fragment}))
    assert plan["p"].kind is kind
    assert plan["p"].control.kind is control


def test_range_control_settings(speed_protocol):
    control = interpret(speed_protocol.params_schema)["speed"].control
    assert control.kind is ControlKind.RANGE
    assert control.minimum == 0
    assert control.maximum == 200
    assert control.step == 5
    assert control.integer

    narrow = interpret(_schema({"p": {"type": "number", "minimum": 0, "maximum": 10}}))
    assert narrow["p"].control.step == 1
    assert not narrow["p"].control.integer


def test_select_options(speed_protocol):
    control = interpret(speed_protocol.params_schema).controls()["label"]
    assert control.options == ("A", "B")
    assert control.placeholder


def test_interpret_is_deterministic(speed_protocol):
    assert interpret(speed_protocol.params_schema) == interpret(
        speed_protocol.params_schema
    )


# ============================================================================
# validation
# ============================================================================


def test_speed_validation(speed_protocol):
    model = validation_model(speed_protocol.params_schema)
    assert model.validate({"speed": 50}) == {}
    assert model.validate({"speed": 50, "label": "A"}) == {}
    assert model.validate({"speed": 250}) == {
        "speed": ["Must be less than or equal to 200"]
    }
    assert model.validate({"speed": -1}) == {
        "speed": ["Must be greater than or equal to 0"]
    }
    assert model.validate({}) == {"speed": [MSG_REQUIRED]}
    assert model.validate({"speed": 50, "label": "C"}) == {
        "label": ["Must be one of: A, B"]
    }
    assert model.validate({"speed": 12.5}) == {"speed": ["Expected integer"]}
    assert model.validate({"speed": "fast"}) == {"speed": ["Expected integer"]}


def test_validate_field(speed_protocol):
    model = validation_model(speed_protocol.params_schema)
    assert model.validate_field("speed", 200) == []
    assert model.validate_field("label", None) == []
    assert model.validate_field("speed", None) == [MSG_REQUIRED]
    with pytest.raises(KeyError):
        model.validate_field("nope", 1)


def test_bounds_are_inclusive():
    model = validation_model(
        _schema({"x": {"type": "number", "minimum": 0.5, "maximum": 1.5}})
    )
    assert model.is_valid({"x": 0.5})
    assert model.is_valid({"x": 1.5})
    assert model.validate({"x": 1.6}) == {"x": ["Must be less than or equal to 1.5"]}


def test_exclusive_bounds_numeric():
    model = validation_model(
        _schema({"x": {"type": "number", "exclusiveMinimum": 0, "exclusiveMaximum": 1}})
    )
    assert model.is_valid({"x": 0.5})
    assert model.validate({"x": 0}) == {"x": ["Must be greater than 0"]}
    assert model.validate({"x": 1}) == {"x": ["Must be less than 1"]}


def test_exclusive_bounds_boolean_form():
    model = validation_model(
        _schema(
            {
                "n": {
                    "type": "integer",
                    "minimum": 0,
                    "maximum": 10,
                    "exclusiveMaximum": True,
                }
            }
        )
    )
    assert model.is_valid({"n": 0})
    assert model.is_valid({"n": 9})
    assert model.validate({"n": 10}) == {"n": ["Must be less than 10"]}


def test_integer_accepts_whole_float():
    model = validation_model(_schema({"n": {"type": "integer"}}))
    assert model.is_valid({"n": 3.0})
    assert not model.is_valid({"n": True})


def test_type_messages():
    model = validation_model(
        _schema(
            {
                "s": {"type": "string"},
                "x": {"type": "number"},
                "b": {"type": "boolean"},
                "tags": {"type": "array", "items": {"type": "string"}},
                "arr": {"type": "array"},
            }
        )
    )
    errors = model.validate(
        {"s": 1, "x": "one", "b": "yes", "tags": ["a", 2], "arr": "a,b"}
    )
    assert errors == {
        "s": ["Expected string"],
        "x": ["Expected number"],
        "b": ["Expected boolean"],
        "tags": ["Expected a list of strings"],
        "arr": ["Expected a list"],
    }
    assert model.is_valid({"s": "a", "x": 1.5, "b": False, "tags": ["a"], "arr": [1]})


def test_required_empty_values():
    model = validation_model(
        _schema(
            {"s": {"type": "string"}, "tags": {"type": "array"}, "x": {"type": "number"}},
            required=["s", "tags", "x"],
        )
    )
    assert model.validate({"s": "", "tags": [], "x": math.nan}) == {
        "s": [MSG_REQUIRED],
        "tags": [MSG_REQUIRED],
        "x": [MSG_REQUIRED],
    }


def test_optional_empty_values_pass():
    model = validation_model(_schema({"s": {"type": "string", "minimum": 3}}))
    assert model.validate({"s": ""}) == {}
    assert model.validate({}) == {}


def test_unknown_kind_accepts_anything():
    model = validation_model(_schema({"blob": {"type": "object"}}))
    assert model.is_valid({"blob": {"a": 1}})
    assert model.is_valid({"blob": 42})


def test_is_empty():
    assert is_empty(None)
    assert is_empty("")
    assert is_empty([])
    assert is_empty(float("nan"))
    assert not is_empty(0)
    assert not is_empty(False)
    assert not is_empty(" ")
