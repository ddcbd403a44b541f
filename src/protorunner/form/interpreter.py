"""Schema interpreter: parameter set schema -> validation model, defaults, controls.

`interpret()` is a pure function of the schema. It never raises on odd schema
fragments; those are classified as the most permissive kind they fit, so the
worst a bad fragment can do is make its own field accept too much or fail
validation.

Validation messages are per field and per rule, e.g.

    {"speed": ["Must be less than or equal to 200"], "label": ["Required"]}
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from protorunner.types import ParameterSchema, ParameterSetSchema

from .controls import ControlSpec, control_for
from .kinds import ParamKind, classify

MSG_REQUIRED = "Required"


def is_empty(value: Any) -> bool:
    """Missing-or-empty check used for the required rule."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, (str, list, tuple)) and len(value) == 0:
        return True
    return False


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _fmt(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _check_bounds(schema: ParameterSchema, value: float) -> list[str]:
    errors = []
    lower, upper = schema.minimum, schema.maximum
    strict_lower = strict_upper = False

    # numeric exclusive bounds (draft 6+) tighten past the inclusive one
    if _is_number(schema.exclusive_minimum):
        if lower is None or schema.exclusive_minimum >= lower:
            lower, strict_lower = schema.exclusive_minimum, True
    elif schema.exclusive_minimum is True and lower is not None:
        strict_lower = True
    if _is_number(schema.exclusive_maximum):
        if upper is None or schema.exclusive_maximum <= upper:
            upper, strict_upper = schema.exclusive_maximum, True
    elif schema.exclusive_maximum is True and upper is not None:
        strict_upper = True

    if lower is not None:
        if strict_lower and not value > lower:
            errors.append(f"Must be greater than {_fmt(lower)}")
        elif not strict_lower and not value >= lower:
            errors.append(f"Must be greater than or equal to {_fmt(lower)}")
    if upper is not None:
        if strict_upper and not value < upper:
            errors.append(f"Must be less than {_fmt(upper)}")
        elif not strict_upper and not value <= upper:
            errors.append(f"Must be less than or equal to {_fmt(upper)}")
    return errors


# ============================================================================
# per-kind validators: (schema, non-empty value) -> error messages
# ============================================================================


def _validate_string(schema: ParameterSchema, value: Any) -> list[str]:
    return [] if isinstance(value, str) else ["Expected string"]


def _validate_enum(schema: ParameterSchema, value: Any) -> list[str]:
    if value in schema.enum:
        return []
    return [f"Must be one of: {', '.join(schema.enum)}"]


def _validate_number(schema: ParameterSchema, value: Any) -> list[str]:
    if not _is_number(value):
        return ["Expected number"]
    return _check_bounds(schema, value)


def _validate_integer(schema: ParameterSchema, value: Any) -> list[str]:
    if not _is_number(value):
        return ["Expected integer"]
    if not float(value).is_integer():
        return ["Expected integer"]
    return _check_bounds(schema, value)


def _validate_boolean(schema: ParameterSchema, value: Any) -> list[str]:
    return [] if isinstance(value, bool) else ["Expected boolean"]


def _validate_string_array(schema: ParameterSchema, value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return ["Expected a list of strings"]
    if not all(isinstance(v, str) for v in value):
        return ["Expected a list of strings"]
    return []


def _validate_array(schema: ParameterSchema, value: Any) -> list[str]:
    return [] if isinstance(value, (list, tuple)) else ["Expected a list"]


def _validate_any(schema: ParameterSchema, value: Any) -> list[str]:
    return []


VALIDATORS: dict[ParamKind, Callable[[ParameterSchema, Any], list[str]]] = {
    ParamKind.STRING: _validate_string,
    ParamKind.ENUM: _validate_enum,
    ParamKind.NUMBER: _validate_number,
    ParamKind.INTEGER: _validate_integer,
    ParamKind.BOOLEAN: _validate_boolean,
    ParamKind.STRING_ARRAY: _validate_string_array,
    ParamKind.ARRAY: _validate_array,
    ParamKind.UNKNOWN: _validate_any,
}


@dataclass(frozen=True, kw_only=True)
class FieldPlan:
    """Everything the form needs to know about one parameter."""

    name: str
    label: str
    description: Optional[str]
    kind: ParamKind
    control: ControlSpec
    required: bool
    schema: ParameterSchema

    def validate(self, value: Any) -> list[str]:
        if is_empty(value):
            return [MSG_REQUIRED] if self.required else []
        return VALIDATORS[self.kind](self.schema, value)


@dataclass(frozen=True)
class ValidationModel:
    """Checks a candidate form value mapping against the field plans."""

    fields: tuple[FieldPlan, ...]

    def validate_field(self, name: str, value: Any) -> list[str]:
        for fp in self.fields:
            if fp.name == name:
                return fp.validate(value)
        raise KeyError(name)

    def validate(self, values: dict[str, Any]) -> dict[str, list[str]]:
        """Return `{name: [messages]}` for every failing field (empty if valid).

        Keys in `values` that the schema does not declare are ignored.
        """
        errors = {}
        for fp in self.fields:
            msgs = fp.validate(values.get(fp.name))
            if msgs:
                errors[fp.name] = msgs
        return errors

    def is_valid(self, values: dict[str, Any]) -> bool:
        return not self.validate(values)


@dataclass(frozen=True)
class FormPlan:
    """Result of interpreting a parameter set schema."""

    fields: tuple[FieldPlan, ...]
    defaults: dict[str, Any] = field(default_factory=dict)

    @property
    def validation(self) -> ValidationModel:
        return ValidationModel(self.fields)

    def __getitem__(self, name: str) -> FieldPlan:
        for fp in self.fields:
            if fp.name == name:
                return fp
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(fp.name == name for fp in self.fields)

    def __iter__(self):
        return iter(self.fields)

    def __len__(self):
        return len(self.fields)

    def controls(self) -> dict[str, ControlSpec]:
        return {fp.name: fp.control for fp in self.fields}


def default_values(params_schema: ParameterSetSchema) -> dict[str, Any]:
    """Defaults copied verbatim, only for parameters that declare one."""
    return {
        name: schema.default
        for name, schema in params_schema.properties.items()
        if schema.has_default
    }


def plan_field(name: str, schema: ParameterSchema, required: bool) -> FieldPlan:
    kind = classify(schema)
    return FieldPlan(
        name=name,
        label=schema.title or name,
        description=schema.description,
        kind=kind,
        control=control_for(kind, schema),
        required=required,
        schema=schema,
    )


def interpret(params_schema: ParameterSetSchema) -> FormPlan:
    """Interpret a parameter set schema into a form plan (fields in schema order)."""
    fields = tuple(
        plan_field(name, schema, params_schema.is_required(name))
        for name, schema in params_schema.properties.items()
    )
    return FormPlan(fields, default_values(params_schema))


def validation_model(params_schema: ParameterSetSchema) -> ValidationModel:
    return interpret(params_schema).validation
