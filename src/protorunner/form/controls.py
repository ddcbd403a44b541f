"""Control plan entries and per-control value coercion.

A `ControlSpec` says which widget a parameter gets and with what settings; the
functions below translate between what an operator types/sees and the typed
value stored in the form.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from protorunner.types import ParameterSchema

from .kinds import ControlKind, ParamKind

TOGGLE_ON_LABEL = "Enabled"
TOGGLE_OFF_LABEL = "Disabled"
SELECT_PLACEHOLDER = "Select an option"

_TRUE_WORDS = {"true", "yes", "y", "on", "1", "enabled"}
_FALSE_WORDS = {"false", "no", "n", "off", "0", "disabled"}

WIDE_RANGE = 100  # spans above this get a coarser slider step
WIDE_RANGE_STEP = 5
NARROW_RANGE_STEP = 1


@dataclass(frozen=True, kw_only=True)
class ControlSpec:
    """Widget assignment for one parameter.

    `minimum`/`maximum` are inclusive display bounds; strict (exclusive) bounds
    only affect validation.
    """

    kind: ControlKind
    options: tuple[str, ...] = ()
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    step: Optional[float] = None
    integer: bool = False
    placeholder: str = ""


def range_step(minimum: float, maximum: float) -> int:
    return WIDE_RANGE_STEP if (maximum - minimum) > WIDE_RANGE else NARROW_RANGE_STEP


def _text(kind: ParamKind, schema: ParameterSchema) -> ControlSpec:
    return ControlSpec(kind=ControlKind.TEXT)


def _select(kind: ParamKind, schema: ParameterSchema) -> ControlSpec:
    return ControlSpec(
        kind=ControlKind.SELECT,
        options=tuple(schema.enum or ()),
        placeholder=SELECT_PLACEHOLDER,
    )


def _numeric(kind: ParamKind, schema: ParameterSchema) -> ControlSpec:
    integer = kind is ParamKind.INTEGER
    if schema.has_bounds:
        return ControlSpec(
            kind=ControlKind.RANGE,
            minimum=schema.minimum,
            maximum=schema.maximum,
            step=range_step(schema.minimum, schema.maximum),
            integer=integer,
        )
    return ControlSpec(
        kind=ControlKind.NUMBER,
        minimum=schema.minimum,
        maximum=schema.maximum,
        integer=integer,
    )


def _toggle(kind: ParamKind, schema: ParameterSchema) -> ControlSpec:
    return ControlSpec(kind=ControlKind.TOGGLE)


def _multi(kind: ParamKind, schema: ParameterSchema) -> ControlSpec:
    return ControlSpec(kind=ControlKind.MULTI_TEXT)


CONTROL_BUILDERS = {
    ParamKind.STRING: _text,
    ParamKind.ENUM: _select,
    ParamKind.NUMBER: _numeric,
    ParamKind.INTEGER: _numeric,
    ParamKind.BOOLEAN: _toggle,
    ParamKind.STRING_ARRAY: _multi,
    ParamKind.ARRAY: _multi,
    ParamKind.UNKNOWN: _text,
}


def control_for(kind: ParamKind, schema: ParameterSchema) -> ControlSpec:
    return CONTROL_BUILDERS[kind](kind, schema)


# ============================================================================
# operator input -> typed value
# ============================================================================


def _parse_number(text: str, integer: bool) -> Any:
    try:
        return int(text)  # exact for large integers
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return text  # validation reports it
    if not math.isfinite(value):
        return text
    if integer and value.is_integer():
        return int(value)
    return value


def coerce(control: ControlSpec, raw: Any) -> Any:
    """Convert operator input for a control into the value stored in the form.

    Non-string input is assumed to be typed already and is returned unchanged.
    Blank text means "unset" and coerces to None. Text that cannot be parsed
    for the control is returned as-is so that validation can report it.
    """
    if not isinstance(raw, str):
        return raw

    text = raw.strip()
    match control.kind:
        case ControlKind.TEXT | ControlKind.SELECT:
            return raw if raw != "" else None
        case ControlKind.RANGE | ControlKind.NUMBER:
            if text == "":
                return None
            return _parse_number(text, control.integer)
        case ControlKind.TOGGLE:
            if text.lower() in _TRUE_WORDS:
                return True
            if text.lower() in _FALSE_WORDS:
                return False
            return None if text == "" else raw
        case ControlKind.MULTI_TEXT:
            return [part.strip() for part in text.split(",") if part.strip()]


# ============================================================================
# typed value -> what the control shows
# ============================================================================


def toggle_label(value: Any) -> str:
    return TOGGLE_ON_LABEL if value else TOGGLE_OFF_LABEL


def slider_position(control: ControlSpec, value: Any) -> Optional[float]:
    """Where the slider thumb sits: the value if numeric, else the minimum."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return control.minimum


def display_value(control: ControlSpec, value: Any) -> str:
    """Render a stored value as text for the control. Never raises."""
    match control.kind:
        case ControlKind.TOGGLE:
            return toggle_label(value)
        case ControlKind.RANGE | ControlKind.NUMBER:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return str(value)
            return ""
        case ControlKind.MULTI_TEXT:
            if isinstance(value, (list, tuple)):
                return ", ".join(str(v) for v in value)
            return "" if value is None else str(value)
        case _:
            if isinstance(value, str):
                return value
            return "" if value is None else str(value)
