"""Closed enumerations for parameter kinds and control kinds.

Every parameter schema is classified exactly once into a `ParamKind`; the
validation, default and control decisions are then plain lookups on that tag
instead of type checks scattered through the form code.
"""

from __future__ import annotations

from enum import Enum

from loguru import logger

from protorunner.types import ParameterSchema


class ParamKind(Enum):
    STRING = "string"
    ENUM = "enum"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING_ARRAY = "string_array"
    ARRAY = "array"
    UNKNOWN = "unknown"


class ControlKind(Enum):
    TEXT = "text"
    SELECT = "select"
    RANGE = "range"  # slider + numeric echo
    NUMBER = "number"
    TOGGLE = "toggle"
    MULTI_TEXT = "multi_text"


def classify(schema: ParameterSchema) -> ParamKind:
    """Assign the parameter kind for a schema fragment. Never raises."""
    match schema.type:
        case "string":
            if schema.enum:
                return ParamKind.ENUM
            if schema.enum is not None:
                logger.warning("Empty enum on string parameter, using free text")
            return ParamKind.STRING
        case "number":
            return ParamKind.NUMBER
        case "integer":
            return ParamKind.INTEGER
        case "boolean":
            return ParamKind.BOOLEAN
        case "array":
            if schema.items is not None and schema.items.type == "string":
                return ParamKind.STRING_ARRAY
            return ParamKind.ARRAY
        case _:
            return ParamKind.UNKNOWN
