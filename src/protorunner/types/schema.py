"""Protocol and parameter schema types.

The catalog service describes each protocol's inputs with a JSON-schema shaped
object:

```
{"properties": {"speed": {"type": "integer", "minimum": 0, "maximum": 200}},
 "required": ["speed"], "title": "...", "type": "object"}
```

Schemas come from outside, so deserialization is forgiving: fragments are
sanitised in `__pre_deserialize__` and anything malformed is dropped (with a
warning) rather than raised. The form layer then falls back to the most
permissive control for that parameter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger
from mashumaro import DataClassDictMixin
from mashumaro.config import BaseConfig

_NUMERIC_KEYS = ("minimum", "maximum")
_EXCLUSIVE_KEYS = ("exclusiveMinimum", "exclusiveMaximum")


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def sanitize_fragment(name: str, raw: Any) -> dict[str, Any]:
    """Return a copy of a parameter schema fragment that deserializes cleanly."""
    if not isinstance(raw, dict):
        logger.warning("Parameter '{}' schema is not an object, ignoring it", name)
        return {"type": "", "has_default": False}

    d = dict(raw)
    d.setdefault("has_default", "default" in raw)

    if not isinstance(d.get("type"), str):
        if "type" in d:
            logger.warning("Parameter '{}' has invalid type {!r}", name, d["type"])
        d["type"] = ""

    for key in ("title", "description"):
        if key in d and not isinstance(d[key], str):
            d[key] = None if d[key] is None else str(d[key])

    if d.get("enum") is not None:
        if isinstance(d["enum"], (list, tuple)):
            d["enum"] = [str(opt) for opt in d["enum"]]
        else:
            logger.warning("Parameter '{}' enum is not a list, ignoring it", name)
            d["enum"] = None

    for key in _NUMERIC_KEYS:
        if key in d and d[key] is not None and not _is_number(d[key]):
            logger.warning("Parameter '{}' {} {!r} is not a number", name, key, d[key])
            d[key] = None

    for key in _EXCLUSIVE_KEYS:
        # numbers (draft 6+) or booleans (draft 4) are both meaningful
        if key in d and d[key] is not None and not (
            _is_number(d[key]) or isinstance(d[key], bool)
        ):
            logger.warning("Parameter '{}' {} {!r} is not usable", name, key, d[key])
            d[key] = None

    if (
        d.get("minimum") is not None
        and d.get("maximum") is not None
        and d["minimum"] > d["maximum"]
    ):
        logger.warning(
            "Parameter '{}' minimum {} > maximum {}, dropping bounds",
            name,
            d["minimum"],
            d["maximum"],
        )
        d["minimum"] = None
        d["maximum"] = None

    if "items" in d:
        items = d["items"]
        if isinstance(items, dict) and isinstance(items.get("type"), str):
            d["items"] = {"type": items["type"]}
        else:
            d["items"] = None
    return d


@dataclass(frozen=True)
class ItemsSchema(DataClassDictMixin):
    type: str = ""


@dataclass(frozen=True, kw_only=True)
class ParameterSchema(DataClassDictMixin):
    """Declarative description of one protocol input."""

    class Config(BaseConfig):
        serialize_by_alias = True

    type: str = ""
    title: Optional[str] = None
    description: Optional[str] = None
    default: Any = None
    has_default: bool = False
    enum: Optional[list[str]] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Any = field(
        default=None, metadata={"alias": "exclusiveMinimum"}
    )
    exclusive_maximum: Any = field(
        default=None, metadata={"alias": "exclusiveMaximum"}
    )
    items: Optional[ItemsSchema] = None

    @classmethod
    def __pre_deserialize__(cls, d: dict[Any, Any]) -> dict[Any, Any]:
        return sanitize_fragment(str(d.get("title") or "?"), d)

    def __post_serialize__(self, d: dict[Any, Any]) -> dict[Any, Any]:
        has_default = d.pop("has_default")
        out = {k: v for k, v in d.items() if v is not None}
        if has_default:
            out["default"] = self.default
        return out

    @property
    def has_bounds(self) -> bool:
        return self.minimum is not None and self.maximum is not None


@dataclass(frozen=True, kw_only=True)
class ParameterSetSchema(DataClassDictMixin):
    """Ordered parameter schemas plus the names that must be supplied."""

    properties: dict[str, ParameterSchema] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    title: str = ""
    description: Optional[str] = None
    type: str = "object"

    @classmethod
    def __pre_deserialize__(cls, d: dict[Any, Any]) -> dict[Any, Any]:
        d = dict(d)
        props = d.get("properties")
        if not isinstance(props, dict):
            if props is not None:
                logger.warning("Schema properties is not an object, ignoring it")
            props = {}
        d["properties"] = {
            str(name): sanitize_fragment(str(name), frag) for name, frag in props.items()
        }
        required = d.get("required")
        if not isinstance(required, (list, tuple)):
            required = []
        d["required"] = [str(name) for name in required]
        if not isinstance(d.get("title"), str):
            d["title"] = ""
        if "description" in d and not isinstance(d["description"], str):
            d["description"] = None
        if not isinstance(d.get("type"), str):
            d["type"] = "object"
        return d

    def is_required(self, name: str) -> bool:
        return name in self.required

    def __iter__(self):
        return iter(self.properties.items())

    def __len__(self):
        return len(self.properties)


@dataclass(frozen=True, kw_only=True)
class Protocol(DataClassDictMixin):
    """A named, parameterised device-control routine from the catalog."""

    id: str
    name: str
    description: str = ""
    tags: tuple[str, ...] = ()
    params_schema: ParameterSetSchema = field(default_factory=ParameterSetSchema)

    @classmethod
    def __pre_deserialize__(cls, d: dict[Any, Any]) -> dict[Any, Any]:
        d = dict(d)
        d["id"] = str(d.get("id", ""))
        d["name"] = str(d.get("name") or d["id"])
        if not isinstance(d.get("description"), str):
            d["description"] = ""
        tags = d.get("tags")
        d["tags"] = [str(t) for t in tags] if isinstance(tags, (list, tuple)) else []
        if not isinstance(d.get("params_schema"), dict):
            d["params_schema"] = {}
        return d
