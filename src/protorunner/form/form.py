"""Form value mapping bound to one protocol."""

from __future__ import annotations

import copy
from typing import Any

from loguru import logger

from protorunner.types import FormValidationError, Protocol

from .controls import coerce, display_value
from .interpreter import FormPlan, interpret, is_empty


class ProtocolForm:
    """Holds the operator's parameter values for one protocol.

    Created from the protocol's schema defaults; discarded when a different
    protocol is selected (build a new form) or restored with `reset()`.

    Parameters
    ----------
    protocol : Protocol
        The protocol whose parameters are being filled in
    """

    def __init__(self, protocol: Protocol):
        self.protocol = protocol
        self.plan: FormPlan = interpret(protocol.params_schema)
        self.values: dict[str, Any] = copy.deepcopy(self.plan.defaults)

    def __repr__(self):
        return f"ProtocolForm(protocol={self.protocol.id!r}, values={self.values!r})"

    def set(self, name: str, value: Any) -> None:
        """Store a typed value for a parameter. None unsets it."""
        if name not in self.plan:
            raise KeyError(f"Protocol {self.protocol.id} has no parameter '{name}'")
        if value is None:
            self.values.pop(name, None)
        else:
            self.values[name] = value

    def set_raw(self, name: str, raw: Any) -> Any:
        """Coerce operator input through the parameter's control, then store it.

        Returns the stored value.
        """
        if name not in self.plan:
            raise KeyError(f"Protocol {self.protocol.id} has no parameter '{name}'")
        value = coerce(self.plan[name].control, raw)
        self.set(name, value)
        logger.trace("Form {}: {} <- {!r}", self.protocol.id, name, value)
        return value

    def clear(self, name: str) -> None:
        self.set(name, None)

    def get(self, name: str) -> Any:
        return self.values.get(name)

    def display(self, name: str) -> str:
        return display_value(self.plan[name].control, self.values.get(name))

    def reset(self) -> None:
        """Restore the schema defaults."""
        self.values = copy.deepcopy(self.plan.defaults)

    def errors(self) -> dict[str, list[str]]:
        return self.plan.validation.validate(self.values)

    def is_valid(self) -> bool:
        return not self.errors()

    def submission(self) -> dict[str, Any]:
        """The values to send to the execution service.

        Raises
        ------
        FormValidationError
            If any field fails validation; nothing is sent in that case.
        """
        errors = self.errors()
        if errors:
            logger.info("Form {} blocked by invalid fields: {}", self.protocol.id, errors)
            raise FormValidationError(errors)
        return {
            name: copy.deepcopy(value)
            for name, value in self.values.items()
            if name in self.plan and not is_empty(value)
        }
