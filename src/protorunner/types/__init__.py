"""
Data types shared across protorunner.

- `schema`: protocols and their parameter schemas, as served by the catalog
- `messages`: run requests, run results and controller notifications

All types are mashumaro dataclasses, so payloads from the services are loaded
with `Protocol.from_dict(...)` / `ProtocolResult.from_dict(...)` and requests
are serialised with `.to_dict()`.

Exceptions
----------
Every error raised on purpose by protorunner derives from `ProtocolRunnerError`,
so hosts can catch that one type and show its message.
"""

from __future__ import annotations

from .messages import (
    COMMAND_SUCCESS,
    Notification,
    ProtocolCommandResult,
    ProtocolResult,
    RunFailed,
    RunProgress,
    RunRequest,
    RunStateUpdate,
    RunSucceeded,
)
from .protocols import CatalogServiceProtocol, ExecutionServiceProtocol
from .schema import ItemsSchema, ParameterSchema, ParameterSetSchema, Protocol


# Exceptions
class ProtocolRunnerError(Exception):
    """Base exception for protorunner errors."""

    pass


class CommsError(ProtocolRunnerError):
    """Raised when a service cannot be reached or the transport fails."""

    pass


class ProtocolNotFoundError(ProtocolRunnerError):
    """Raised when the catalog has no protocol with the requested id."""

    def __init__(self, protocol_id: str):
        super().__init__(f"Protocol '{protocol_id}' not found")
        self.protocol_id = protocol_id


class ExecutionError(ProtocolRunnerError):
    """Raised when the execution service rejects a run or answers garbage.

    Contains the HTTP status code when the service answered at all.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FormValidationError(ProtocolRunnerError):
    """Raised when form values are submitted while fields are invalid."""

    def __init__(self, errors: dict[str, list[str]]):
        lines = [f"{name}: {'; '.join(msgs)}" for name, msgs in errors.items()]
        super().__init__("Invalid parameters:\n" + "\n".join(lines))
        self.errors = errors


class RunInProgressError(ProtocolRunnerError):
    """Raised when an action needs the controller to be idle or finished."""

    pass


class InvalidTransitionError(ProtocolRunnerError):
    """Raised when an event is not allowed in the current run state."""

    pass


__all__ = [
    "COMMAND_SUCCESS",
    "ItemsSchema",
    "ParameterSchema",
    "ParameterSetSchema",
    "Protocol",
    "RunRequest",
    "ProtocolCommandResult",
    "ProtocolResult",
    "Notification",
    "RunStateUpdate",
    "RunProgress",
    "RunSucceeded",
    "RunFailed",
    "CatalogServiceProtocol",
    "ExecutionServiceProtocol",
    "ProtocolRunnerError",
    "CommsError",
    "ProtocolNotFoundError",
    "ExecutionError",
    "FormValidationError",
    "RunInProgressError",
    "InvalidTransitionError",
]
