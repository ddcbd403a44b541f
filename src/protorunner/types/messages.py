"""Run request, run result and notification types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mashumaro import DataClassDictMixin
from mashumaro.config import BaseConfig
from mashumaro.types import Discriminator

COMMAND_SUCCESS = "SUCCESS"


@dataclass(kw_only=True)
class RunRequest(DataClassDictMixin):
    """Body of `POST /protocols/{id}/run`."""

    params: dict[str, Any] = field(default_factory=dict)
    simulate: bool = False


@dataclass(frozen=True, kw_only=True)
class ProtocolCommandResult(DataClassDictMixin):
    """Outcome of one atomic step within a protocol run."""

    status: str = "UNKNOWN"
    errors: tuple[str, ...] = ()
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def __pre_deserialize__(cls, d: dict[Any, Any]) -> dict[Any, Any]:
        d = dict(d)
        d["status"] = str(d["status"]) if d.get("status") is not None else "UNKNOWN"
        errors = d.get("errors")
        if isinstance(errors, (list, tuple)):
            d["errors"] = [str(e) for e in errors]
        elif errors:  # a lone error string
            d["errors"] = [str(errors)]
        else:
            d["errors"] = []
        if not isinstance(d.get("data"), dict):
            d["data"] = {}
        return d

    @property
    def succeeded(self) -> bool:
        return self.status == COMMAND_SUCCESS


@dataclass(frozen=True, kw_only=True)
class ProtocolResult(DataClassDictMixin):
    """Structured result returned by the execution service."""

    status: str = "UNKNOWN"
    command_count: int = 0
    results: tuple[ProtocolCommandResult, ...] = ()

    @classmethod
    def __pre_deserialize__(cls, d: dict[Any, Any]) -> dict[Any, Any]:
        d = dict(d)
        d["status"] = str(d["status"]) if d.get("status") is not None else "UNKNOWN"
        results = d.get("results")
        if not isinstance(results, (list, tuple)):
            results = []
        d["results"] = [
            ProtocolCommandResult.__pre_deserialize__(r if isinstance(r, dict) else {})
            for r in results
        ]
        count = d.get("command_count")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            count = len(results)
        d["command_count"] = count
        return d

    @property
    def count_mismatch(self) -> bool:
        return len(self.results) != self.command_count


# ============================================================================
# Notifications (controller -> operator surface)
# ============================================================================


@dataclass(kw_only=True, repr=False)
class Notification(DataClassDictMixin):
    type: str
    protocol_id: str

    class Config(BaseConfig):
        discriminator = Discriminator(field="type", include_subtypes=True)

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"{self.__class__.__name__}({fields})"


@dataclass(kw_only=True, repr=False)
class RunStateUpdate(Notification):
    type: str = "run_state_update"
    old_state: str
    new_state: str


@dataclass(kw_only=True, repr=False)
class RunProgress(Notification):
    type: str = "run_progress"
    progress: float


@dataclass(kw_only=True, repr=False)
class RunSucceeded(Notification):
    """User-visible 'toast' for a completed run."""

    type: str = "run_succeeded"
    command_count: int
    title: str = "Protocol completed"
    description: str = "The protocol was executed successfully"


@dataclass(kw_only=True, repr=False)
class RunFailed(Notification):
    """User-visible 'toast' for a failed run."""

    type: str = "run_failed"
    message: str
    title: str = "Protocol failed"

    @property
    def description(self) -> str:
        return self.message
