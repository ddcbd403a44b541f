"""Run state value object and its pure transition function.

```
IDLE --submit--> RUNNING --succeed--> SUCCESS --reset--> IDLE
                    |                    |
                    +----fail---> ERROR -+--submit--> RUNNING
```

There is no terminal state; the machine can be restarted indefinitely.
`transition()` has no side effects, so every rule here is testable without a
controller, a client or an event loop.
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from typing import Optional

from protorunner.types import (
    InvalidTransitionError,
    ProtocolResult,
    RunInProgressError,
)
from protorunner.util.defaults import PROGRESS_CEILING, PROGRESS_DONE, PROGRESS_START

# ----------------
# Available States
# ----------------

RUN_STATE = types.SimpleNamespace()
RUN_STATE.IDLE = "IDLE"
RUN_STATE.RUNNING = "RUNNING"
RUN_STATE.SUCCESS = "SUCCESS"
RUN_STATE.ERROR = "ERROR"

FINISHED_STATES = (RUN_STATE.SUCCESS, RUN_STATE.ERROR)


@dataclass(frozen=True)
class RunState:
    status: str = RUN_STATE.IDLE
    progress: float = 0
    result: Optional[ProtocolResult] = None
    error_message: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.status == RUN_STATE.RUNNING

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATES


IDLE_STATE = RunState()


# ------
# Events
# ------


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class Tick:
    increment: float


@dataclass(frozen=True)
class Succeed:
    result: ProtocolResult


@dataclass(frozen=True)
class Fail:
    message: str


@dataclass(frozen=True)
class Reset:
    pass


RunEvent = Submit | Tick | Succeed | Fail | Reset


def advance_progress(progress: float, increment: float) -> float:
    """Cosmetic progress step: monotone, never above the ceiling."""
    return max(progress, min(PROGRESS_CEILING, progress + max(0.0, increment)))


def transition(state: RunState, event: RunEvent) -> RunState:
    """Apply an event to a run state, returning the new state.

    Raises
    ------
    RunInProgressError
        On submit or reset while a run is in flight
    InvalidTransitionError
        On a result outside RUNNING, or a reset from IDLE
    """
    match event:
        case Submit():
            if state.is_running:
                raise RunInProgressError("A run is already in progress")
            return RunState(status=RUN_STATE.RUNNING, progress=PROGRESS_START)
        case Tick(increment=inc):
            if not state.is_running:
                return state  # late tick, nothing to animate
            return RunState(
                status=RUN_STATE.RUNNING,
                progress=advance_progress(state.progress, inc),
            )
        case Succeed(result=result):
            if not state.is_running:
                raise InvalidTransitionError(f"Result received in state {state.status}")
            return RunState(
                status=RUN_STATE.SUCCESS, progress=PROGRESS_DONE, result=result
            )
        case Fail(message=message):
            if not state.is_running:
                raise InvalidTransitionError(f"Failure received in state {state.status}")
            return RunState(
                status=RUN_STATE.ERROR, progress=PROGRESS_DONE, error_message=message
            )
        case Reset():
            if state.is_running:
                raise RunInProgressError("Cannot reset while a run is in progress")
            if not state.is_finished:
                raise InvalidTransitionError(f"Cannot reset from {state.status}")
            return IDLE_STATE
        case _:
            raise ValueError(f"Invalid run event: {event!r}")
