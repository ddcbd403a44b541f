"""
Run lifecycle: state machine, progress ticker, controller and result view.

See Also
--------
protorunner.run.state : pure `transition(state, event)` rules
protorunner.run.controller : `RunController`
protorunner.run.results : `ResultView`
"""

from .controller import UNKNOWN_ERROR, RunController
from .progress import ProgressTicker
from .results import CommandRow, ResultView
from .state import (
    FINISHED_STATES,
    IDLE_STATE,
    RUN_STATE,
    Fail,
    Reset,
    RunState,
    Submit,
    Succeed,
    Tick,
    advance_progress,
    transition,
)

__all__ = [
    "RUN_STATE",
    "FINISHED_STATES",
    "IDLE_STATE",
    "RunState",
    "Submit",
    "Tick",
    "Succeed",
    "Fail",
    "Reset",
    "transition",
    "advance_progress",
    "ProgressTicker",
    "RunController",
    "UNKNOWN_ERROR",
    "CommandRow",
    "ResultView",
]
