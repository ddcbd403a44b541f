"""Run lifecycle controller.

One controller drives the runs of one protocol for one hosting view. It owns
the `RunState`, the cosmetic progress ticker and the result view, and reports
every change as a notification on an `asyncio.Queue` (the host drains it to
update progress bars and show toasts).

Only one run can be in flight: `submit()` while RUNNING raises
`RunInProgressError`. An issued request is never aborted; `aclose()` only
stops the host from waiting on it.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Optional

from loguru import logger

from protorunner.types import (
    ExecutionServiceProtocol,
    Notification,
    ProtocolResult,
    ProtocolRunnerError,
    RunFailed,
    RunInProgressError,
    RunProgress,
    RunStateUpdate,
    RunSucceeded,
)
from protorunner.util.defaults import (
    NOTIF_QUEUE_MAXSIZE,
    PROGRESS_MAX_INCREMENT,
    PROGRESS_TICK_INTERVAL,
)

from .progress import ProgressTicker
from .results import ResultView
from .state import (
    IDLE_STATE,
    Fail,
    Reset,
    RunEvent,
    RunState,
    Submit,
    Succeed,
    Tick,
    transition,
)

UNKNOWN_ERROR = "Unknown error"


class RunController:
    """Submit parameter sets for one protocol and track the outcome.

    Parameters
    ----------
    service : ExecutionServiceProtocol
        Anything with an async `run_protocol(protocol_id, params, simulate)`
    protocol_id : str
        The protocol to run
    simulate : bool, optional
        Initial simulation flag, by default True
    notif_queue : asyncio.Queue[Notification], optional
        Where notifications are put; the host is expected to drain it. If not
        given, a private queue bounded at NOTIF_QUEUE_MAXSIZE is made. On a
        full bounded queue the oldest notification is dropped.
    tick_interval : float, optional
        Seconds between progress ticks
    max_increment : float, optional
        Largest progress step per tick
    rng : random.Random, optional
        Random source for the progress ticker
    """

    def __init__(
        self,
        service: ExecutionServiceProtocol,
        protocol_id: str,
        *,
        simulate: bool = True,
        notif_queue: Optional[asyncio.Queue[Notification]] = None,
        tick_interval: float = PROGRESS_TICK_INTERVAL,
        max_increment: float = PROGRESS_MAX_INCREMENT,
        rng: Optional[random.Random] = None,
    ):
        self.service = service
        self.protocol_id = protocol_id
        if notif_queue is None:
            notif_queue = asyncio.Queue(maxsize=NOTIF_QUEUE_MAXSIZE)
        self.notif_queue = notif_queue
        self.tick_interval = tick_interval
        self.max_increment = max_increment
        self._rng = rng
        self._simulate = simulate
        self._state: RunState = IDLE_STATE
        self._result_view: Optional[ResultView] = None
        self._ticker: Optional[ProgressTicker] = None
        self._task: Optional[asyncio.Task] = None

    # ----------------------------------------------------------------------------------
    # state access
    # ----------------------------------------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def status(self) -> str:
        return self._state.status

    @property
    def progress(self) -> float:
        return self._state.progress

    @property
    def result_view(self) -> Optional[ResultView]:
        return self._result_view

    @property
    def ticker_active(self) -> bool:
        return self._ticker is not None and self._ticker.active

    @property
    def simulate(self) -> bool:
        return self._simulate

    @simulate.setter
    def simulate(self, value: bool) -> None:
        if self._state.is_running:
            raise RunInProgressError("Cannot change simulation mode while running")
        self._simulate = bool(value)

    # ----------------------------------------------------------------------------------
    # transitions
    # ----------------------------------------------------------------------------------

    def _notify(self, notif: Notification) -> None:
        if self.notif_queue.full():
            dropped = self.notif_queue.get_nowait()
            logger.trace("Notification queue full, dropping {}", dropped)
        self.notif_queue.put_nowait(notif)

    def _apply(self, event: RunEvent) -> RunState:
        old = self._state
        new = transition(old, event)
        self._state = new
        if old.status != new.status:
            logger.info(
                "Run state: {} {} -> {}", self.protocol_id, old.status, new.status
            )
            self._notify(
                RunStateUpdate(
                    protocol_id=self.protocol_id,
                    old_state=old.status,
                    new_state=new.status,
                )
            )
        if new.progress != old.progress:
            self._notify(RunProgress(protocol_id=self.protocol_id, progress=new.progress))
        return new

    def _on_tick(self, increment: float) -> None:
        self._apply(Tick(increment))

    async def submit(self, params: dict[str, Any]) -> RunState:
        """Run the protocol with already-validated parameters.

        Returns the finished state (SUCCESS or ERROR). Execution failures are
        not raised; they land in `state.error_message`.

        Raises
        ------
        RunInProgressError
            If a run is already in flight
        """
        self._apply(Submit())
        self._result_view = None
        simulate = self._simulate
        logger.info(
            "Running protocol {} (simulate={}) with params {}",
            self.protocol_id,
            simulate,
            params,
        )

        self._ticker = ProgressTicker(
            self._on_tick,
            interval=self.tick_interval,
            max_increment=self.max_increment,
            rng=self._rng,
        )
        try:
            async with self._ticker:
                result = await self.service.run_protocol(
                    self.protocol_id, params, simulate
                )
        except ProtocolRunnerError as e:
            return self._fail(str(e) or UNKNOWN_ERROR)
        except asyncio.CancelledError:
            logger.warning("Stopped waiting on run of {}", self.protocol_id)
            raise
        except Exception:
            logger.exception("Unexpected error running protocol {}", self.protocol_id)
            return self._fail(UNKNOWN_ERROR)
        finally:
            self._ticker = None

        if not isinstance(result, ProtocolResult):
            logger.error("Execution service returned {!r}", result)
            return self._fail("Malformed result from execution service")
        return self._succeed(result)

    def _succeed(self, result: ProtocolResult) -> RunState:
        state = self._apply(Succeed(result))
        self._result_view = ResultView(result)
        self._notify(
            RunSucceeded(
                protocol_id=self.protocol_id, command_count=result.command_count
            )
        )
        return state

    def _fail(self, message: str) -> RunState:
        logger.error("Protocol {} failed: {}", self.protocol_id, message)
        state = self._apply(Fail(message))
        self._notify(RunFailed(protocol_id=self.protocol_id, message=message))
        return state

    def start(self, params: dict[str, Any]) -> asyncio.Task:
        """Submit in a background task (for hosts that must keep drawing)."""
        if self._state.is_running or (self._task is not None and not self._task.done()):
            raise RunInProgressError("A run is already in progress")
        self._task = asyncio.create_task(self.submit(params))
        return self._task

    def reset(self) -> RunState:
        """Back to IDLE from SUCCESS or ERROR, dropping the result view."""
        state = self._apply(Reset())
        self._result_view = None
        return state

    # ----------------------------------------------------------------------------------
    # teardown
    # ----------------------------------------------------------------------------------

    async def aclose(self) -> None:
        """Stop waiting on a background run and release the ticker."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        if self._ticker is not None:
            await self._ticker.stop()

    async def __aenter__(self) -> RunController:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
