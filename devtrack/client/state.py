"""Dashboard UI state as an explicit finite-state machine.

Modes:

- ``idle``: nothing in progress
- ``editing``: a task form is open (``editing_task_id`` is ``None`` for a new task)
- ``timing``: a timer runs for ``active_timer``

Timer time is wall-clock based so it survives across CLI invocations;
stopping returns the elapsed seconds to merge into the task's ``timeSpent``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from devtrack.constants import TASK_STATUSES

FILTERS = ("all", *TASK_STATUSES)


class Mode(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    TIMING = "timing"


class InvalidTransition(Exception):
    pass


@dataclass(frozen=True)
class StoppedTimer:
    task_id: str
    elapsed: int


class TrackerState:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self.mode = Mode.IDLE
        self.active_timer: str | None = None
        self.started_at: float | None = None
        self.editing_task_id: str | None = None
        self.filter = "all"

    # ---- filter ----

    def set_filter(self, value: str) -> None:
        if value not in FILTERS:
            raise ValueError(f"Unknown filter '{value}', expected one of {', '.join(FILTERS)}")
        self.filter = value

    def filter_tasks(self, tasks: list[dict]) -> list[dict]:
        if self.filter == "all":
            return list(tasks)
        return [t for t in tasks if t.get("status") == self.filter]

    # ---- editing ----

    def start_editing(self, task_id: str | None = None) -> None:
        if self.mode is not Mode.IDLE:
            raise InvalidTransition(f"cannot edit while {self.mode.value}")
        self.mode = Mode.EDITING
        self.editing_task_id = task_id

    def finish_editing(self) -> None:
        if self.mode is not Mode.EDITING:
            raise InvalidTransition("no edit in progress")
        self.mode = Mode.IDLE
        self.editing_task_id = None

    # ---- timer ----

    def elapsed(self) -> int:
        if self.mode is not Mode.TIMING or self.started_at is None:
            return 0
        return max(int(self._clock() - self.started_at), 0)

    def start_timer(self, task_id: str) -> StoppedTimer | None:
        """Start timing ``task_id``; a timer already running on another task is stopped and returned."""
        if self.mode is Mode.EDITING:
            raise InvalidTransition("finish editing before starting a timer")
        if self.active_timer == task_id:
            raise InvalidTransition(f"timer already running for {task_id}")

        previous = self.stop_timer() if self.mode is Mode.TIMING else None
        self.mode = Mode.TIMING
        self.active_timer = task_id
        self.started_at = self._clock()
        return previous

    def stop_timer(self) -> StoppedTimer:
        if self.mode is not Mode.TIMING:
            raise InvalidTransition("no timer running")
        stopped = StoppedTimer(self.active_timer, self.elapsed())
        self._reset_timer()
        return stopped

    def toggle_timer(self, task_id: str) -> StoppedTimer | None:
        """Dashboard play/pause button: stop when ``task_id`` is timed, start otherwise."""
        if self.active_timer == task_id:
            return self.stop_timer()
        return self.start_timer(task_id)

    def forget_task(self, task_id: str) -> None:
        """Drop any state tied to a deleted task; its running time is discarded."""
        if self.active_timer == task_id:
            self._reset_timer()
        if self.editing_task_id == task_id:
            self.mode = Mode.IDLE
            self.editing_task_id = None

    def _reset_timer(self) -> None:
        self.mode = Mode.IDLE
        self.active_timer = None
        self.started_at = None

    # ---- persistence ----

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "activeTimer": self.active_timer,
            "startedAt": self.started_at,
            "editingTaskId": self.editing_task_id,
            "filter": self.filter,
        }

    @classmethod
    def from_dict(cls, data: dict | None, clock: Callable[[], float] = time.time) -> TrackerState:
        state = cls(clock=clock)
        if not data:
            return state
        try:
            state.mode = Mode(data.get("mode", "idle"))
        except ValueError:
            state.mode = Mode.IDLE
        state.active_timer = data.get("activeTimer")
        state.started_at = data.get("startedAt")
        state.editing_task_id = data.get("editingTaskId")
        if data.get("filter") in FILTERS:
            state.filter = data["filter"]
        # A timing mode without a timer is not recoverable
        if state.mode is Mode.TIMING and (state.active_timer is None or state.started_at is None):
            state._reset_timer()
        return state


def merged_time_spent(task: dict, stopped: StoppedTimer) -> int:
    """New ``timeSpent`` for ``task`` once ``stopped`` is folded in."""
    return max(int(task.get("timeSpent") or 0), 0) + stopped.elapsed
