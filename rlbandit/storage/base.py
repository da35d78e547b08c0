"""Arm-statistics store contract.

The scoring core reads counters through this interface and the serving
layer records events through it.  Implementations must make every
increment atomic: concurrent writers may never lose a turn or a reward,
and ``total_turns`` must move together with the per-arm turns.
"""

from __future__ import annotations

import abc
import time
from collections.abc import Iterable
from typing import Callable

from rlbandit.schemas import ArmStats, ExperimentTotals

Clock = Callable[[], float]


def window_cutoff(now: int, time_window_seconds: int | None) -> int | None:
    """Oldest ``updated`` timestamp inside the window, or ``None`` for no filter."""
    if time_window_seconds and time_window_seconds > 0:
        return now - time_window_seconds
    return None


class ArmStatsStore(abc.ABC):
    """Counters for experiments and their arms.

    Parameters
    ----------
    clock : Callable[[], float]
        Source of "now" in unix seconds; ``time.time`` by default.
    """

    def __init__(self, clock: Clock = time.time) -> None:
        self.clock = clock

    def now(self) -> int:
        return int(self.clock())

    @abc.abstractmethod
    async def get_arm_stats(
        self, experiment_id: str, time_window_seconds: int | None = None
    ) -> list[ArmStats]:
        """All arms of an experiment, optionally only those updated within the window."""

    @abc.abstractmethod
    async def get_arm(self, experiment_id: str, arm_id: str) -> ArmStats | None:
        ...

    @abc.abstractmethod
    async def get_totals(self, experiment_id: str) -> ExperimentTotals | None:
        ...

    async def get_total_turns(self, experiment_id: str) -> int:
        totals = await self.get_totals(experiment_id)
        return totals.total_turns if totals is not None else 0

    @abc.abstractmethod
    async def increment_turn(self, experiment_id: str, arm_id: str) -> None:
        """Add one turn to the arm and to the experiment total."""

    @abc.abstractmethod
    async def increment_turns(self, experiment_id: str, arm_ids: Iterable[str]) -> None:
        """Add one turn to each arm and ``len(arm_ids)`` to the experiment total."""

    @abc.abstractmethod
    async def increment_reward(self, experiment_id: str, arm_id: str) -> None:
        """Add one reward to the arm and touch the experiment's ``updated``."""
