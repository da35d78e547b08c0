"""In-process store for tests, simulations and single-process deployments."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable

from rlbandit.schemas import ArmStats, ExperimentTotals
from rlbandit.storage.base import ArmStatsStore, Clock, window_cutoff

logger = logging.getLogger(__name__)


class InMemoryArmStatsStore(ArmStatsStore):
    """Dict-backed store; a single lock makes every increment atomic."""

    def __init__(self, clock: Clock = time.time) -> None:
        super().__init__(clock)
        self._lock = threading.Lock()
        self._arms: dict[str, dict[str, ArmStats]] = {}
        self._totals: dict[str, ExperimentTotals] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_arm_stats(
        self, experiment_id: str, time_window_seconds: int | None = None
    ) -> list[ArmStats]:
        cutoff = window_cutoff(self.now(), time_window_seconds)
        with self._lock:
            arms = list(self._arms.get(experiment_id, {}).values())
        if cutoff is None:
            return arms
        return [arm for arm in arms if arm.updated >= cutoff]

    async def get_arm(self, experiment_id: str, arm_id: str) -> ArmStats | None:
        with self._lock:
            return self._arms.get(experiment_id, {}).get(arm_id)

    async def get_totals(self, experiment_id: str) -> ExperimentTotals | None:
        with self._lock:
            return self._totals.get(experiment_id)

    # ------------------------------------------------------------------
    # Increments
    # ------------------------------------------------------------------

    async def increment_turn(self, experiment_id: str, arm_id: str) -> None:
        await self.increment_turns(experiment_id, [arm_id])

    async def increment_turns(self, experiment_id: str, arm_ids: Iterable[str]) -> None:
        arm_ids = list(arm_ids)
        if not arm_ids:
            return
        now = self.now()
        with self._lock:
            for arm_id in arm_ids:
                self._bump_arm(experiment_id, arm_id, now, turns=1)
            self._bump_totals(experiment_id, now, turns=len(arm_ids))
        logger.debug("Recorded %d turn(s) for experiment %s", len(arm_ids), experiment_id)

    async def increment_reward(self, experiment_id: str, arm_id: str) -> None:
        now = self.now()
        with self._lock:
            self._bump_arm(experiment_id, arm_id, now, rewards=1)
            self._bump_totals(experiment_id, now, turns=0)
        logger.debug("Recorded reward for %s/%s", experiment_id, arm_id)

    # Callers hold self._lock

    def _bump_arm(
        self, experiment_id: str, arm_id: str, now: int, turns: int = 0, rewards: int = 0
    ) -> None:
        arms = self._arms.setdefault(experiment_id, {})
        current = arms.get(arm_id)
        if current is None:
            arms[arm_id] = ArmStats(
                arm_id=arm_id, turns=turns, rewards=rewards, created=now, updated=now
            )
        else:
            arms[arm_id] = current.model_copy(
                update={
                    "turns": current.turns + turns,
                    "rewards": current.rewards + rewards,
                    "updated": now,
                }
            )

    def _bump_totals(self, experiment_id: str, now: int, turns: int) -> None:
        current = self._totals.get(experiment_id)
        if current is None:
            self._totals[experiment_id] = ExperimentTotals(
                experiment_id=experiment_id, total_turns=turns, created=now, updated=now
            )
        else:
            self._totals[experiment_id] = current.model_copy(
                update={"total_turns": current.total_turns + turns, "updated": now}
            )
