"""SQLAlchemy-backed arm statistics store.

Every increment is a single ``INSERT ... ON CONFLICT DO UPDATE`` that adds
to the stored counter, so concurrent writers cannot lose updates.  The
store runs on a caller-owned ``AsyncSession``; the caller commits.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from rlbandit.models.arm import ArmData
from rlbandit.models.experiment import ExperimentTotals as ExperimentTotalsRow
from rlbandit.schemas import ArmStats, ExperimentTotals
from rlbandit.storage.base import ArmStatsStore, Clock, window_cutoff

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert(db: AsyncSession, model: Any, values: dict[str, Any], keys: list[str], set_: dict[str, Any]):
    """Build an insert-or-update statement for the session's dialect."""
    dialect = db.get_bind().dialect.name
    insert = _DIALECT_INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Atomic upsert is not supported on dialect {dialect!r}")
    return insert(model).values(**values).on_conflict_do_update(index_elements=keys, set_=set_)


class SqlArmStatsStore(ArmStatsStore):
    """Store backed by the ``rl_arm_data`` and ``rl_experiment_totals`` tables.

    Parameters
    ----------
    db : AsyncSession
        Session to run statements on.
    clock : Callable[[], float]
        Source of "now" in unix seconds.
    """

    def __init__(self, db: AsyncSession, clock: Clock = time.time) -> None:
        super().__init__(clock)
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_arm_stats(
        self, experiment_id: str, time_window_seconds: int | None = None
    ) -> list[ArmStats]:
        query = select(ArmData).where(ArmData.experiment_id == experiment_id)
        cutoff = window_cutoff(self.now(), time_window_seconds)
        if cutoff is not None:
            query = query.where(ArmData.updated >= cutoff)
        query = query.order_by(ArmData.created, ArmData.arm_id).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return [ArmStats.model_validate(row) for row in result.scalars().all()]

    async def get_arm(self, experiment_id: str, arm_id: str) -> ArmStats | None:
        result = await self.db.execute(
            select(ArmData).where(
                ArmData.experiment_id == experiment_id,
                ArmData.arm_id == arm_id,
            ).execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return ArmStats.model_validate(row) if row is not None else None

    async def get_totals(self, experiment_id: str) -> ExperimentTotals | None:
        result = await self.db.execute(
            select(ExperimentTotalsRow).where(ExperimentTotalsRow.experiment_id == experiment_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return ExperimentTotals.model_validate(row) if row is not None else None

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
        for arm_id in arm_ids:
            await self._bump_arm(experiment_id, arm_id, now, turns=1)
        await self._bump_totals(experiment_id, now, turns=len(arm_ids))
        logger.debug("Recorded %d turn(s) for experiment %s", len(arm_ids), experiment_id)

    async def increment_reward(self, experiment_id: str, arm_id: str) -> None:
        now = self.now()
        await self._bump_arm(experiment_id, arm_id, now, rewards=1)
        await self._bump_totals(experiment_id, now, turns=0)
        logger.debug("Recorded reward for %s/%s", experiment_id, arm_id)

    async def _bump_arm(
        self, experiment_id: str, arm_id: str, now: int, turns: int = 0, rewards: int = 0
    ) -> None:
        stmt = upsert(
            self.db,
            ArmData,
            values={
                "experiment_id": experiment_id,
                "arm_id": arm_id,
                "turns": turns,
                "rewards": rewards,
                "created": now,
                "updated": now,
            },
            keys=["experiment_id", "arm_id"],
            set_={
                "turns": ArmData.turns + turns,
                "rewards": ArmData.rewards + rewards,
                "updated": now,
            },
        )
        await self.db.execute(stmt)

    async def _bump_totals(self, experiment_id: str, now: int, turns: int) -> None:
        stmt = upsert(
            self.db,
            ExperimentTotalsRow,
            values={
                "experiment_id": experiment_id,
                "total_turns": turns,
                "created": now,
                "updated": now,
            },
            keys=["experiment_id"],
            set_={
                "total_turns": ExperimentTotalsRow.total_turns + turns,
                "updated": now,
            },
        )
        await self.db.execute(stmt)
