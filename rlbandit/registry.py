"""Registry of known experiments and the module that owns each one."""

from __future__ import annotations

import time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rlbandit.models.experiment import ExperimentRegistration
from rlbandit.schemas import Experiment
from rlbandit.storage.base import Clock
from rlbandit.storage.sql import upsert


class ExperimentRegistry:
    """Experiment registrations in ``rl_experiment_registry``.

    Parameters
    ----------
    db : AsyncSession
        Session to run statements on; the caller commits.
    clock : Callable[[], float]
        Source of the registration timestamp.
    """

    def __init__(self, db: AsyncSession, clock: Clock = time.time) -> None:
        self.db = db
        self.clock = clock

    async def register(
        self, experiment_id: str, module: str, experiment_name: str | None = None
    ) -> None:
        """Register or re-register an experiment.

        Re-registering updates the owner and timestamp.  The stored name is
        only replaced when a new one is given.
        """
        now = int(self.clock())
        values = {"experiment_id": experiment_id, "module": module, "registered_at": now}
        set_ = {"module": module, "registered_at": now}
        if experiment_name is not None:
            values["experiment_name"] = experiment_name
            set_["experiment_name"] = experiment_name

        stmt = upsert(self.db, ExperimentRegistration, values, ["experiment_id"], set_)
        await self.db.execute(stmt)

    async def get(self, experiment_id: str) -> Experiment | None:
        result = await self.db.execute(
            select(ExperimentRegistration)
            .where(ExperimentRegistration.experiment_id == experiment_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return Experiment.model_validate(row) if row is not None else None

    async def is_registered(self, experiment_id: str) -> bool:
        return await self.get(experiment_id) is not None

    async def get_owner(self, experiment_id: str) -> str | None:
        experiment = await self.get(experiment_id)
        return experiment.module if experiment is not None else None

    async def get_experiment_name(self, experiment_id: str) -> str | None:
        experiment = await self.get(experiment_id)
        return experiment.experiment_name if experiment is not None else None

    async def get_all(self) -> dict[str, str]:
        """Map of experiment id to owning module, newest registration first."""
        result = await self.db.execute(
            select(ExperimentRegistration.experiment_id, ExperimentRegistration.module).order_by(
                ExperimentRegistration.registered_at.desc(),
                ExperimentRegistration.experiment_id,
            )
        )
        return {row.experiment_id: row.module for row in result.all()}

    async def list_experiments(self) -> list[Experiment]:
        result = await self.db.execute(
            select(ExperimentRegistration)
            .order_by(
                ExperimentRegistration.registered_at.desc(),
                ExperimentRegistration.experiment_id,
            )
            .execution_options(populate_existing=True)
        )
        return [Experiment.model_validate(row) for row in result.scalars().all()]
