"""Value objects exchanged between the scoring core and its collaborators.

``ArmStats`` is the record shape the stores return and the scorers consume.
It can be built straight from ORM rows (``from_attributes``).  Counter checks
(non-negative, ``rewards <= turns``) happen in the scorer, so a store hands
back whatever it holds and the scoring call fails loudly on bad rows.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel


class Policy(str, enum.Enum):
    """Scoring policy used by ``BanditScorer``."""

    THOMPSON = "thompson"
    UCB1 = "ucb1"


class ArmStats(BaseModel):
    arm_id: str
    turns: int = 0
    rewards: int = 0
    created: int = 0
    updated: int = 0

    model_config = {"from_attributes": True, "frozen": True}


class ExperimentTotals(BaseModel):
    experiment_id: str
    total_turns: int = 0
    created: int = 0
    updated: int = 0

    model_config = {"from_attributes": True, "frozen": True}


class Experiment(BaseModel):
    experiment_id: str
    module: str
    experiment_name: str | None = None
    registered_at: int = 0

    model_config = {"from_attributes": True, "frozen": True}
