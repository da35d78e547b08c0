"""Report data for experiment dashboards.

Builds plain data (pydantic models) only; rendering is the caller's job.
Numbers are deterministic: UCB1 scores are computed without jitter and the
Monte Carlo probability-of-best uses a fixed seed.
"""

from __future__ import annotations

from pydantic import BaseModel

from rlbandit.core.exceptions import ExperimentNotFoundError
from rlbandit.registry import ExperimentRegistry
from rlbandit.stats.bandits import UCB1Scorer
from rlbandit.stats.posterior import BetaPosterior
from rlbandit.storage.base import ArmStatsStore


class ArmReport(BaseModel):
    arm_id: str
    turns: int
    rewards: int
    success_rate: float
    ucb1_score: float
    posterior_mean: float
    credible_interval: tuple[float, float]
    probability_best: float
    created: int
    updated: int


class ExperimentReport(BaseModel):
    experiment_id: str
    experiment_name: str | None = None
    total_turns: int
    total_arms: int
    created: int
    updated: int
    arms: list[ArmReport]


class ExperimentOverview(BaseModel):
    experiment_id: str
    experiment_name: str | None = None
    module: str
    total_turns: int
    total_arms: int
    last_activity: int


async def experiment_overview(
    store: ArmStatsStore, registry: ExperimentRegistry
) -> list[ExperimentOverview]:
    """One row per registered experiment, newest registration first.

    ``last_activity`` is the totals' ``updated`` timestamp, or the
    registration time for experiments that have seen no traffic.
    """
    rows: list[ExperimentOverview] = []
    for experiment in await registry.list_experiments():
        totals = await store.get_totals(experiment.experiment_id)
        arms = await store.get_arm_stats(experiment.experiment_id)
        rows.append(
            ExperimentOverview(
                experiment_id=experiment.experiment_id,
                experiment_name=experiment.experiment_name,
                module=experiment.module,
                total_turns=totals.total_turns if totals is not None else 0,
                total_arms=len(arms),
                last_activity=(totals.updated if totals is not None and totals.updated else experiment.registered_at),
            )
        )
    return rows


async def experiment_detail(
    store: ArmStatsStore,
    experiment_id: str,
    registry: ExperimentRegistry | None = None,
    ucb1_alpha: float = 2.0,
    credible_width: float = 0.95,
    n_samples: int = 50_000,
    seed: int = 42,
) -> ExperimentReport:
    """Per-arm statistics for one experiment, most recently updated arm first.

    Raises
    ------
    ExperimentNotFoundError
        If the experiment has no totals row (it never recorded an event).
    InvalidArmStatsError
        If a stored arm has invalid counters.
    """
    totals = await store.get_totals(experiment_id)
    if totals is None:
        raise ExperimentNotFoundError(experiment_id)

    arms = sorted(
        await store.get_arm_stats(experiment_id),
        key=lambda arm: (-arm.updated, arm.arm_id),
    )
    ucb1 = UCB1Scorer(alpha=ucb1_alpha, jitter=False)
    posteriors = [BetaPosterior.from_counts(arm.turns, arm.rewards, arm.arm_id) for arm in arms]
    prob_best = BetaPosterior.probability_best(posteriors, n_samples=n_samples, seed=seed)

    arm_reports = [
        ArmReport(
            arm_id=arm.arm_id,
            turns=arm.turns,
            rewards=arm.rewards,
            success_rate=arm.rewards / arm.turns if arm.turns > 0 else 0.0,
            ucb1_score=ucb1.score(arm.turns, arm.rewards, totals.total_turns, arm.arm_id),
            posterior_mean=posterior.posterior_mean(),
            credible_interval=posterior.credible_interval(credible_width),
            probability_best=p_best,
            created=arm.created,
            updated=arm.updated,
        )
        for arm, posterior, p_best in zip(arms, posteriors, prob_best)
    ]

    name = await registry.get_experiment_name(experiment_id) if registry is not None else None
    return ExperimentReport(
        experiment_id=experiment_id,
        experiment_name=name,
        total_turns=totals.total_turns,
        total_arms=len(arms),
        created=totals.created,
        updated=totals.updated,
        arms=arm_reports,
    )
