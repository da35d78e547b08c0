"""Multi-armed bandit scoring: Thompson Sampling and UCB1.

Both policies turn a mapping of ``arm_id -> ArmStats`` into a score per arm
(a ScoreSet); the caller serves the arm with the highest score.

Thompson Sampling draws each score from the arm's Beta(rewards + 1,
failures + 1) posterior, so repeated calls on the same data give different
scores and under-explored arms keep winning now and then.  UCB1 is the
deterministic alternative: mean reward plus an exploration bonus that
shrinks with the arm's trial count, with a sub-1e-6 jitter to break ties.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

import numpy as np

from rlbandit.core.exceptions import InvalidArmStatsError
from rlbandit.schemas import ArmStats, Policy
from rlbandit.stats.distributions import BetaSampler
from rlbandit.stats.random import RandomSource, default_source

UCB1_JITTER = 1e-6


def validate_arm(arm_id: str, turns: int, rewards: int) -> None:
    """Reject counters that have no valid posterior.

    Raises
    ------
    InvalidArmStatsError
        If either count is negative or ``rewards`` exceeds ``turns``.
    """
    if turns < 0:
        raise InvalidArmStatsError(arm_id, turns, rewards, "turns must be non-negative")
    if rewards < 0:
        raise InvalidArmStatsError(arm_id, turns, rewards, "rewards must be non-negative")
    if rewards > turns:
        raise InvalidArmStatsError(arm_id, turns, rewards, "rewards cannot exceed turns")


def select_best(scores: Mapping[str, float]) -> str | None:
    """Return the arm id with the highest score, or ``None`` for an empty set.

    Ties go to the first maximal arm in iteration order.
    """
    if not scores:
        return None
    return max(scores, key=scores.__getitem__)


class ThompsonScorer:
    """Beta-Bernoulli Thompson Sampling with a uniform Beta(1, 1) prior.

    Parameters
    ----------
    source : RandomSource | None
        Randomness for the Beta draws.  Defaults to the shared CSPRNG source.
    """

    def __init__(self, source: RandomSource | None = None) -> None:
        self.sampler = BetaSampler(source)

    def score(self, turns: int, rewards: int, arm_id: str = "") -> float:
        """Draw one score from Beta(rewards + 1, turns - rewards + 1).

        An arm with no history draws from Beta(1, 1), i.e. Uniform(0, 1).
        """
        validate_arm(arm_id, turns, rewards)
        return self.sampler.sample(rewards + 1, (turns - rewards) + 1)

    def score_arms(self, arms: Mapping[str, ArmStats]) -> dict[str, float]:
        """Score every arm with an independent posterior draw.

        All arms are validated before any draw is taken.
        """
        for arm_id, arm in arms.items():
            validate_arm(arm_id, arm.turns, arm.rewards)
        return {arm_id: self.score(arm.turns, arm.rewards, arm_id) for arm_id, arm in arms.items()}


class UCB1Scorer:
    """UCB1 upper-confidence-bound scorer.

    Parameters
    ----------
    alpha : float
        Exploration constant; 2.0 gives the textbook UCB1 bonus.
    source : RandomSource | None
        Randomness for the tie-breaking jitter.
    jitter : bool
        Add a uniform ``[0, 1e-6)`` term to each score.  Reports turn this
        off to get fully reproducible numbers.
    """

    def __init__(
        self,
        alpha: float = 2.0,
        source: RandomSource | None = None,
        jitter: bool = True,
    ) -> None:
        if not math.isfinite(alpha) or alpha < 0:
            raise ValueError("alpha must be a non-negative finite number")
        self.alpha = alpha
        self.source = source or default_source()
        self.jitter = jitter

    def score(self, turns: int, rewards: int, total_turns: int, arm_id: str = "") -> float:
        """UCB1 score for one arm.

        ``exploitation + exploration`` where exploitation is the mean reward
        and exploration is ``sqrt(alpha * ln(total_turns) / turns)``.  Both
        ``turns`` and ``total_turns`` are clamped to at least 1.
        """
        validate_arm(arm_id, turns, rewards)
        arm_turns = max(1, turns)
        total_turns = max(1, total_turns)

        exploitation = rewards / arm_turns
        exploration = math.sqrt(self.alpha * math.log(total_turns) / arm_turns)
        noise = self.source.uniform() * UCB1_JITTER if self.jitter else 0.0
        return exploitation + exploration + noise

    def score_arms(
        self, arms: Mapping[str, ArmStats], total_turns: int | None = None
    ) -> dict[str, float]:
        """Score every arm.

        ``total_turns`` defaults to the sum of the arms' turns.
        """
        for arm_id, arm in arms.items():
            validate_arm(arm_id, arm.turns, arm.rewards)
        if total_turns is None:
            total_turns = sum(arm.turns for arm in arms.values())
        return {
            arm_id: self.score(arm.turns, arm.rewards, total_turns, arm_id)
            for arm_id, arm in arms.items()
        }


class BanditScorer:
    """Policy-selectable front end over ``ThompsonScorer`` and ``UCB1Scorer``.

    Parameters
    ----------
    policy : Policy | str
        ``Policy.THOMPSON`` (default) or ``Policy.UCB1``.
    source : RandomSource | None
        Shared by both scorers.
    ucb1_alpha : float
        Exploration constant for UCB1.
    """

    def __init__(
        self,
        policy: Policy | str = Policy.THOMPSON,
        source: RandomSource | None = None,
        ucb1_alpha: float = 2.0,
    ) -> None:
        self.policy = Policy(policy)
        source = source or default_source()
        self.thompson = ThompsonScorer(source)
        self.ucb1 = UCB1Scorer(alpha=ucb1_alpha, source=source)

    def score(
        self, arms: Mapping[str, ArmStats], total_turns: int | None = None
    ) -> dict[str, float]:
        """Compute a fresh ScoreSet under the configured policy.

        ``total_turns`` is only used by UCB1.
        """
        if self.policy is Policy.UCB1:
            return self.ucb1.score_arms(arms, total_turns)
        return self.thompson.score_arms(arms)

    def select(
        self, arms: Mapping[str, ArmStats], total_turns: int | None = None
    ) -> str | None:
        """Score ``arms`` and return the winner."""
        return select_best(self.score(arms, total_turns))


# ----------------------------------------------------------------------
# Allocation estimation
# ----------------------------------------------------------------------

def estimate_allocation(
    arms: Mapping[str, ArmStats],
    n_rounds: int = 10_000,
    seed: int = 42,
) -> dict[str, float]:
    """Estimate the traffic share Thompson Sampling gives each arm.

    Runs ``n_rounds`` independent Thompson rounds and returns the fraction
    each arm wins.  Vectorised with numpy; meant for reporting, not for the
    serving path.

    Parameters
    ----------
    arms : Mapping[str, ArmStats]
        Arm statistics keyed by arm id.
    n_rounds : int
        Number of simulated rounds.
    seed : int
        RNG seed for reproducibility.

    Returns
    -------
    dict[str, float]
        Share per arm in input order, sums to ~1.0.  Empty for no arms.
    """
    if n_rounds <= 0:
        raise ValueError("n_rounds must be positive")
    if not arms:
        return {}
    for arm_id, arm in arms.items():
        validate_arm(arm_id, arm.turns, arm.rewards)

    arm_ids = list(arms)
    rng = np.random.default_rng(seed)
    draws = np.column_stack(
        [
            rng.beta(arm.rewards + 1, arm.turns - arm.rewards + 1, size=n_rounds)
            for arm in arms.values()
        ]
    )
    winners = np.argmax(draws, axis=1)
    counts = np.bincount(winners, minlength=len(arm_ids))
    return {arm_id: float(share) for arm_id, share in zip(arm_ids, counts / n_rounds)}
