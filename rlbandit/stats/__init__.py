"""rlbandit bandit scoring engine.

Public API:
- RandomSource: open-interval uniform and standard-normal draws
- GammaSampler / BetaSampler: Marsaglia-Tsang Gamma and Gamma-ratio Beta sampling
- ThompsonScorer / UCB1Scorer / BanditScorer: per-arm scores under either policy
- select_best: winner of a ScoreSet
- estimate_allocation: Monte Carlo traffic share under Thompson Sampling
- BetaPosterior: posterior summaries for reports
- ExperimentCoordinator: store-backed scoring with cold start and recency windows
"""

from rlbandit.schemas import Policy
from rlbandit.stats.bandits import (
    BanditScorer,
    ThompsonScorer,
    UCB1Scorer,
    estimate_allocation,
    select_best,
)
from rlbandit.stats.distributions import BetaSampler, GammaSampler
from rlbandit.stats.engine import ExperimentCoordinator
from rlbandit.stats.instrumentation import ScoringEvent, log_scoring_event
from rlbandit.stats.posterior import BetaPosterior
from rlbandit.stats.random import RandomSource

__all__ = [
    "Policy",
    "RandomSource",
    "GammaSampler",
    "BetaSampler",
    "ThompsonScorer",
    "UCB1Scorer",
    "BanditScorer",
    "select_best",
    "estimate_allocation",
    "BetaPosterior",
    "ExperimentCoordinator",
    "ScoringEvent",
    "log_scoring_event",
]
