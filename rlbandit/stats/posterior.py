"""Beta posterior summaries for reports.

The serving path only needs one posterior draw per arm (see ``bandits``).
Reports want the closed-form side of the same model: posterior mean,
credible interval, and how often each arm would win.  Those use scipy and
vectorised numpy sampling, seeded so a report is stable between refreshes.
"""

from __future__ import annotations

import numpy as np
from scipy import stats as sp_stats

from rlbandit.stats.bandits import validate_arm


class BetaPosterior:
    """Immutable Beta(alpha, beta) posterior of an arm's reward rate.

    Thompson Sampling uses a uniform Beta(1, 1) prior, so the posterior of
    an arm with ``turns`` trials and ``rewards`` successes is
    Beta(rewards + 1, turns - rewards + 1).  Build it with ``from_counts``.
    """

    __slots__ = ("alpha", "beta")

    def __init__(self, alpha: float = 1.0, beta: float = 1.0) -> None:
        if alpha <= 0 or beta <= 0:
            raise ValueError("Alpha and beta must be positive")
        self.alpha = alpha
        self.beta = beta

    @classmethod
    def from_counts(cls, turns: int, rewards: int, arm_id: str = "") -> BetaPosterior:
        validate_arm(arm_id, turns, rewards)
        return cls(alpha=rewards + 1.0, beta=(turns - rewards) + 1.0)

    def posterior_mean(self) -> float:
        """alpha / (alpha + beta)"""
        return self.alpha / (self.alpha + self.beta)

    def posterior_variance(self) -> float:
        ab = self.alpha + self.beta
        return (self.alpha * self.beta) / (ab * ab * (ab + 1))

    def credible_interval(self, width: float = 0.95) -> tuple[float, float]:
        """Equal-tailed credible interval for the reward rate.

        Parameters
        ----------
        width : float
            Probability mass inside the interval, e.g. 0.95.

        Returns
        -------
        tuple[float, float]
            (lower_bound, upper_bound)
        """
        if not 0 < width < 1:
            raise ValueError("width must be between 0 and 1 exclusive")
        lower_tail = (1 - width) / 2
        dist = sp_stats.beta(self.alpha, self.beta)
        return (float(dist.ppf(lower_tail)), float(dist.ppf(1 - lower_tail)))

    @staticmethod
    def probability_best(
        posteriors: list[BetaPosterior],
        n_samples: int = 50_000,
        seed: int = 42,
    ) -> list[float]:
        """Monte Carlo estimate of P(arm_i has the highest rate) per arm.

        Returns
        -------
        list[float]
            One probability per posterior, in input order, summing to ~1.0.
        """
        if not posteriors:
            return []
        if n_samples <= 0:
            raise ValueError("n_samples must be positive")
        rng = np.random.default_rng(seed)
        samples = np.column_stack(
            [rng.beta(p.alpha, p.beta, size=n_samples) for p in posteriors]
        )
        best_indices = np.argmax(samples, axis=1)
        counts = np.bincount(best_indices, minlength=len(posteriors))
        return (counts / n_samples).tolist()

    def __repr__(self) -> str:
        return f"BetaPosterior(alpha={self.alpha:.3f}, beta={self.beta:.3f})"
