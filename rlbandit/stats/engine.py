"""ExperimentCoordinator: bridges an arm-statistics store and the scorer.

This is the entry point for the serving layer.  ``score_arms`` reads the
current counters, fills in arms that have never been seen, scores them
under the configured policy and reports the result to any listeners.  The
``record_*`` methods validate identifiers and pass events to the store.

The coordinator keeps no state between calls; each call is a function of
the store's contents and its arguments.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from rlbandit.core.config import settings
from rlbandit.core.exceptions import InvalidIdentifierError
from rlbandit.registry import ExperimentRegistry
from rlbandit.schemas import ArmStats, Policy
from rlbandit.stats.bandits import BanditScorer, select_best
from rlbandit.stats.instrumentation import ScoringEvent, ScoringListener, log_scoring_event
from rlbandit.stats.random import RandomSource
from rlbandit.storage.base import ArmStatsStore

logger = logging.getLogger(__name__)

EXPERIMENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
ARM_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def check_experiment_id(experiment_id: str) -> None:
    if not isinstance(experiment_id, str) or not EXPERIMENT_ID_PATTERN.match(experiment_id):
        raise InvalidIdentifierError(f"Invalid experiment id: {experiment_id!r}")


def check_arm_id(arm_id: str) -> None:
    if not isinstance(arm_id, str) or not ARM_ID_PATTERN.match(arm_id):
        raise InvalidIdentifierError(f"Invalid arm id: {arm_id!r}")


def _arm_id_list(arm_ids: Iterable[str]) -> list[str]:
    # A bare string is iterable too and would be split into characters
    if isinstance(arm_ids, str):
        raise TypeError(f"Expected a collection of arm ids, got the string {arm_ids!r}")
    return list(arm_ids)


class ExperimentCoordinator:
    """Scores and records bandit experiments over an ``ArmStatsStore``.

    Parameters
    ----------
    store : ArmStatsStore
        Source of arm counters and sink for turn/reward events.
    policy : Policy | str | None
        Scoring policy; ``settings.DEFAULT_POLICY`` when omitted.
    source : RandomSource | None
        Randomness for the scorer; the shared CSPRNG source when omitted.
    ucb1_alpha : float | None
        UCB1 exploration constant; ``settings.UCB1_ALPHA`` when omitted.
    registry : ExperimentRegistry | None
        When given, supplies experiment names to listeners and gates the
        ``record_*`` methods to registered experiments.
    listeners : list[ScoringListener] | None
        Called with a ``ScoringEvent`` after every non-empty scoring call.
        Defaults to the debug logger when ``settings.DEBUG_MODE`` is on.
    default_time_window_seconds : int | None
        Recency window applied when a call passes none.
    """

    def __init__(
        self,
        store: ArmStatsStore,
        policy: Policy | str | None = None,
        source: RandomSource | None = None,
        ucb1_alpha: float | None = None,
        registry: ExperimentRegistry | None = None,
        listeners: list[ScoringListener] | None = None,
        default_time_window_seconds: int | None = None,
    ) -> None:
        self.store = store
        self.scorer = BanditScorer(
            policy=policy if policy is not None else settings.DEFAULT_POLICY,
            source=source,
            ucb1_alpha=ucb1_alpha if ucb1_alpha is not None else settings.UCB1_ALPHA,
        )
        self.registry = registry
        if listeners is None:
            listeners = [log_scoring_event] if settings.DEBUG_MODE else []
        self.listeners = list(listeners)
        self.default_time_window_seconds = (
            default_time_window_seconds
            if default_time_window_seconds is not None
            else settings.DEFAULT_TIME_WINDOW_SECONDS
        )

    @property
    def policy(self) -> Policy:
        return self.scorer.policy

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    async def score_arms(
        self,
        experiment_id: str,
        candidate_arm_ids: Iterable[str] = (),
        time_window_seconds: int | None = None,
    ) -> dict[str, float]:
        """Score every known arm of an experiment plus any requested new ones.

        Steps:
        1. Fetch arm stats, limited to arms updated within the time window
           when one is given (or configured) and positive.
        2. Add a zero-stat arm for each candidate with no history, so every
           requested arm gets a score.
        3. Return ``{}`` if there is still nothing to score.
        4. Score under the configured policy and notify listeners.

        Raises
        ------
        TypeError
            If ``candidate_arm_ids`` is a single string.
        InvalidArmStatsError
            If the store returns an arm with negative counts or more
            rewards than turns.
        """
        candidates = _arm_id_list(candidate_arm_ids)
        window = time_window_seconds if time_window_seconds is not None else self.default_time_window_seconds

        arms: dict[str, ArmStats] = {
            arm.arm_id: arm for arm in await self.store.get_arm_stats(experiment_id, window)
        }
        for arm_id in candidates:
            if arm_id not in arms:
                arms[arm_id] = ArmStats(arm_id=arm_id)

        if not arms:
            return {}

        total_turns: int | None = None
        if self.policy is Policy.UCB1 and not (window and window > 0):
            # Windowed UCB1 scores against the turns inside the window instead
            total_turns = await self.store.get_total_turns(experiment_id)

        scores = self.scorer.score(arms, total_turns)
        await self._notify(experiment_id, scores, window)
        return scores

    @staticmethod
    def select_best(scores: Mapping[str, float]) -> str | None:
        """Arm with the highest score, or ``None`` for an empty ScoreSet."""
        return select_best(scores)

    async def choose_arm(
        self,
        experiment_id: str,
        candidate_arm_ids: Iterable[str] = (),
        time_window_seconds: int | None = None,
    ) -> str | None:
        """Score and return the winning arm in one call."""
        scores = await self.score_arms(experiment_id, candidate_arm_ids, time_window_seconds)
        return select_best(scores)

    async def _notify(self, experiment_id: str, scores: dict[str, float], window: int | None) -> None:
        if not self.listeners:
            return
        name = None
        if self.registry is not None:
            name = await self.registry.get_experiment_name(experiment_id)
        event = ScoringEvent(
            experiment_id=experiment_id,
            policy=self.policy,
            scores=dict(scores),
            experiment_name=name,
            time_window_seconds=window,
        )
        for listener in self.listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Scoring listener failed for experiment %s", experiment_id)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    async def record_turn(self, experiment_id: str, arm_id: str) -> None:
        check_experiment_id(experiment_id)
        check_arm_id(arm_id)
        if await self._accepts(experiment_id):
            await self.store.increment_turn(experiment_id, arm_id)

    async def record_turns(self, experiment_id: str, arm_ids: Iterable[str]) -> None:
        """Record one exposure for each arm shown together."""
        check_experiment_id(experiment_id)
        arm_ids = _arm_id_list(arm_ids)
        for arm_id in arm_ids:
            check_arm_id(arm_id)
        if arm_ids and await self._accepts(experiment_id):
            await self.store.increment_turns(experiment_id, arm_ids)

    async def record_reward(self, experiment_id: str, arm_id: str) -> None:
        check_experiment_id(experiment_id)
        check_arm_id(arm_id)
        if await self._accepts(experiment_id):
            await self.store.increment_reward(experiment_id, arm_id)

    async def _accepts(self, experiment_id: str) -> bool:
        if self.registry is None:
            return True
        if await self.registry.is_registered(experiment_id):
            return True
        logger.debug("Ignoring event for unregistered experiment %s", experiment_id)
        return False
