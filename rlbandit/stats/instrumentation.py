"""Scoring events emitted by the coordinator.

The statistical core never logs.  After each scoring call the coordinator
builds a ``ScoringEvent`` and passes it to its listeners; ``log_scoring_event``
is the stock listener behind the ``DEBUG_MODE`` setting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from rlbandit.schemas import Policy

debug_logger = logging.getLogger("rlbandit.debug")


@dataclass(frozen=True)
class ScoringEvent:
    experiment_id: str
    policy: Policy
    scores: dict[str, float] = field(default_factory=dict)
    experiment_name: str | None = None
    time_window_seconds: int | None = None


ScoringListener = Callable[[ScoringEvent], None]


def format_scores(scores: dict[str, float]) -> str:
    return ", ".join(f"{arm_id}:{score:.4f}" for arm_id, score in scores.items())


def log_scoring_event(event: ScoringEvent) -> None:
    debug_logger.info(
        "Scores calculated | Experiment: %s (%s) | Policy: %s | Scores: %s",
        event.experiment_name or "Unknown",
        event.experiment_id,
        event.policy.value,
        format_scores(event.scores),
    )
