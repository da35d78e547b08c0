"""Exceptions raised by rlbandit."""


class RLBanditError(Exception):
    """Base class for all rlbandit errors."""


class InvalidArmStatsError(RLBanditError, ValueError):
    """Arm counters that cannot be scored: negative counts or rewards > turns."""

    def __init__(self, arm_id: str, turns: int, rewards: int, reason: str) -> None:
        self.arm_id = arm_id
        self.turns = turns
        self.rewards = rewards
        super().__init__(
            f"Invalid stats for arm {arm_id!r} (turns={turns}, rewards={rewards}): {reason}"
        )


class InvalidIdentifierError(RLBanditError, ValueError):
    """Experiment or arm id rejected on the recording path."""


class RandomSourceError(RLBanditError, RuntimeError):
    """The entropy source failed; scoring cannot continue."""


class ExperimentNotFoundError(RLBanditError, LookupError):
    def __init__(self, experiment_id: str, message: str = "") -> None:
        self.experiment_id = experiment_id
        super().__init__(message or f'Experiment "{experiment_id}" not found.')
