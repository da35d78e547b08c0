from rlbandit.models.arm import ArmData
from rlbandit.models.base import Base
from rlbandit.models.experiment import ExperimentRegistration, ExperimentTotals

__all__ = [
    "Base",
    "ArmData",
    "ExperimentRegistration",
    "ExperimentTotals",
]
