from rlbandit.storage.base import ArmStatsStore
from rlbandit.storage.memory import InMemoryArmStatsStore
from rlbandit.storage.sql import SqlArmStatsStore

__all__ = [
    "ArmStatsStore",
    "InMemoryArmStatsStore",
    "SqlArmStatsStore",
]
