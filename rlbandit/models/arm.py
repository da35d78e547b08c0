from sqlalchemy import BigInteger, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from rlbandit.models.base import Base


class ArmData(Base):
    """Per-arm counters. Timestamps are unix seconds."""

    __tablename__ = "rl_arm_data"

    experiment_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    arm_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    turns: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    rewards: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    updated: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    __table_args__ = (
        Index("ix_rl_arm_data_experiment_updated", "experiment_id", "updated"),
    )
