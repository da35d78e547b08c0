from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from rlbandit.models.base import Base


class ExperimentTotals(Base):
    __tablename__ = "rl_experiment_totals"

    experiment_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    total_turns: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    updated: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class ExperimentRegistration(Base):
    """Experiments known to the system, keyed by id, owned by a module."""

    __tablename__ = "rl_experiment_registry"

    experiment_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    module: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    experiment_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    registered_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
