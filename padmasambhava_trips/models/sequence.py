"""
Named counters used to hand out human-readable sequential codes.
"""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SequenceCounter(Base):
    """A single monotonically increasing counter, keyed by name."""

    __tablename__ = "sequence_counters"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<SequenceCounter(name='{self.name}', value={self.value})>"
