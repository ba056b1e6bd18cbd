from datetime import datetime, UTC

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base_class import Base


class ProposalModel(Base):
    """Funding proposal that wallet holders vote and stake on once approved."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(255))
    creator_address: Mapped[str] = mapped_column(String(255), index=True)

    # Funding
    funding_goal: Mapped[int] = mapped_column(Integer)
    raised_amount: Mapped[int] = mapped_column(Integer, default=0)
    duration: Mapped[int] = mapped_column(Integer)  # in days
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )

    # Tallies
    votes_for: Mapped[int] = mapped_column(Integer, default=0)
    votes_against: Mapped[int] = mapped_column(Integer, default=0)
    token_stake: Mapped[int] = mapped_column(Integer, default=0)

    # Admin moderation
    approved: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    # Impact scoring, sub-metrics are 0 when not supplied
    metis_impact_score: Mapped[float] = mapped_column(Float, default=0.0)
    energy_efficiency: Mapped[int] = mapped_column(Integer, default=0)
    community_benefit: Mapped[int] = mapped_column(Integer, default=0)
    innovation_factor: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self):
        return f"<Proposal(id={self.id}, title='{self.title}', approved={self.approved})>"
