from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base_class import Base


class VoteModel(Base):
    """A wallet's vote on a proposal together with the tokens it staked."""

    __table_args__ = (
        # One vote per voter and proposal
        UniqueConstraint("proposal_id", "voter_address", name="uq_vote_proposal_voter"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    proposal_id: Mapped[int] = mapped_column(Integer, ForeignKey("proposal.id"), index=True)
    voter_address: Mapped[str] = mapped_column(String(255), index=True)
    support: Mapped[bool] = mapped_column(Boolean)  # True for support, False for decline
    staked_amount: Mapped[int] = mapped_column(Integer, default=0)
    locked: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self):
        return (
            f"<Vote(id={self.id}, proposal_id={self.proposal_id}, "
            f"voter_address='{self.voter_address}', support={self.support})>"
        )
