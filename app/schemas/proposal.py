"""Pydantic schemas for funding proposals."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import (
    MAX_DURATION_DAYS,
    MAX_METRIC,
    MIN_CATEGORY_LENGTH,
    MIN_DESCRIPTION_LENGTH,
    MIN_DURATION_DAYS,
    MIN_FUNDING_GOAL,
    MIN_METRIC,
    MIN_TITLE_LENGTH,
)


class ProposalCreate(BaseModel):
    """Schema for a proposal submitted through the proposal form."""

    title: str = Field(..., min_length=MIN_TITLE_LENGTH)
    description: str = Field(..., min_length=MIN_DESCRIPTION_LENGTH)
    category: str = Field(..., min_length=MIN_CATEGORY_LENGTH)
    creator_address: str = Field(..., min_length=1, description="Wallet address of the submitter")
    funding_goal: int = Field(..., ge=MIN_FUNDING_GOAL, description="Target amount in METIS")
    duration: int = Field(..., ge=MIN_DURATION_DAYS, le=MAX_DURATION_DAYS, description="Campaign length in days")

    # Impact sub-metrics, absent when the submitter skipped them
    energy_efficiency: Optional[int] = Field(None, ge=MIN_METRIC, le=MAX_METRIC)
    community_benefit: Optional[int] = Field(None, ge=MIN_METRIC, le=MAX_METRIC)
    innovation_factor: Optional[int] = Field(None, ge=MIN_METRIC, le=MAX_METRIC)


class ProposalUpdate(BaseModel):
    """Partial set of proposal fields to merge into a stored proposal."""

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    creator_address: Optional[str] = None
    funding_goal: Optional[int] = Field(None, ge=1)
    duration: Optional[int] = Field(None, ge=1)
    raised_amount: Optional[int] = Field(None, ge=0)
    votes_for: Optional[int] = Field(None, ge=0)
    votes_against: Optional[int] = Field(None, ge=0)
    token_stake: Optional[int] = Field(None, ge=0)
    approved: Optional[bool] = None
    metis_impact_score: Optional[float] = Field(None, ge=0, le=10)
    energy_efficiency: Optional[int] = Field(None, ge=0, le=MAX_METRIC)
    community_benefit: Optional[int] = Field(None, ge=0, le=MAX_METRIC)
    innovation_factor: Optional[int] = Field(None, ge=0, le=MAX_METRIC)

    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict:
        """Return only the fields that were explicitly set."""
        return self.model_dump(exclude_unset=True)


class Proposal(BaseModel):
    """Schema for a stored proposal."""

    id: int
    title: str
    description: str
    category: str
    creator_address: str
    funding_goal: int
    raised_amount: int = 0
    votes_for: int = 0
    votes_against: int = 0
    duration: int
    created_at: datetime
    approved: bool = False
    metis_impact_score: float = 0.0
    energy_efficiency: int = 0
    community_benefit: int = 0
    innovation_factor: int = 0
    token_stake: int = 0

    model_config = ConfigDict(from_attributes=True)

    @property
    def goal_reached(self) -> bool:
        return self.raised_amount >= self.funding_goal

    @property
    def total_votes(self) -> int:
        return self.votes_for + self.votes_against


class ApprovalRequest(BaseModel):
    """Admin request to approve or withdraw approval of a proposal."""

    id: int
    approved: bool


class UnlockResult(BaseModel):
    """Outcome of releasing the stakes held on a proposal."""

    proposal_id: int
    goal_reached: bool
    unlocked_count: int = 0
    unlocked_vote_ids: List[int] = Field(default_factory=list)
