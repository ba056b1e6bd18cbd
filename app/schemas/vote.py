"""Pydantic schemas for votes."""

from pydantic import BaseModel, ConfigDict, Field


class VoteCreate(BaseModel):
    """Schema for a vote coming from the voting UI.

    The stake is not bounded here; the voting service rejects stakes below
    the minimum after the proposal checks.
    """

    proposal_id: int
    voter_address: str = Field(..., min_length=1)
    support: bool
    staked_amount: int = 0


class Vote(BaseModel):
    """Schema for a stored vote."""

    id: int
    proposal_id: int
    voter_address: str
    support: bool
    staked_amount: int = 0
    locked: bool = True

    model_config = ConfigDict(from_attributes=True)
