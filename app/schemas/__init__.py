"""Pydantic schemas for the crowdfunding core and its data validation."""

from pydantic import ValidationError

from app.schemas.proposal import ApprovalRequest, Proposal, ProposalCreate, ProposalUpdate, UnlockResult
from app.schemas.user import User, UserCreate
from app.schemas.vote import Vote, VoteCreate


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a ValidationError into ``field: message`` pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
    )


__all__ = [
    "ApprovalRequest",
    "Proposal",
    "ProposalCreate",
    "ProposalUpdate",
    "UnlockResult",
    "User",
    "UserCreate",
    "Vote",
    "VoteCreate",
    "describe_validation_error",
]
