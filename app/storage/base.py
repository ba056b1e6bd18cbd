"""Storage contract shared by every EntityStore backend."""

from abc import ABC, abstractmethod
from typing import AsyncContextManager, List, Optional

from app.schemas.proposal import Proposal, ProposalCreate, ProposalUpdate
from app.schemas.user import User, UserCreate
from app.schemas.vote import Vote, VoteCreate
from app.services.scoring import compute_impact_score


class EntityStore(ABC):
    """Keyed storage and query access for users, proposals and votes.

    Lookups return ``None`` when the entity does not exist. The store never
    mutates one entity as a side effect of another; cross-entity updates are
    composed by the services inside ``transaction()``.
    """

    # Users

    @abstractmethod
    async def create_user(self, data: UserCreate) -> User:
        ...

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    # Proposals

    @abstractmethod
    async def create_proposal(self, data: ProposalCreate) -> Proposal:
        """Persist a new unapproved proposal with zeroed tallies and its initial impact score."""

    @abstractmethod
    async def get_proposals(self, approved_only: bool = False) -> List[Proposal]:
        """Return all proposals, or only approved ones. Order is not guaranteed."""

    @abstractmethod
    async def get_proposal_by_id(self, proposal_id: int, *, for_update: bool = False) -> Optional[Proposal]:
        """Fetch a proposal; ``for_update`` locks its row for the enclosing transaction."""

    @abstractmethod
    async def update_proposal(self, proposal_id: int, changes: ProposalUpdate) -> Optional[Proposal]:
        ...

    @abstractmethod
    async def approve_proposal(self, proposal_id: int, approved: bool) -> Optional[Proposal]:
        ...

    @abstractmethod
    async def increment_proposal_totals(
        self,
        proposal_id: int,
        *,
        votes_for: int = 0,
        votes_against: int = 0,
        raised_amount: int = 0,
        token_stake: int = 0,
    ) -> Optional[Proposal]:
        """Add the given deltas to the proposal's counters."""

    # Votes

    @abstractmethod
    async def get_votes_by_proposal_id(self, proposal_id: int) -> List[Vote]:
        ...

    @abstractmethod
    async def get_vote_by_address_and_proposal(self, proposal_id: int, voter_address: str) -> Optional[Vote]:
        ...

    @abstractmethod
    async def create_vote(self, data: VoteCreate) -> Vote:
        """Persist a locked vote.

        Raises:
            NotFoundError: the proposal does not exist
            DuplicateVoteError: the voter already has a vote on the proposal
        """

    @abstractmethod
    async def unlock_votes(self, proposal_id: int, support: Optional[bool] = None) -> List[Vote]:
        """Unlock the still-locked votes of a proposal, optionally only one side.

        Returns the votes that changed; already unlocked votes are left alone.
        """

    # Units of work

    @abstractmethod
    def transaction(self) -> AsyncContextManager[None]:
        """Run the enclosed store calls as one all-or-nothing unit.

        Concurrent transactions that lock the same proposal run one after the
        other. Opening a transaction while one is already active in the
        current task joins it.
        """

    async def close(self) -> None:
        """Release backend resources."""


def initial_proposal_fields(data: ProposalCreate) -> dict:
    """Field values of a freshly created proposal, before id and timestamp."""
    fields = data.model_dump()
    for metric in ("energy_efficiency", "community_benefit", "innovation_factor"):
        fields[metric] = fields[metric] or 0
    fields.update(
        raised_amount=0,
        votes_for=0,
        votes_against=0,
        token_stake=0,
        approved=False,
        metis_impact_score=compute_impact_score(
            fields["energy_efficiency"],
            fields["community_benefit"],
            fields["innovation_factor"],
        ),
    )
    return fields
