"""Dictionary-backed EntityStore for development and tests."""

import asyncio
import itertools
import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime, UTC
from typing import AsyncIterator, Dict, List, Optional

from app.core.errors import DuplicateVoteError, NotFoundError
from app.schemas.proposal import Proposal, ProposalCreate, ProposalUpdate
from app.schemas.user import User, UserCreate
from app.schemas.vote import Vote, VoteCreate
from app.storage.base import EntityStore, initial_proposal_fields

logger = logging.getLogger(__name__)


class InMemoryEntityStore(EntityStore):
    """EntityStore keeping entities in per-kind dictionaries.

    Callers only ever receive copies of the stored entities, and updates
    replace stored entities instead of mutating them, so a transaction can roll
    back by restoring shallow copies of the dictionaries. Transactions are
    serialised by a single lock; a transaction opened inside another one joins
    it.
    """

    def __init__(self):
        self._users: Dict[int, User] = {}
        self._proposals: Dict[int, Proposal] = {}
        self._votes: Dict[int, Vote] = {}

        self._user_ids = itertools.count(1)
        self._proposal_ids = itertools.count(1)
        self._vote_ids = itertools.count(1)

        self._lock = asyncio.Lock()
        self._in_transaction: ContextVar[bool] = ContextVar(
            f"memory_store_transaction_{id(self)}", default=False
        )

    # Users

    async def create_user(self, data: UserCreate) -> User:
        user = User(id=next(self._user_ids), **data.model_dump())
        self._users[user.id] = user
        return user.model_copy()

    async def get_user(self, user_id: int) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        user = next((u for u in self._users.values() if u.username == username), None)
        return user.model_copy() if user else None

    # Proposals

    async def create_proposal(self, data: ProposalCreate) -> Proposal:
        proposal = Proposal(
            id=next(self._proposal_ids),
            created_at=datetime.now(UTC),
            **initial_proposal_fields(data),
        )
        self._proposals[proposal.id] = proposal
        return proposal.model_copy()

    async def get_proposals(self, approved_only: bool = False) -> List[Proposal]:
        proposals = list(self._proposals.values())
        if approved_only:
            proposals = [p for p in proposals if p.approved]
        return [p.model_copy() for p in proposals]

    async def get_proposal_by_id(self, proposal_id: int, *, for_update: bool = False) -> Optional[Proposal]:
        # Row locking is covered by the transaction lock
        proposal = self._proposals.get(proposal_id)
        return proposal.model_copy() if proposal else None

    async def update_proposal(self, proposal_id: int, changes: ProposalUpdate) -> Optional[Proposal]:
        proposal = self._proposals.get(proposal_id)
        if proposal is None:
            return None
        updated = proposal.model_copy(update=changes.changes())
        self._proposals[proposal_id] = updated
        return updated.model_copy()

    async def approve_proposal(self, proposal_id: int, approved: bool) -> Optional[Proposal]:
        return await self.update_proposal(proposal_id, ProposalUpdate(approved=approved))

    async def increment_proposal_totals(
        self,
        proposal_id: int,
        *,
        votes_for: int = 0,
        votes_against: int = 0,
        raised_amount: int = 0,
        token_stake: int = 0,
    ) -> Optional[Proposal]:
        proposal = self._proposals.get(proposal_id)
        if proposal is None:
            return None
        updated = proposal.model_copy(
            update={
                "votes_for": proposal.votes_for + votes_for,
                "votes_against": proposal.votes_against + votes_against,
                "raised_amount": proposal.raised_amount + raised_amount,
                "token_stake": proposal.token_stake + token_stake,
            }
        )
        self._proposals[proposal_id] = updated
        return updated.model_copy()

    # Votes

    def _find_vote(self, proposal_id: int, voter_address: str) -> Optional[Vote]:
        return next(
            (
                v
                for v in self._votes.values()
                if v.proposal_id == proposal_id and v.voter_address == voter_address
            ),
            None,
        )

    async def get_votes_by_proposal_id(self, proposal_id: int) -> List[Vote]:
        return [v.model_copy() for v in self._votes.values() if v.proposal_id == proposal_id]

    async def get_vote_by_address_and_proposal(self, proposal_id: int, voter_address: str) -> Optional[Vote]:
        vote = self._find_vote(proposal_id, voter_address)
        return vote.model_copy() if vote else None

    async def create_vote(self, data: VoteCreate) -> Vote:
        if data.proposal_id not in self._proposals:
            raise NotFoundError.for_entity("Proposal", data.proposal_id)
        if self._find_vote(data.proposal_id, data.voter_address) is not None:
            raise DuplicateVoteError(data.proposal_id, data.voter_address)
        vote = Vote(id=next(self._vote_ids), locked=True, **data.model_dump())
        self._votes[vote.id] = vote
        return vote.model_copy()

    async def unlock_votes(self, proposal_id: int, support: Optional[bool] = None) -> List[Vote]:
        unlocked = []
        for vote in list(self._votes.values()):
            if vote.proposal_id != proposal_id or not vote.locked:
                continue
            if support is not None and vote.support != support:
                continue
            updated = vote.model_copy(update={"locked": False})
            self._votes[vote.id] = updated
            unlocked.append(updated.model_copy())
        return unlocked

    # Units of work

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._in_transaction.get():
            # Already inside a unit of work; join it
            yield
            return
        async with self._lock:
            token = self._in_transaction.set(True)
            snapshot = (dict(self._users), dict(self._proposals), dict(self._votes))
            try:
                yield
            except BaseException:
                self._users, self._proposals, self._votes = snapshot
                logger.debug("Rolled back in-memory transaction")
                raise
            finally:
                self._in_transaction.reset(token)
