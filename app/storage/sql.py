"""SQLAlchemy-backed EntityStore."""

import asyncio
import logging
from contextlib import asynccontextmanager, nullcontext
from contextvars import ContextVar
from typing import AsyncIterator, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.core.errors import DuplicateVoteError, NotFoundError
from app.db.models import ProposalModel, UserModel, VoteModel
from app.db.session import create_session_factory
from app.schemas.proposal import Proposal, ProposalCreate, ProposalUpdate
from app.schemas.user import User, UserCreate
from app.schemas.vote import Vote, VoteCreate
from app.storage.base import EntityStore, initial_proposal_fields

logger = logging.getLogger(__name__)

# Dialects that ignore SELECT ... FOR UPDATE
_NO_ROW_LOCK_DIALECTS = {"sqlite"}

# SQLite reports the columns of a violated unique constraint, Postgres its name
_DUPLICATE_VOTE_MARKERS = ("uq_vote_proposal_voter", "vote.proposal_id, vote.voter_address")


def _is_duplicate_vote(error: IntegrityError) -> bool:
    message = str(error.orig)
    return any(marker in message for marker in _DUPLICATE_VOTE_MARKERS)


class SQLAlchemyEntityStore(EntityStore):
    """EntityStore persisting to a relational database through an async session factory.

    Outside a transaction every call runs in its own short session and commits
    on success. Inside ``transaction()`` all calls share one session whose
    transaction commits or rolls back as a whole.

    On databases without row locks (SQLite) every unit of work holds a store
    wide lock instead, so concurrent transactions never interleave.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], engine: Optional[AsyncEngine] = None):
        """Initialize the store.

        Args:
            session_factory: Factory producing async sessions
            engine: Engine to dispose on ``close()``, if the store owns it
        """
        self._session_factory = session_factory
        self._engine = engine
        self._current_session: ContextVar[Optional[AsyncSession]] = ContextVar(
            f"entity_store_session_{id(self)}", default=None
        )

        bind = engine or session_factory.kw.get("bind")
        self._lock = asyncio.Lock() if bind is not None and bind.dialect.name in _NO_ROW_LOCK_DIALECTS else None

    @property
    def engine(self) -> Optional[AsyncEngine]:
        return self._engine

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "SQLAlchemyEntityStore":
        return cls(create_session_factory(engine), engine=engine)

    def _serialized(self):
        return self._lock if self._lock is not None else nullcontext()

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        session = self._current_session.get()
        if session is not None:
            yield session
            return
        async with self._serialized():
            async with self._session_factory() as session:
                async with session.begin():
                    yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._current_session.get() is not None:
            # Already inside a unit of work; join it
            yield
            return
        async with self._serialized():
            async with self._session_factory() as session:
                token = self._current_session.set(session)
                try:
                    async with session.begin():
                        yield
                finally:
                    self._current_session.reset(token)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    # Users

    async def create_user(self, data: UserCreate) -> User:
        async with self._session() as session:
            user = UserModel(**data.model_dump())
            session.add(user)
            await session.flush()
            return User.model_validate(user)

    async def get_user(self, user_id: int) -> Optional[User]:
        async with self._session() as session:
            user = await session.get(UserModel, user_id)
            return User.model_validate(user) if user else None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        async with self._session() as session:
            result = await session.execute(select(UserModel).where(UserModel.username == username))
            user = result.scalars().first()
            return User.model_validate(user) if user else None

    # Proposals

    async def create_proposal(self, data: ProposalCreate) -> Proposal:
        async with self._session() as session:
            proposal = ProposalModel(**initial_proposal_fields(data))
            session.add(proposal)
            await session.flush()
            return Proposal.model_validate(proposal)

    async def get_proposals(self, approved_only: bool = False) -> List[Proposal]:
        async with self._session() as session:
            query = select(ProposalModel)
            if approved_only:
                query = query.where(ProposalModel.approved.is_(True))
            result = await session.execute(query)
            return [Proposal.model_validate(p) for p in result.scalars().all()]

    async def get_proposal_by_id(self, proposal_id: int, *, for_update: bool = False) -> Optional[Proposal]:
        async with self._session() as session:
            query = select(ProposalModel).where(ProposalModel.id == proposal_id)
            if for_update:
                query = query.with_for_update()
            result = await session.execute(query.execution_options(populate_existing=True))
            proposal = result.scalars().first()
            return Proposal.model_validate(proposal) if proposal else None

    async def update_proposal(self, proposal_id: int, changes: ProposalUpdate) -> Optional[Proposal]:
        async with self._session() as session:
            proposal = await session.get(ProposalModel, proposal_id)
            if proposal is None:
                return None
            for field, value in changes.changes().items():
                setattr(proposal, field, value)
            await session.flush()
            return Proposal.model_validate(proposal)

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
        async with self._session() as session:
            result = await session.execute(
                update(ProposalModel)
                .where(ProposalModel.id == proposal_id)
                .values(
                    votes_for=ProposalModel.votes_for + votes_for,
                    votes_against=ProposalModel.votes_against + votes_against,
                    raised_amount=ProposalModel.raised_amount + raised_amount,
                    token_stake=ProposalModel.token_stake + token_stake,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
        return await self.get_proposal_by_id(proposal_id)

    # Votes

    async def get_votes_by_proposal_id(self, proposal_id: int) -> List[Vote]:
        async with self._session() as session:
            result = await session.execute(
                select(VoteModel)
                .where(VoteModel.proposal_id == proposal_id)
                .order_by(VoteModel.id)
                .execution_options(populate_existing=True)
            )
            return [Vote.model_validate(v) for v in result.scalars().all()]

    async def get_vote_by_address_and_proposal(self, proposal_id: int, voter_address: str) -> Optional[Vote]:
        async with self._session() as session:
            result = await session.execute(
                select(VoteModel)
                .where(VoteModel.proposal_id == proposal_id)
                .where(VoteModel.voter_address == voter_address)
            )
            vote = result.scalars().first()
            return Vote.model_validate(vote) if vote else None

    async def create_vote(self, data: VoteCreate) -> Vote:
        async with self._session() as session:
            vote = VoteModel(**data.model_dump(), locked=True)
            session.add(vote)
            try:
                await session.flush()
            except IntegrityError as e:
                logger.warning(f"Vote insert for proposal {data.proposal_id} rejected: {e.orig}")
                if _is_duplicate_vote(e):
                    raise DuplicateVoteError(data.proposal_id, data.voter_address) from e
                # The only other constraint on a vote is the proposal foreign key
                raise NotFoundError.for_entity("Proposal", data.proposal_id) from e
            return Vote.model_validate(vote)

    async def unlock_votes(self, proposal_id: int, support: Optional[bool] = None) -> List[Vote]:
        async with self._session() as session:
            query = (
                select(VoteModel)
                .where(VoteModel.proposal_id == proposal_id)
                .where(VoteModel.locked.is_(True))
                .order_by(VoteModel.id)
            )
            if support is not None:
                query = query.where(VoteModel.support == support)
            result = await session.execute(query.with_for_update())
            votes = result.scalars().all()
            for vote in votes:
                vote.locked = False
            await session.flush()
            return [Vote.model_validate(v) for v in votes]
