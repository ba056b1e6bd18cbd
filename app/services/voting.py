import logging
from typing import List

from pydantic import ValidationError

from app.core.constants import MIN_STAKE
from app.core.errors import (
    CrowdfundError,
    DuplicateVoteError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from app.schemas import describe_validation_error
from app.schemas.vote import Vote, VoteCreate
from app.storage.base import EntityStore

logger = logging.getLogger(__name__)


class VotingService:
    """Service recording votes and keeping proposal tallies in step with them."""

    def __init__(self, store: EntityStore):
        """Initialize the service with an entity store.

        Args:
            store: Storage handle shared with the other services
        """
        self.store = store

    async def submit_vote(
        self,
        proposal_id: int,
        voter_address: str,
        support: bool,
        staked_amount: int,
    ) -> Vote:
        """Record a vote and apply it to the proposal's totals.

        The vote insert and the tally update commit together or not at all.
        A supporting stake counts towards the raised amount; every stake
        counts towards the proposal's token stake.

        Args:
            proposal_id: ID of the proposal voted on
            voter_address: Wallet address of the voter
            support: True to back the proposal, False to oppose it
            staked_amount: Tokens committed with the vote

        Returns:
            The stored, locked vote

        Raises:
            NotFoundError: the proposal does not exist
            InvalidStateError: the proposal is not approved
            DuplicateVoteError: the address already voted on the proposal
            InvalidInputError: the stake is below the minimum or not a whole
                number of tokens
        """
        try:
            async with self.store.transaction():
                proposal = await self.store.get_proposal_by_id(proposal_id, for_update=True)
                if proposal is None:
                    raise NotFoundError.for_entity("Proposal", proposal_id)

                if not proposal.approved:
                    raise InvalidStateError(
                        f"Proposal {proposal_id} is not approved for voting",
                        entity="Proposal",
                        entity_id=proposal_id,
                    )

                existing = await self.store.get_vote_by_address_and_proposal(proposal_id, voter_address)
                if existing is not None:
                    raise DuplicateVoteError(proposal_id, voter_address)

                if not voter_address:
                    raise InvalidInputError("Voter address is required")
                if staked_amount < MIN_STAKE:
                    raise InvalidInputError(f"Staked amount must be at least {MIN_STAKE}")

                try:
                    data = VoteCreate(
                        proposal_id=proposal_id,
                        voter_address=voter_address,
                        support=support,
                        staked_amount=staked_amount,
                    )
                except ValidationError as e:
                    raise InvalidInputError(f"Invalid vote: {describe_validation_error(e)}") from e

                vote = await self.store.create_vote(data)

                updated = await self.store.increment_proposal_totals(
                    proposal_id,
                    votes_for=1 if support else 0,
                    votes_against=0 if support else 1,
                    raised_amount=staked_amount if support else 0,
                    token_stake=staked_amount,
                )
                if updated is None:
                    # Proposal vanished after the vote was written; undo the vote
                    raise NotFoundError.for_entity("Proposal", proposal_id)

        except CrowdfundError as e:
            logger.warning(f"Vote by {voter_address} on proposal {proposal_id} rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error submitting vote on proposal {proposal_id}: {str(e)}")
            raise

        logger.info(
            f"Recorded vote {vote.id} by {voter_address} on proposal {proposal_id} "
            f"(support={support}, stake={staked_amount})"
        )
        return vote

    async def submit_vote_request(self, request: VoteCreate) -> Vote:
        """Submit a vote from a validated voting-UI payload."""
        return await self.submit_vote(
            request.proposal_id,
            request.voter_address,
            request.support,
            request.staked_amount,
        )

    async def get_votes(self, proposal_id: int) -> List[Vote]:
        """Return every vote cast on a proposal.

        Raises:
            NotFoundError: the proposal does not exist
        """
        if await self.store.get_proposal_by_id(proposal_id) is None:
            raise NotFoundError.for_entity("Proposal", proposal_id)
        return await self.store.get_votes_by_proposal_id(proposal_id)
