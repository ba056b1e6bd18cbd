import logging

from app.core.errors import NotFoundError
from app.schemas.proposal import ApprovalRequest, Proposal, UnlockResult
from app.storage.base import EntityStore

logger = logging.getLogger(__name__)


class ApprovalService:
    """Admin moderation of proposals and release of staked tokens.

    Callers are responsible for checking admin authorization (see
    ``app.core.security.require_admin``) before invoking these methods.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    async def approve_proposal(self, proposal_id: int, approved: bool) -> Proposal:
        """Set or clear the approval flag of a proposal.

        Raises:
            NotFoundError: the proposal does not exist
        """
        proposal = await self.store.approve_proposal(proposal_id, approved)
        if proposal is None:
            logger.warning(f"Cannot change approval of proposal {proposal_id}: not found")
            raise NotFoundError.for_entity("Proposal", proposal_id)

        logger.info(f"Proposal {proposal_id} approval set to {approved}")
        return proposal

    async def apply_approval_request(self, request: ApprovalRequest) -> Proposal:
        """Apply an approval request from the admin panel."""
        return await self.approve_proposal(request.id, request.approved)

    async def unlock_all_tokens_for_proposal(self, proposal_id: int) -> UnlockResult:
        """Release the stakes held on a proposal according to its funding outcome.

        When the funding goal was reached only supporting votes are unlocked
        and opposing stakes stay locked. Otherwise every vote is unlocked.
        Votes that are already unlocked are left untouched, so calling this
        again is a no-op.

        Args:
            proposal_id: ID of the proposal whose stakes to release

        Returns:
            UnlockResult describing which votes changed

        Raises:
            NotFoundError: the proposal does not exist
        """
        async with self.store.transaction():
            proposal = await self.store.get_proposal_by_id(proposal_id, for_update=True)
            if proposal is None:
                logger.warning(f"Cannot unlock tokens for proposal {proposal_id}: not found")
                raise NotFoundError.for_entity("Proposal", proposal_id)

            goal_reached = proposal.goal_reached
            unlocked = await self.store.unlock_votes(
                proposal_id,
                support=True if goal_reached else None,
            )

        logger.info(
            f"Unlocked {len(unlocked)} vote(s) on proposal {proposal_id} "
            f"(goal reached: {goal_reached})"
        )
        return UnlockResult(
            proposal_id=proposal_id,
            goal_reached=goal_reached,
            unlocked_count=len(unlocked),
            unlocked_vote_ids=[v.id for v in unlocked],
        )
