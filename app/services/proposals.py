import logging
from typing import Any, List, Mapping, Union

from pydantic import ValidationError

from app.core.errors import InvalidInputError, NotFoundError
from app.schemas import describe_validation_error
from app.schemas.proposal import Proposal, ProposalCreate
from app.storage.base import EntityStore

logger = logging.getLogger(__name__)


class ProposalService:
    """Service for submitting and reading funding proposals."""

    def __init__(self, store: EntityStore):
        """Initialize the service with an entity store.

        Args:
            store: Storage handle shared with the other services
        """
        self.store = store

    async def create_proposal(self, data: Union[ProposalCreate, Mapping[str, Any]]) -> Proposal:
        """Validate and store a proposal from the submission form.

        New proposals start unapproved, with zero tallies and an impact score
        derived from whichever sub-metrics were supplied.

        Args:
            data: Submission payload, already parsed or as a raw mapping

        Returns:
            The created Proposal

        Raises:
            InvalidInputError: the payload violates the submission rules
        """
        if not isinstance(data, ProposalCreate):
            try:
                data = ProposalCreate.model_validate(data)
            except ValidationError as e:
                message = describe_validation_error(e)
                logger.warning(f"Rejected proposal submission: {message}")
                raise InvalidInputError(f"Invalid proposal data: {message}") from e

        try:
            proposal = await self.store.create_proposal(data)
        except Exception as e:
            logger.error(f"Error creating proposal: {str(e)}")
            raise

        logger.info(f"Created proposal {proposal.id} '{proposal.title}' by {proposal.creator_address}")
        return proposal

    async def list_proposals(self, approved_only: bool = False) -> List[Proposal]:
        """Return proposals, newest first.

        Args:
            approved_only: Only return proposals an admin approved
        """
        proposals = await self.store.get_proposals(approved_only=approved_only)
        return sorted(proposals, key=lambda p: (p.created_at, p.id), reverse=True)

    async def get_proposal(self, proposal_id: int) -> Proposal:
        """Get a proposal by ID.

        Raises:
            NotFoundError: the proposal does not exist
        """
        proposal = await self.store.get_proposal_by_id(proposal_id)
        if proposal is None:
            logger.warning(f"Proposal {proposal_id} not found")
            raise NotFoundError.for_entity("Proposal", proposal_id)
        return proposal

    async def get_funding_progress(self, proposal_id: int) -> float:
        """Percentage of the funding goal raised so far, capped at 100."""
        proposal = await self.get_proposal(proposal_id)
        if proposal.funding_goal <= 0:
            return 100.0
        return round(min(proposal.raised_amount / proposal.funding_goal * 100, 100.0), 2)
