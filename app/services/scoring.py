"""Metis impact score calculation."""

import logging
from typing import TYPE_CHECKING, Optional

from app.core.constants import (
    COMMUNITY_BENEFIT_WEIGHT,
    ENERGY_EFFICIENCY_WEIGHT,
    INNOVATION_FACTOR_WEIGHT,
    MAX_IMPACT_SCORE,
    MIN_IMPACT_SCORE,
)
from app.core.errors import NotFoundError
from app.schemas.proposal import ProposalUpdate

if TYPE_CHECKING:
    from app.storage.base import EntityStore

logger = logging.getLogger(__name__)


def compute_impact_score(
    energy_efficiency: Optional[int],
    community_benefit: Optional[int],
    innovation_factor: Optional[int],
) -> float:
    """Weighted impact score in [0, 10]; missing sub-metrics count as 0."""
    score = (
        (energy_efficiency or 0) * ENERGY_EFFICIENCY_WEIGHT
        + (community_benefit or 0) * COMMUNITY_BENEFIT_WEIGHT
        + (innovation_factor or 0) * INNOVATION_FACTOR_WEIGHT
    )
    return round(min(max(score, MIN_IMPACT_SCORE), MAX_IMPACT_SCORE), 2)


class ImpactScoreService:
    """Service deriving and persisting a proposal's Metis impact score."""

    def __init__(self, store: "EntityStore"):
        self.store = store

    async def calculate_metis_impact_score(self, proposal_id: int) -> float:
        """Recompute the impact score from the proposal's stored sub-metrics.

        Args:
            proposal_id: ID of the proposal to score

        Returns:
            The persisted score

        Raises:
            NotFoundError: the proposal does not exist
        """
        async with self.store.transaction():
            proposal = await self.store.get_proposal_by_id(proposal_id, for_update=True)
            if proposal is None:
                logger.warning(f"Cannot score proposal {proposal_id}: not found")
                raise NotFoundError.for_entity("Proposal", proposal_id)

            score = compute_impact_score(
                proposal.energy_efficiency,
                proposal.community_benefit,
                proposal.innovation_factor,
            )
            await self.store.update_proposal(proposal_id, ProposalUpdate(metis_impact_score=score))

        logger.info(f"Impact score of proposal {proposal_id} set to {score}")
        return score
