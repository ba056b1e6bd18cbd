#!/usr/bin/env python
"""Script to populate an empty store with the sample proposals."""

import asyncio
import logging
from typing import List

from app.core.config import settings
from app.core.constants import SAMPLE_PROPOSALS
from app.db.session import create_tables
from app.schemas.proposal import Proposal, ProposalCreate, ProposalUpdate
from app.storage import EntityStore, SQLAlchemyEntityStore, create_store

logger = logging.getLogger(__name__)


async def seed_sample_proposals(store: EntityStore) -> List[Proposal]:
    """Create the sample proposals if the store has none yet."""
    existing = await store.get_proposals()
    if existing:
        logger.info(f"Store already holds {len(existing)} proposal(s), skipping seed")
        return []

    created = []
    async with store.transaction():
        for sample in SAMPLE_PROPOSALS:
            fields = dict(sample)
            raised_amount = fields.pop("raised_amount", 0)
            proposal = await store.create_proposal(ProposalCreate(**fields))
            if raised_amount:
                proposal = await store.update_proposal(proposal.id, ProposalUpdate(raised_amount=raised_amount))
            created.append(proposal)

    logger.info(f"Seeded {len(created)} sample proposal(s)")
    return created


async def main():
    store = create_store(settings)
    try:
        if isinstance(store, SQLAlchemyEntityStore):
            await create_tables(store.engine)
        await seed_sample_proposals(store)
    finally:
        await store.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
