import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from app.core.config import Settings, settings as default_settings
from app.db.session import create_tables
from app.scripts.seed_proposals import seed_sample_proposals
from app.services.approval import ApprovalService
from app.services.proposals import ProposalService
from app.services.scoring import ImpactScoreService
from app.services.users import UserService
from app.services.voting import VotingService
from app.storage import EntityStore, SQLAlchemyEntityStore, create_store

logger = logging.getLogger(__name__)


@dataclass
class Crowdfund:
    """The crowdfunding core wired around one explicitly owned store.

    Request handlers receive this object instead of reaching for a global
    store.
    """

    store: EntityStore
    users: UserService = field(init=False)
    proposals: ProposalService = field(init=False)
    voting: VotingService = field(init=False)
    approval: ApprovalService = field(init=False)
    scoring: ImpactScoreService = field(init=False)

    def __post_init__(self):
        self.users = UserService(self.store)
        self.proposals = ProposalService(self.store)
        self.voting = VotingService(self.store)
        self.approval = ApprovalService(self.store)
        self.scoring = ImpactScoreService(self.store)


def configure_logging(config: Optional[Settings] = None) -> None:
    config = config or default_settings
    level = logging.DEBUG if config.DEBUG else getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def startup(config: Optional[Settings] = None, store: Optional[EntityStore] = None) -> Crowdfund:
    """Build the store and services, preparing tables and sample data as configured."""
    config = config or default_settings
    store = store or create_store(config)

    try:
        if isinstance(store, SQLAlchemyEntityStore) and store.engine is not None:
            await create_tables(store.engine)
        if config.SEED_SAMPLE_PROPOSALS:
            await seed_sample_proposals(store)
        logger.info("Startup tasks completed")
    except Exception as e:
        logger.error(f"Error during startup: {e}")
        await store.close()
        raise

    return Crowdfund(store)


async def shutdown(crowdfund: Crowdfund) -> None:
    await crowdfund.store.close()
    logger.info("Store closed")


async def _main():
    configure_logging()
    crowdfund = await startup()
    try:
        proposals = await crowdfund.proposals.list_proposals()
        logger.info(f"{default_settings.PROJECT_NAME} ready with {len(proposals)} proposal(s)")
    finally:
        await shutdown(crowdfund)


if __name__ == "__main__":
    asyncio.run(_main())
