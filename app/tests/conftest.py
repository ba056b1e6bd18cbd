"""Test fixtures for the application."""

import pytest
import pytest_asyncio

from app.core.config import settings
from app.db.session import create_engine, create_tables, drop_tables
from app.schemas.proposal import ProposalCreate
from app.services.approval import ApprovalService
from app.services.proposals import ProposalService
from app.services.scoring import ImpactScoreService
from app.services.voting import VotingService
from app.storage import InMemoryEntityStore, SQLAlchemyEntityStore


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request):
    """Yield a clean EntityStore for each backend."""
    if request.param == "memory":
        yield InMemoryEntityStore()
        return

    # Create an engine connected to the test database
    engine = create_engine(settings.TEST_DATABASE_URL, echo=False)
    await create_tables(engine)

    sql_store = SQLAlchemyEntityStore.from_engine(engine)
    yield sql_store

    # Drop all tables after the test is complete
    await drop_tables(engine)
    await sql_store.close()


@pytest.fixture
def proposal_service(store):
    return ProposalService(store)


@pytest.fixture
def voting_service(store):
    return VotingService(store)


@pytest.fixture
def approval_service(store):
    return ApprovalService(store)


@pytest.fixture
def scoring_service(store):
    return ImpactScoreService(store)


@pytest.fixture
def proposal_data():
    """Return a valid proposal submission."""
    return ProposalCreate(
        title="Solar Powered Node",
        description="Run a validator node entirely on solar power for a year.",
        category="Environment",
        creator_address="0xabc0000000000000000000000000000000000001",
        funding_goal=5000,
        duration=30,
        energy_efficiency=8,
        community_benefit=6,
        innovation_factor=10,
    )


@pytest_asyncio.fixture
async def proposal(store, proposal_data):
    """Create an unapproved proposal."""
    return await store.create_proposal(proposal_data)


@pytest_asyncio.fixture
async def approved_proposal(store, proposal):
    """Create a proposal and approve it for voting."""
    return await store.approve_proposal(proposal.id, True)
