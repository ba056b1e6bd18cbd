"""Tests for store selection, sample seeding and startup wiring."""

import pytest

from app.core.config import Settings
from app.core.constants import SAMPLE_PROPOSALS
from app.core.errors import DuplicateVoteError, InvalidStateError, NotFoundError
from app.main import Crowdfund, shutdown, startup
from app.scripts.seed_proposals import seed_sample_proposals
from app.storage import InMemoryEntityStore, SQLAlchemyEntityStore, create_store


def test_create_store_memory():
    store = create_store(Settings(STORAGE_BACKEND="memory"))
    assert isinstance(store, InMemoryEntityStore)


def test_create_store_sql():
    store = create_store(
        Settings(STORAGE_BACKEND="sql", SQLALCHEMY_DATABASE_URI="sqlite+aiosqlite:///:memory:")
    )
    assert isinstance(store, SQLAlchemyEntityStore)


def test_create_store_unknown_backend():
    with pytest.raises(ValueError):
        create_store(Settings(STORAGE_BACKEND="redis"))


@pytest.mark.asyncio
async def test_seed_sample_proposals(store):
    created = await seed_sample_proposals(store)

    assert len(created) == len(SAMPLE_PROPOSALS)
    by_title = {p.title: p for p in await store.get_proposals()}
    for sample in SAMPLE_PROPOSALS:
        assert by_title[sample["title"]].raised_amount == sample["raised_amount"]
        assert by_title[sample["title"]].approved is False

    # A second run leaves the store alone
    assert await seed_sample_proposals(store) == []
    assert len(await store.get_proposals()) == len(SAMPLE_PROPOSALS)


@pytest.mark.asyncio
async def test_startup_with_sql_backend_and_seed():
    config = Settings(
        STORAGE_BACKEND="sql",
        SQLALCHEMY_DATABASE_URI="sqlite+aiosqlite:///:memory:",
        SEED_SAMPLE_PROPOSALS=True,
    )

    crowdfund = await startup(config)
    try:
        assert isinstance(crowdfund, Crowdfund)
        proposals = await crowdfund.proposals.list_proposals()
        assert len(proposals) == len(SAMPLE_PROPOSALS)
    finally:
        await shutdown(crowdfund)


@pytest.mark.asyncio
async def test_full_proposal_lifecycle():
    """Submit, approve, vote and unlock through the wired services."""
    crowdfund = await startup(Settings(STORAGE_BACKEND="memory"))

    proposal = await crowdfund.proposals.create_proposal(
        {
            "title": "Metis Hackathon",
            "description": "Prize pool and venue for a weekend hackathon on Metis.",
            "category": "Education",
            "creator_address": "0xcreator",
            "funding_goal": 300,
            "duration": 7,
        }
    )
    assert proposal.metis_impact_score == 0

    with pytest.raises(InvalidStateError):
        await crowdfund.voting.submit_vote(proposal.id, "0xa", True, 200)

    await crowdfund.approval.approve_proposal(proposal.id, True)
    assert [p.id for p in await crowdfund.proposals.list_proposals(approved_only=True)] == [proposal.id]

    await crowdfund.voting.submit_vote(proposal.id, "0xa", True, 200)
    await crowdfund.voting.submit_vote(proposal.id, "0xb", True, 100)
    against = await crowdfund.voting.submit_vote(proposal.id, "0xc", False, 50)
    with pytest.raises(DuplicateVoteError):
        await crowdfund.voting.submit_vote(proposal.id, "0xa", False, 10)

    funded = await crowdfund.proposals.get_proposal(proposal.id)
    assert funded.raised_amount == 300
    assert funded.token_stake == 350
    assert funded.goal_reached is True
    assert funded.total_votes == 3

    result = await crowdfund.approval.unlock_all_tokens_for_proposal(proposal.id)
    assert result.unlocked_count == 2
    assert against.id not in result.unlocked_vote_ids

    with pytest.raises(NotFoundError):
        await crowdfund.scoring.calculate_metis_impact_score(proposal.id + 100)

    await shutdown(crowdfund)
