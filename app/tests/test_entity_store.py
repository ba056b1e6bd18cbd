"""Tests for both EntityStore backends."""

import pytest
from pydantic import ValidationError

from app.core.errors import DuplicateVoteError, NotFoundError
from app.schemas.proposal import ProposalUpdate
from app.schemas.user import UserCreate
from app.schemas.vote import VoteCreate


@pytest.mark.asyncio
async def test_create_and_get_user(store):
    """Test creating a user and reading it back by id and username."""
    user = await store.create_user(UserCreate(username="alice", password="secret"))

    assert user.id is not None
    assert (await store.get_user(user.id)) == user
    assert (await store.get_user_by_username("alice")) == user


@pytest.mark.asyncio
async def test_get_missing_user_returns_none(store):
    assert await store.get_user(42) is None
    assert await store.get_user_by_username("nobody") is None


@pytest.mark.asyncio
async def test_create_proposal_initialises_derived_fields(proposal, proposal_data):
    assert proposal.id is not None
    assert proposal.title == proposal_data.title
    assert proposal.raised_amount == 0
    assert proposal.votes_for == 0
    assert proposal.votes_against == 0
    assert proposal.token_stake == 0
    assert proposal.approved is False
    assert proposal.created_at is not None


@pytest.mark.asyncio
async def test_proposal_ids_are_unique(store, proposal_data):
    first = await store.create_proposal(proposal_data)
    second = await store.create_proposal(proposal_data)

    assert first.id != second.id


@pytest.mark.asyncio
async def test_get_proposals_filters_approved(store, proposal_data):
    """Test listing all proposals versus approved ones only."""
    pending = await store.create_proposal(proposal_data)
    approved = await store.create_proposal(proposal_data)
    await store.approve_proposal(approved.id, True)

    all_ids = {p.id for p in await store.get_proposals()}
    approved_ids = {p.id for p in await store.get_proposals(approved_only=True)}

    assert all_ids == {pending.id, approved.id}
    assert approved_ids == {approved.id}


@pytest.mark.asyncio
async def test_update_proposal_merges_fields(store, proposal):
    updated = await store.update_proposal(proposal.id, ProposalUpdate(title="New title", raised_amount=250))

    assert updated.title == "New title"
    assert updated.raised_amount == 250
    assert updated.description == proposal.description
    assert (await store.get_proposal_by_id(proposal.id)).title == "New title"


@pytest.mark.asyncio
async def test_update_missing_proposal_returns_none(store):
    assert await store.update_proposal(999, ProposalUpdate(title="x")) is None
    assert await store.approve_proposal(999, True) is None
    assert await store.increment_proposal_totals(999, votes_for=1) is None


def test_proposal_update_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        ProposalUpdate(id=5)


@pytest.mark.asyncio
async def test_increment_proposal_totals(store, proposal):
    await store.increment_proposal_totals(proposal.id, votes_for=1, raised_amount=100, token_stake=100)
    updated = await store.increment_proposal_totals(proposal.id, votes_against=1, token_stake=40)

    assert updated.votes_for == 1
    assert updated.votes_against == 1
    assert updated.raised_amount == 100
    assert updated.token_stake == 140


@pytest.mark.asyncio
async def test_create_vote_is_locked(store, proposal):
    vote = await store.create_vote(
        VoteCreate(proposal_id=proposal.id, voter_address="0x1", support=True, staked_amount=10)
    )

    assert vote.locked is True
    assert await store.get_vote_by_address_and_proposal(proposal.id, "0x1") == vote
    assert await store.get_vote_by_address_and_proposal(proposal.id, "0x2") is None
    assert await store.get_votes_by_proposal_id(proposal.id) == [vote]


@pytest.mark.asyncio
async def test_create_vote_rejects_duplicate_pair(store, proposal):
    data = VoteCreate(proposal_id=proposal.id, voter_address="0x1", support=True, staked_amount=10)
    await store.create_vote(data)

    with pytest.raises(DuplicateVoteError):
        await store.create_vote(data)

    assert len(await store.get_votes_by_proposal_id(proposal.id)) == 1


@pytest.mark.asyncio
async def test_unlock_votes_by_side(store, proposal):
    yes = await store.create_vote(VoteCreate(proposal_id=proposal.id, voter_address="0x1", support=True, staked_amount=5))
    no = await store.create_vote(VoteCreate(proposal_id=proposal.id, voter_address="0x2", support=False, staked_amount=5))

    unlocked = await store.unlock_votes(proposal.id, support=True)

    assert [v.id for v in unlocked] == [yes.id]
    votes = {v.id: v for v in await store.get_votes_by_proposal_id(proposal.id)}
    assert votes[yes.id].locked is False
    assert votes[no.id].locked is True

    # Already unlocked votes are not reported again
    assert await store.unlock_votes(proposal.id, support=True) == []


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(store, proposal):
    """Nothing written inside a failed transaction survives."""
    with pytest.raises(RuntimeError):
        async with store.transaction():
            await store.create_vote(
                VoteCreate(proposal_id=proposal.id, voter_address="0x1", support=True, staked_amount=10)
            )
            await store.increment_proposal_totals(proposal.id, votes_for=1)
            raise RuntimeError("boom")

    assert await store.get_votes_by_proposal_id(proposal.id) == []
    stored = await store.get_proposal_by_id(proposal.id)
    assert stored.votes_for == 0


@pytest.mark.asyncio
async def test_transaction_commits_on_success(store, proposal):
    async with store.transaction():
        await store.create_vote(
            VoteCreate(proposal_id=proposal.id, voter_address="0x1", support=True, staked_amount=10)
        )
        await store.increment_proposal_totals(proposal.id, votes_for=1)

    assert len(await store.get_votes_by_proposal_id(proposal.id)) == 1
    assert (await store.get_proposal_by_id(proposal.id)).votes_for == 1


@pytest.mark.asyncio
async def test_returned_entities_are_detached(store, proposal):
    """Editing a returned entity does not change what the store holds."""
    fetched = await store.get_proposal_by_id(proposal.id)
    fetched.votes_for = 99
    fetched.approved = True

    vote = await store.create_vote(
        VoteCreate(proposal_id=proposal.id, voter_address="0x1", support=True, staked_amount=10)
    )
    vote.locked = False
    listed = await store.get_proposals()
    listed[0].raised_amount = 1000

    stored = await store.get_proposal_by_id(proposal.id)
    assert stored.votes_for == 0
    assert stored.approved is False
    assert stored.raised_amount == 0
    assert (await store.get_votes_by_proposal_id(proposal.id))[0].locked is True


@pytest.mark.asyncio
async def test_create_vote_for_missing_proposal(store):
    with pytest.raises(NotFoundError):
        await store.create_vote(VoteCreate(proposal_id=999, voter_address="0x1", support=True, staked_amount=10))

    assert await store.get_votes_by_proposal_id(999) == []


@pytest.mark.asyncio
async def test_nested_transaction_joins_outer(store, proposal):
    """An inner transaction is part of the outer one and rolls back with it."""
    with pytest.raises(RuntimeError):
        async with store.transaction():
            async with store.transaction():
                await store.increment_proposal_totals(proposal.id, votes_for=1)
            assert (await store.get_proposal_by_id(proposal.id)).votes_for == 1
            raise RuntimeError("boom")

    assert (await store.get_proposal_by_id(proposal.id)).votes_for == 0

    async with store.transaction():
        async with store.transaction():
            await store.increment_proposal_totals(proposal.id, votes_for=1)

    assert (await store.get_proposal_by_id(proposal.id)).votes_for == 1
