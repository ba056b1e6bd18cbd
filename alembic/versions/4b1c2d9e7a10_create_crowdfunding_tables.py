"""create user, proposal and vote tables

Revision ID: 4b1c2d9e7a10
Revises:
Create Date: 2026-10-19 10:12:44.120551

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1c2d9e7a10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
    )
    op.create_index(op.f('ix_user_username'), 'user', ['username'], unique=True)

    op.create_table(
        'proposal',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(255), nullable=False),
        sa.Column('creator_address', sa.String(255), nullable=False),
        sa.Column('funding_goal', sa.Integer(), nullable=False),
        sa.Column('raised_amount', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('votes_for', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('votes_against', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('token_stake', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('approved', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('metis_impact_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('energy_efficiency', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('community_benefit', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('innovation_factor', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index(op.f('ix_proposal_title'), 'proposal', ['title'], unique=False)
    op.create_index(op.f('ix_proposal_creator_address'), 'proposal', ['creator_address'], unique=False)
    op.create_index(op.f('ix_proposal_created_at'), 'proposal', ['created_at'], unique=False)
    op.create_index(op.f('ix_proposal_approved'), 'proposal', ['approved'], unique=False)

    op.create_table(
        'vote',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('proposal_id', sa.Integer(), sa.ForeignKey('proposal.id'), nullable=False),
        sa.Column('voter_address', sa.String(255), nullable=False),
        sa.Column('support', sa.Boolean(), nullable=False),
        sa.Column('staked_amount', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('locked', sa.Boolean(), nullable=False, server_default='true'),
        sa.UniqueConstraint('proposal_id', 'voter_address', name='uq_vote_proposal_voter'),
    )
    op.create_index(op.f('ix_vote_proposal_id'), 'vote', ['proposal_id'], unique=False)
    op.create_index(op.f('ix_vote_voter_address'), 'vote', ['voter_address'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_vote_voter_address'), table_name='vote')
    op.drop_index(op.f('ix_vote_proposal_id'), table_name='vote')
    op.drop_table('vote')

    op.drop_index(op.f('ix_proposal_approved'), table_name='proposal')
    op.drop_index(op.f('ix_proposal_created_at'), table_name='proposal')
    op.drop_index(op.f('ix_proposal_creator_address'), table_name='proposal')
    op.drop_index(op.f('ix_proposal_title'), table_name='proposal')
    op.drop_table('proposal')

    op.drop_index(op.f('ix_user_username'), table_name='user')
    op.drop_table('user')
