"""create_poll_tables

Revision ID: a7e3c9d1f2b4
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a7e3c9d1f2b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'polls',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('question', sa.String(length=500), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('custom_category', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_polls_active', 'polls', ['is_active'])
    op.create_index('idx_polls_created', 'polls', ['created_at'])

    op.create_table(
        'votes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('poll_id', sa.Integer(), nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=False),
        sa.Column('device_fingerprint', sa.String(length=64), nullable=False),
        sa.Column('answer', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['poll_id'], ['polls.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('poll_id', 'ip_address', name='uq_vote_poll_ip'),
        sa.UniqueConstraint('poll_id', 'device_fingerprint', name='uq_vote_poll_device'),
    )
    op.create_index('idx_votes_poll', 'votes', ['poll_id'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('poll_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.String(length=280), nullable=False),
        sa.Column('answer', sa.Boolean(), nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=False),
        sa.Column('device_fingerprint', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['poll_id'], ['polls.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('poll_id', 'ip_address', name='uq_comment_poll_ip'),
        sa.UniqueConstraint('poll_id', 'device_fingerprint', name='uq_comment_poll_device'),
    )
    op.create_index('idx_comments_poll_created', 'comments', ['poll_id', 'created_at'])

    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admins_username', 'admins', ['username'], unique=True)


def downgrade():
    op.drop_index('ix_admins_username', table_name='admins')
    op.drop_table('admins')
    op.drop_index('idx_comments_poll_created', table_name='comments')
    op.drop_table('comments')
    op.drop_index('idx_votes_poll', table_name='votes')
    op.drop_table('votes')
    op.drop_index('idx_polls_created', table_name='polls')
    op.drop_index('idx_polls_active', table_name='polls')
    op.drop_table('polls')
