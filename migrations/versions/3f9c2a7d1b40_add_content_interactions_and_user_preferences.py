"""add_content_interactions_and_user_preferences

Revision ID: 3f9c2a7d1b40
Revises:
Create Date: 2026-01-05 14:12:08.417305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'content_interactions',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('content_id', sa.String(length=255), nullable=False),
        sa.Column('content_type', sa.String(length=50), nullable=False, server_default='video'),
        sa.Column('watch_duration', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_duration', sa.Float(), nullable=False, server_default='0'),
        sa.Column('watch_completion_rate', sa.Float(), nullable=False, server_default='0'),
        sa.Column('attention_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('liked', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('shared', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('skipped', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('tags', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'content_id', name='unique_user_content_interaction'),
    )
    op.create_index('ix_content_interactions_id', 'content_interactions', ['id'])
    op.create_index('ix_content_interactions_user_id', 'content_interactions', ['user_id'])
    op.create_index('ix_content_interactions_content_id', 'content_interactions', ['content_id'])
    op.create_index('ix_content_interactions_created_at', 'content_interactions', ['created_at'])

    op.create_table(
        'user_preferences',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('avg_watch_time', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_content_views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('focus_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('engagement_score', sa.Float(), nullable=False, server_default='50'),
        sa.Column('liked_tags', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('disliked_tags', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('preferred_categories', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('last_seen_content', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_user_preferences_id', 'user_preferences', ['id'])
    op.create_index('ix_user_preferences_user_id', 'user_preferences', ['user_id'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_user_preferences_user_id', 'user_preferences')
    op.drop_index('ix_user_preferences_id', 'user_preferences')
    op.drop_table('user_preferences')

    op.drop_index('ix_content_interactions_created_at', 'content_interactions')
    op.drop_index('ix_content_interactions_content_id', 'content_interactions')
    op.drop_index('ix_content_interactions_user_id', 'content_interactions')
    op.drop_index('ix_content_interactions_id', 'content_interactions')
    op.drop_table('content_interactions')
