"""Initial schema: users, notes, note_likes

Revision ID: a1f3c9d2e7b4
Revises:
Create Date: 2025-09-20 10:12:31.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a1f3c9d2e7b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(username) <= 50', name='ck_users_username_len'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('idx_users_email', 'users', ['email'])
    op.create_index('idx_users_username', 'users', ['username'])

    op.create_table(
        'notes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('branch', sa.String(length=20), nullable=False),
        sa.Column('year', sa.String(length=1), nullable=False),
        sa.Column('subject', sa.String(length=120), nullable=False),
        sa.Column('files', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('author_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(title) <= 200', name='ck_notes_title_len'),
        sa.CheckConstraint("year IN ('1', '2', '3', '4')", name='ck_notes_year'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_notes_author_id', 'notes', ['author_id'])
    op.create_index('idx_notes_created_at', 'notes', ['created_at'])
    op.create_index('idx_notes_branch_year', 'notes', ['branch', 'year'])
    op.create_index('idx_notes_public_created', 'notes', ['is_public', 'created_at'])

    op.create_table(
        'note_likes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('note_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['note_id'], ['notes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('note_id', 'user_id', name='uq_note_likes_note_user'),
    )
    op.create_index('idx_note_likes_user_id', 'note_likes', ['user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_note_likes_user_id', table_name='note_likes')
    op.drop_table('note_likes')
    op.drop_index('idx_notes_public_created', table_name='notes')
    op.drop_index('idx_notes_branch_year', table_name='notes')
    op.drop_index('idx_notes_created_at', table_name='notes')
    op.drop_index('idx_notes_author_id', table_name='notes')
    op.drop_table('notes')
    op.drop_index('idx_users_username', table_name='users')
    op.drop_index('idx_users_email', table_name='users')
    op.drop_table('users')
