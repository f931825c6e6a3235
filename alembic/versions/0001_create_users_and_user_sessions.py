"""Create users and user_sessions

Revision ID: 0001_create_users_and_user_sessions
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_create_users_and_user_sessions'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the user and session tables with their lookup indexes."""
    op.create_table(
        'users',
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('org_id', sa.String(length=64), nullable=True),
        sa.Column('role_id', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('active_sessions_count', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('user_id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'user_sessions',
        sa.Column('session_id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('device_info', sa.String(length=64), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_active', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('session_id'),
    )
    op.create_index('ix_user_sessions_user_id', 'user_sessions', ['user_id'], unique=False)
    # Valid-session lookups filter on all three columns
    op.create_index(
        'ix_user_sessions_user_id_active_expires',
        'user_sessions',
        ['user_id', 'is_active', 'expires_at'],
        unique=False,
    )
    # Least-recently-active eviction
    op.create_index('ix_user_sessions_last_active', 'user_sessions', ['last_active'], unique=False)


def downgrade() -> None:
    """Drop the session and user tables."""
    op.drop_index('ix_user_sessions_last_active', table_name='user_sessions')
    op.drop_index('ix_user_sessions_user_id_active_expires', table_name='user_sessions')
    op.drop_index('ix_user_sessions_user_id', table_name='user_sessions')
    op.drop_table('user_sessions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
