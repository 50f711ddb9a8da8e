"""create users, data items and access grants

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:44.181204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

data_category = sa.Enum(
    'personal', 'financial', 'medical', 'professional', 'other', name='data_category'
)
access_level = sa.Enum('read', 'write', 'admin', name='access_level')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('wallet_address', sa.String(length=42), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'data_items',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('category', data_category, nullable=False),
        sa.Column('data', sa.Text(), nullable=False),
        sa.Column('is_encrypted', sa.Boolean(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('blockchain_verified', sa.Boolean(), nullable=False),
        sa.Column('blockchain_hash', sa.String(length=64), nullable=True),
        sa.Column('blockchain_tx_id', sa.String(), nullable=True),
        sa.Column('date_created', sa.DateTime(), nullable=False),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_data_items_id'), 'data_items', ['id'], unique=False)
    op.create_index(op.f('ix_data_items_owner_id'), 'data_items', ['owner_id'], unique=False)

    op.create_table(
        'access_grants',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('data_item_id', sa.UUID(), nullable=False),
        sa.Column('grantee_id', sa.UUID(), nullable=False),
        sa.Column('access_level', access_level, nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('granted_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['data_item_id'], ['data_items.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['grantee_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('data_item_id', 'grantee_id', name='uq_access_grants_item_grantee')
    )
    op.create_index(op.f('ix_access_grants_id'), 'access_grants', ['id'], unique=False)
    op.create_index(op.f('ix_access_grants_grantee_id'), 'access_grants', ['grantee_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_access_grants_grantee_id'), table_name='access_grants')
    op.drop_index(op.f('ix_access_grants_id'), table_name='access_grants')
    op.drop_table('access_grants')
    op.drop_index(op.f('ix_data_items_owner_id'), table_name='data_items')
    op.drop_index(op.f('ix_data_items_id'), table_name='data_items')
    op.drop_table('data_items')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
    access_level.drop(op.get_bind(), checkfirst=True)
    data_category.drop(op.get_bind(), checkfirst=True)
