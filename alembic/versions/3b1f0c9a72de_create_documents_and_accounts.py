"""create_documents_and_accounts

Revision ID: 3b1f0c9a72de
Revises:
Create Date: 2026-10-19 10:12:40.418203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f0c9a72de'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('admin_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('uid', sa.String(64), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('display_name', sa.String(100), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_admin_accounts_id', 'admin_accounts', ['id'])
    op.create_index('ix_admin_accounts_uid', 'admin_accounts', ['uid'], unique=True)
    op.create_index('ix_admin_accounts_email', 'admin_accounts', ['email'], unique=True)

    op.create_table('documents',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('collection', sa.String(512), nullable=False),
        sa.Column('doc_id', sa.String(64), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('collection', 'doc_id', name='uq_collection_doc')
    )
    op.create_index('ix_documents_id', 'documents', ['id'])
    op.create_index('ix_documents_collection', 'documents', ['collection'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_documents_collection', table_name='documents')
    op.drop_index('ix_documents_id', table_name='documents')
    op.drop_table('documents')
    op.drop_index('ix_admin_accounts_email', table_name='admin_accounts')
    op.drop_index('ix_admin_accounts_uid', table_name='admin_accounts')
    op.drop_index('ix_admin_accounts_id', table_name='admin_accounts')
    op.drop_table('admin_accounts')
