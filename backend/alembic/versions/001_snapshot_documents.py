"""Create snapshot_documents table for the SQL snapshot store.

Revision ID: 001_snapshot_documents
Revises:
Create Date: 2026-10-17

One row per persisted resource (core, orders, users), each holding the whole
JSON document plus a revision counter.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_snapshot_documents'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'snapshot_documents',
        sa.Column('name', sa.String(20), primary_key=True),
        sa.Column('body', sa.JSON(), nullable=False),
        sa.Column('revision', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('snapshot_documents')
