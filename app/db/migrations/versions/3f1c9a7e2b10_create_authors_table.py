"""Create authors table

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('authors',
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('authorname', sa.Text(), nullable=False),
        sa.Column('password', sa.Text(), nullable=False, comment='bcrypt hash'),
        sa.Column('is_authorised', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.PrimaryKeyConstraint('email')
    )


def downgrade() -> None:
    op.drop_table('authors')
