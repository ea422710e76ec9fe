"""001: Create workflows table

Revision ID: 001_workflows
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001_workflows'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'workflows',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('original_workflow', sa.Text(), nullable=False),
        sa.Column('suggested_steps', sa.JSON(), nullable=False),
        sa.Column('user_email', sa.String(320), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('workflows')
