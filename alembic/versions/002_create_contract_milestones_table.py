"""create contract milestones table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 10:05:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "contract_milestones",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("contract_id", sa.String(36), nullable=False),
        sa.Column("milestone_type", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("assignee_email", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"]),
        sa.CheckConstraint(
            "milestone_type IN ('review', 'renewal', 'expiration')",
            name="ck_contract_milestones_type",
        ),
    )
    op.create_index(
        "ix_contract_milestones_contract_id", "contract_milestones", ["contract_id"], unique=False
    )
    op.create_index(
        "ix_contract_milestones_due_date", "contract_milestones", ["due_date"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_contract_milestones_due_date", table_name="contract_milestones")
    op.drop_index("ix_contract_milestones_contract_id", table_name="contract_milestones")
    op.drop_table("contract_milestones")
