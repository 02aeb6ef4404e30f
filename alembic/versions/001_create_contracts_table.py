"""create contracts table

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "contracts",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("contract_number", sa.String(100), nullable=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("counterparty_name", sa.String(255), nullable=False),
        sa.Column("counterparty_email", sa.String(255), nullable=True),
        sa.Column("counterparty_address", sa.Text(), nullable=True),
        sa.Column("owner_user_id", sa.String(100), nullable=False),
        sa.Column("owner_department", sa.String(100), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="draft"),
        sa.Column("type", sa.String(100), nullable=False, server_default="Other"),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("contract_value", sa.Numeric(15, 2), nullable=True),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("payment_terms", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("contract_number", name="uq_contracts_contract_number"),
        # CHECK constraint: contract value cannot be negative
        sa.CheckConstraint(
            "contract_value IS NULL OR contract_value >= 0",
            name="ck_contracts_contract_value_non_negative",
        ),
    )
    op.create_index("ix_contracts_status", "contracts", ["status"], unique=False)
    op.create_index("ix_contracts_expiration_date", "contracts", ["expiration_date"], unique=False)
    op.create_index("ix_contracts_owner_user_id", "contracts", ["owner_user_id"], unique=False)

    if op.get_bind().dialect.name == "postgresql":
        op.execute(
            "CREATE INDEX ix_contracts_search ON contracts USING GIN "
            "(to_tsvector('english', coalesce(title, '') || ' ' || "
            "coalesce(description, '') || ' ' || coalesce(counterparty_name, '')))"
        )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP INDEX IF EXISTS ix_contracts_search")
    op.drop_index("ix_contracts_owner_user_id", table_name="contracts")
    op.drop_index("ix_contracts_expiration_date", table_name="contracts")
    op.drop_index("ix_contracts_status", table_name="contracts")
    op.drop_table("contracts")
