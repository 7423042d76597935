"""create records

Revision ID: 3f1c2a9d8e41
Revises:
Create Date: 2026-10-17 10:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d8e41"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One table holds the JSON documents of every resource collection
    op.create_table(
        "records",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("resource", sa.String(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_records_resource", "records", ["resource"], unique=False)
    op.create_index(
        "idx_records_resource_created_at",
        "records",
        ["resource", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_records_resource_created_at", table_name="records")
    op.drop_index("idx_records_resource", table_name="records")
    op.drop_table("records")
