"""Create items table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `items` table holding ingested submissions.
How:   PostgreSQL UUID primary key with gen_random_uuid(), TIMESTAMP WITH TIME ZONE,
       status defaulting to 'pending'.

Rollback: downgrade() drops the table entirely (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "items",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.String(255),
            nullable=False,
            comment="Opaque identifier of the submitting user",
        ),
        sa.Column(
            "source_url",
            sa.Text(),
            nullable=True,
            comment="Where the submission came from, if known",
        ),
        sa.Column(
            "raw_text",
            sa.Text(),
            nullable=True,
            comment="Free-text note sent with the submission",
        ),
        sa.Column(
            "image_path",
            sa.String(512),
            nullable=True,
            comment="Object key of the uploaded image in the content bucket",
        ),
        sa.Column(
            "status",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'pending'"),
            comment="Processing state: pending, processed, failed",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this item was ingested (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Downstream processors poll newest items first
    op.create_index(
        "idx_items_created_at",
        "items",
        [sa.text("created_at DESC")],
    )
    op.create_index("idx_items_user_id", "items", ["user_id"])


def downgrade() -> None:
    """Drop the items table. All item data is lost."""
    op.drop_index("idx_items_user_id", table_name="items")
    op.drop_index("idx_items_created_at", table_name="items")
    op.drop_table("items")
