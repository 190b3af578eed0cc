"""Create snippets table

Revision ID: 001
Revises: None
Create Date: 2025-01-10 00:00:00.000000+00:00

What:  Creates `public.snippets` with its check constraints, indexes, the
       `updated_at` trigger and the owner-only row-level security policies.
How:   Columns via `op.create_table`; trigger function, full-text index and
       policies via raw SQL because Alembic has no operations for them.

The policies reference `auth.uid()` and the `authenticated` role, both of
which exist on the hosted backend. `user_id` references `auth.users(id)`.
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

SEARCH_DOCUMENT = (
    "to_tsvector('english', title || ' ' || coalesce(description, '') "
    "|| ' ' || coalesce(ai_description, ''))"
)

POLICIES = (
    ("Users can view their own snippets", "SELECT", "USING (auth.uid() = user_id)"),
    ("Users can insert their own snippets", "INSERT", "WITH CHECK (auth.uid() = user_id)"),
    ("Users can update their own snippets", "UPDATE", "USING (auth.uid() = user_id)"),
    ("Users can delete their own snippets", "DELETE", "USING (auth.uid() = user_id)"),
)


def upgrade() -> None:
    op.create_table(
        "snippets",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("language", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("ai_description", sa.Text(), nullable=True),
        sa.Column("ai_explanation", sa.Text(), nullable=True),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.Text()),
            server_default=sa.text("'{}'"),
            nullable=True,
        ),
        sa.Column(
            "is_favorite",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["auth.users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("length(trim(title)) > 0", name="title_not_empty"),
        sa.CheckConstraint("length(trim(code)) > 0", name="code_not_empty"),
    )

    op.create_index("idx_snippets_user_id", "snippets", ["user_id"])
    op.create_index("idx_snippets_language", "snippets", ["language"])
    op.create_index("idx_snippets_tags", "snippets", ["tags"], postgresql_using="gin")
    op.create_index("idx_snippets_created_at", "snippets", [sa.text("created_at DESC")])
    op.execute(f"CREATE INDEX idx_snippets_search ON snippets USING gin ({SEARCH_DOCUMENT})")

    # updated_at advances on every mutation, whoever issues the UPDATE
    op.execute(
        """
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = now();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
        """
    )
    op.execute(
        """
        CREATE TRIGGER update_snippets_updated_at
            BEFORE UPDATE ON snippets
            FOR EACH ROW
            EXECUTE FUNCTION update_updated_at_column()
        """
    )

    op.execute("ALTER TABLE snippets ENABLE ROW LEVEL SECURITY")
    for name, command, clause in POLICIES:
        op.execute(f'CREATE POLICY "{name}" ON snippets FOR {command} TO authenticated {clause}')
    op.execute(
        "GRANT SELECT, INSERT, UPDATE, DELETE ON snippets TO authenticated"
    )


def downgrade() -> None:
    """Drop the table, its policies and trigger. Destructive: all snippets are lost."""
    for name, _, _ in POLICIES:
        op.execute(f'DROP POLICY IF EXISTS "{name}" ON snippets')
    op.execute("DROP TRIGGER IF EXISTS update_snippets_updated_at ON snippets")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")
    op.execute("DROP INDEX IF EXISTS idx_snippets_search")
    op.drop_index("idx_snippets_created_at", table_name="snippets")
    op.drop_index("idx_snippets_tags", table_name="snippets")
    op.drop_index("idx_snippets_language", table_name="snippets")
    op.drop_index("idx_snippets_user_id", table_name="snippets")
    op.drop_table("snippets")
