"""Shared journals and entries

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2025-03-02 11:42:07.518204

"""
from alembic import op
import sqlalchemy as sa

from sharedjournal.journal.models import utcnow


# revision identifiers, used by Alembic.
revision = "3f1c2a9b7d10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "shared_journals",
        sa.Column("share_key", sa.String(length=8), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("created_by_id", sa.String(), nullable=True),
        sa.Column("created_by_username", sa.String(), nullable=True),
        sa.Column(
            "editable_by_anyone",
            sa.Boolean(),
            server_default=sa.false(),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=utcnow(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=utcnow(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("share_key", name=op.f("pk_shared_journals")),
    )
    op.create_index(
        op.f("ix_shared_journals_created_at"),
        "shared_journals",
        ["created_at"],
        unique=False,
    )
    op.create_table(
        "shared_journal_entries",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("share_key", sa.String(length=8), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by_id", sa.String(), nullable=True),
        sa.Column("created_by_username", sa.String(), nullable=True),
        sa.Column("last_edited_by_id", sa.String(), nullable=True),
        sa.Column("last_edited_by_username", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=utcnow(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=utcnow(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["share_key"],
            ["shared_journals.share_key"],
            name="fk_shared_journal_entries_shared_journals_share_key",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_shared_journal_entries")),
    )
    op.create_index(
        "ix_shared_journal_entries_share_key_date",
        "shared_journal_entries",
        ["share_key", "date"],
        unique=False,
    )


def downgrade():
    op.drop_index(
        "ix_shared_journal_entries_share_key_date",
        table_name="shared_journal_entries",
    )
    op.drop_table("shared_journal_entries")
    op.drop_index(op.f("ix_shared_journals_created_at"), table_name="shared_journals")
    op.drop_table("shared_journals")
