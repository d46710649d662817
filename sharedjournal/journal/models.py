"""
SQLAlchemy models for shared journal tables.
"""
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    String,
    Text,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import expression


class utcnow(expression.FunctionElement):
    type = DateTime()
    inherit_cache = True


@compiles(utcnow, "postgresql")
def pg_utcnow(element, compiler, **kwargs):
    return "TIMEZONE('utc', statement_timestamp())"


@compiles(utcnow, "sqlite")
def sqlite_utcnow(element, compiler, **kwargs):
    # Millisecond precision, parseable by the SQLite DateTime type
    return "(strftime('%Y-%m-%d %H:%M:%f', 'now'))"


@compiles(utcnow)
def default_utcnow(element, compiler, **kwargs):
    return "CURRENT_TIMESTAMP"


"""
Naming conventions doc
https://docs.sqlalchemy.org/en/20/core/constraints.html#configuring-constraint-naming-conventions
"""
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)


class SharedJournal(Base):  # type: ignore
    __tablename__ = "shared_journals"

    share_key = Column(String(8), primary_key=True, nullable=False)
    title = Column(String, nullable=False)
    created_by_id = Column(String, nullable=True)
    created_by_username = Column(String, nullable=True)
    editable_by_anyone = Column(
        Boolean, default=False, server_default=expression.false(), nullable=False
    )
    created_at = Column(
        DateTime(timezone=True), server_default=utcnow(), nullable=False, index=True
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=utcnow(),
        nullable=False,
    )


class SharedJournalEntry(Base):  # type: ignore
    __tablename__ = "shared_journal_entries"

    id = Column(String, primary_key=True, nullable=False)
    share_key = Column(
        String(8),
        ForeignKey(
            "shared_journals.share_key",
            name="fk_shared_journal_entries_shared_journals_share_key",
            ondelete="CASCADE",
        ),
        nullable=False,
    )
    content = Column(Text, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)

    created_by_id = Column(String, nullable=True)
    created_by_username = Column(String, nullable=True)
    last_edited_by_id = Column(String, nullable=True)
    last_edited_by_username = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=utcnow(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=utcnow(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_shared_journal_entries_share_key_date", "share_key", "date"),
    )
