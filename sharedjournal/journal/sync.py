"""
Merge of client entry batches into a shared journal.

Entries are upserted by id one at a time, each inside its own savepoint, so a faulty
entry is reported in the failed list without affecting the rest of the batch. The whole
batch, together with the journal timestamp, is committed as a single transaction.
"""
import logging
from typing import Any, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .actions import InvalidParameters, ensure_share_key, get_journal, utc_now
from .data import FailedEntry, Identity, SyncEntry, SyncedEntry, SyncResult
from .models import SharedJournalEntry

logger = logging.getLogger(__name__)

REQUIRED_ENTRY_FIELDS = ("id", "content", "date")
MISSING_FIELDS_ERROR = "Missing required fields (id, content, date)"


def has_required_fields(raw_entry: Any) -> bool:
    if not isinstance(raw_entry, dict):
        return False
    return all(raw_entry.get(field) for field in REQUIRED_ENTRY_FIELDS)


def validation_error_message(error: ValidationError) -> str:
    details = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        details.append(f"{location}: {item.get('msg')}")
    return f"Invalid entry ({'; '.join(details)})"


def _pick(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def upsert_entry(db_session: Session, share_key: str, entry: SyncEntry) -> SharedJournalEntry:
    """
    Updates entry with the same id or inserts a new one into journal with share_key.

    Lookup is by id only, regardless of the journal the entry belongs to. The creator of an
    existing entry is kept, last editor falls back to the creator when not provided.
    """
    created_by = entry.created_by or Identity()
    last_edited_by = entry.last_edited_by or Identity()
    updated_at = entry.updated_at or utc_now()

    journal_entry = db_session.get(SharedJournalEntry, entry.id)
    if journal_entry is not None:
        journal_entry.content = entry.content
        journal_entry.date = entry.date
        journal_entry.updated_at = updated_at
        journal_entry.last_edited_by_id = _pick(
            last_edited_by.id, journal_entry.created_by_id
        )
        journal_entry.last_edited_by_username = _pick(
            last_edited_by.username, journal_entry.created_by_username
        )
    else:
        journal_entry = SharedJournalEntry(
            id=entry.id,
            share_key=share_key,
            content=entry.content,
            date=entry.date,
            updated_at=updated_at,
            created_by_id=_pick(created_by.id),
            created_by_username=_pick(created_by.username),
            last_edited_by_id=_pick(last_edited_by.id, created_by.id),
            last_edited_by_username=_pick(last_edited_by.username, created_by.username),
        )
        db_session.add(journal_entry)

    db_session.flush()
    return journal_entry


async def sync_entries(
    db_session: Session, share_key: str, entries: Optional[List[Any]]
) -> SyncResult:
    """
    Upserts batch of entries into journal.

    Per-entry problems never fail the batch, they are collected into the failed list. Only
    invalid input, a missing journal or a fault committing the batch raise.
    """
    ensure_share_key(share_key)
    if entries is None or not isinstance(entries, list):
        raise InvalidParameters("Entries array is required")

    journal = await get_journal(db_session, share_key)

    if len(entries) == 0:
        return SyncResult(message="No entries to sync")

    synced: List[SyncedEntry] = []
    failed: List[FailedEntry] = []

    for raw_entry in entries:
        if not has_required_fields(raw_entry):
            failed.append(FailedEntry(entry=raw_entry, error=MISSING_FIELDS_ERROR))
            continue

        try:
            entry = SyncEntry.model_validate(raw_entry)
        except ValidationError as err:
            failed.append(
                FailedEntry(entry=raw_entry, error=validation_error_message(err))
            )
            continue

        try:
            with db_session.begin_nested():
                upsert_entry(db_session, share_key, entry)
        except (SQLAlchemyError, ValueError) as err:
            # psycopg2 raises a plain ValueError for NUL characters
            logger.error(f"Error syncing entry {entry.id} into journal {share_key}: {err}")
            failed.append(FailedEntry(entry=raw_entry, error=str(err)))
            continue

        synced.append(SyncedEntry(id=entry.id))

    journal.updated_at = utc_now()
    try:
        db_session.commit()
    except SQLAlchemyError:
        db_session.rollback()
        raise

    logger.info(
        f"Synced {len(synced)} entries into journal {share_key}, {len(failed)} failed"
    )
    return SyncResult(
        synced=synced,
        failed=failed,
        message=f"Synced {len(synced)} entries, {len(failed)} failed",
    )
