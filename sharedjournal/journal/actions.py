"""
Shared journal actions
"""
import logging
import secrets
import string
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .data import Identity
from .models import SharedJournal, SharedJournalEntry
from ..utils.settings import SHARE_KEY_LENGTH, SHAREDJOURNAL_STRICT_SHARE_KEYS

logger = logging.getLogger(__name__)


class JournalNotFound(Exception):
    """
    Raised on actions that involve shared journals which are not present in the database.
    """


class ShareKeyExists(Exception):
    """
    Raised when a journal is created with a share key that is already taken.
    """


class PermissionDenied(Exception):
    """
    Raised when someone other than the journal creator changes journal permissions.
    """


class InvalidShareKey(ValueError):
    """
    Raised when a share key does not have the expected format.
    """


class InvalidParameters(ValueError):
    """
    Raised when operations are applied to a journal but invalid parameters are provided.
    """


share_key_symbols = string.ascii_uppercase + string.digits


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_share_key() -> str:
    """
    Random share key. Collisions are not checked here, they surface as ShareKeyExists on insert.
    """
    return "".join(secrets.choice(share_key_symbols) for _ in range(SHARE_KEY_LENGTH))


def is_valid_share_key(key: Optional[str], strict: bool = SHAREDJOURNAL_STRICT_SHARE_KEYS) -> bool:
    if not isinstance(key, str) or len(key) != SHARE_KEY_LENGTH:
        return False
    if strict:
        return all(symbol in share_key_symbols for symbol in key)
    return True


def ensure_share_key(key: Optional[str]) -> str:
    if not is_valid_share_key(key):
        raise InvalidShareKey("Invalid share key format")
    return key  # type: ignore


async def get_journal(db_session: Session, share_key: str) -> SharedJournal:
    """
    Returns the journal with the given share key or raises JournalNotFound.
    """
    ensure_share_key(share_key)
    journal = (
        db_session.query(SharedJournal)
        .filter(SharedJournal.share_key == share_key)
        .one_or_none()
    )
    if journal is None:
        raise JournalNotFound(f"Journal not found: {share_key}")
    return journal


async def create_journal(
    db_session: Session,
    title: Optional[str],
    share_key: Optional[str] = None,
    created_by: Optional[Identity] = None,
) -> SharedJournal:
    """
    Creates a shared journal. Uses the given share key if there is one, otherwise generates
    a new key. An existing journal with the same key is never overwritten.
    """
    if not title:
        raise InvalidParameters("Title is required")

    if share_key:
        ensure_share_key(share_key)
    else:
        share_key = generate_share_key()

    existing_journal = (
        db_session.query(SharedJournal)
        .filter(SharedJournal.share_key == share_key)
        .one_or_none()
    )
    if existing_journal is not None:
        raise ShareKeyExists(f"Share key already exists: {share_key}")

    if created_by is None:
        created_by = Identity()

    journal = SharedJournal(
        share_key=share_key,
        title=title,
        created_by_id=created_by.id or None,
        created_by_username=created_by.username or None,
        editable_by_anyone=False,
    )
    db_session.add(journal)
    try:
        db_session.commit()
    except IntegrityError:
        # Concurrent create with the same key
        db_session.rollback()
        raise ShareKeyExists(f"Share key already exists: {share_key}")

    logger.info(f"Created shared journal {share_key}")
    return journal


async def get_journal_entries(
    db_session: Session, share_key: str
) -> Tuple[SharedJournal, List[SharedJournalEntry]]:
    """
    Returns journal with all of its entries, newest date first.
    """
    journal = await get_journal(db_session, share_key)
    entries = (
        db_session.query(SharedJournalEntry)
        .filter(SharedJournalEntry.share_key == share_key)
        .order_by(SharedJournalEntry.date.desc())
        .all()
    )
    return journal, entries


async def update_permissions(
    db_session: Session,
    share_key: str,
    editable_by_anyone: Optional[bool],
    user_id: Optional[str] = None,
) -> SharedJournal:
    """
    Toggles editable_by_anyone flag.

    Only the creator may change permissions, but the check is applied only when both the
    requesting user id and the journal creator are known.
    """
    ensure_share_key(share_key)
    if not isinstance(editable_by_anyone, bool):
        raise InvalidParameters("editableByAnyone must be a boolean")

    journal = await get_journal(db_session, share_key)

    if user_id and journal.created_by_id and user_id != journal.created_by_id:
        logger.warning(
            f"User {user_id} attempted to change permissions of journal {share_key}"
        )
        raise PermissionDenied("Only the journal creator can change permissions")

    journal.editable_by_anyone = editable_by_anyone
    journal.updated_at = utc_now()
    db_session.commit()

    return journal


async def list_journals(db_session: Session) -> List[SharedJournal]:
    """
    Return list of all shared journals, newest first.
    """
    journals = (
        db_session.query(SharedJournal).order_by(SharedJournal.created_at.desc()).all()
    )
    return journals


async def delete_journal(db_session: Session, share_key: str) -> None:
    """
    Deletes journal entries and the journal itself in one transaction.
    """
    ensure_share_key(share_key)
    try:
        db_session.query(SharedJournalEntry).filter(
            SharedJournalEntry.share_key == share_key
        ).delete(synchronize_session=False)
        deleted = (
            db_session.query(SharedJournal)
            .filter(SharedJournal.share_key == share_key)
            .delete(synchronize_session=False)
        )
    except SQLAlchemyError:
        db_session.rollback()
        raise

    if deleted == 0:
        db_session.rollback()
        raise JournalNotFound(f"Journal not found: {share_key}")

    db_session.commit()
    logger.info(f"Deleted shared journal {share_key} with all entries")
