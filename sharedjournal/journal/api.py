"""
Shared journal HTTP handlers.
"""
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from .. import db
from . import actions, sync
from .data import (
    CreateSharedJournalRequest,
    CreateSharedJournalResponse,
    DeleteSharedJournalResponse,
    ListSharedJournalsResponse,
    SharedJournalEntriesResponse,
    SharedJournalEntryResponse,
    SharedJournalResponse,
    SharedJournalSummary,
    SyncEntriesRequest,
    SyncEntriesResponse,
    UpdatePermissionsRequest,
    UpdatePermissionsResponse,
)
from .models import SharedJournal, SharedJournalEntry

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "journals", "description": "Operations with shared journals."},
    {"name": "entries", "description": "Operations with shared journal entries."},
    {"name": "permissions", "description": "Shared journal access management."},
]

router = APIRouter()


def journal_response(journal: SharedJournal) -> SharedJournalResponse:
    return SharedJournalResponse(
        share_key=journal.share_key,
        title=journal.title,
        created_at=journal.created_at,
        updated_at=journal.updated_at,
        created_by={
            "id": journal.created_by_id,
            "username": journal.created_by_username,
        },
        editable_by_anyone=journal.editable_by_anyone,
    )


def entry_response(entry: SharedJournalEntry) -> SharedJournalEntryResponse:
    return SharedJournalEntryResponse(
        id=entry.id,
        content=entry.content,
        date=entry.date,
        updated_at=entry.updated_at,
        created_by_id=entry.created_by_id,
        created_by_username=entry.created_by_username,
        last_edited_by_id=entry.last_edited_by_id,
        last_edited_by_username=entry.last_edited_by_username,
    )


@router.post(
    "/journal/createShared",
    tags=["journals"],
    response_model=CreateSharedJournalResponse,
)
async def create_shared_journal_handler(
    create_request: CreateSharedJournalRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> CreateSharedJournalResponse:
    """
    Creates shared journal with provided or generated share key.
    """
    try:
        journal = await actions.create_journal(
            db_session,
            title=create_request.title,
            share_key=create_request.share_key,
            created_by=create_request.created_by,
        )
    except actions.InvalidShareKey:
        raise HTTPException(status_code=400, detail="Invalid share key format")
    except actions.InvalidParameters as e:
        raise HTTPException(status_code=400, detail=str(e))
    except actions.ShareKeyExists:
        raise HTTPException(status_code=409, detail="Share key already exists")
    except Exception as e:
        logger.error(f"Error creating shared journal: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create shared journal")

    return CreateSharedJournalResponse(
        share_key=journal.share_key,
        title=journal.title,
        message="Shared journal created successfully",
    )


@router.get(
    "/journal/{share_key}/entries",
    tags=["entries"],
    response_model=SharedJournalEntriesResponse,
)
async def get_journal_entries_handler(
    share_key: str = Path(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> SharedJournalEntriesResponse:
    """
    Journal with all its entries, newest date first.
    """
    try:
        journal, entries = await actions.get_journal_entries(db_session, share_key)
    except actions.InvalidShareKey:
        raise HTTPException(status_code=400, detail="Invalid share key format")
    except actions.JournalNotFound:
        raise HTTPException(status_code=404, detail="Journal not found")
    except Exception as e:
        logger.error(f"Error fetching journal entries: {str(e)}")
        raise HTTPException(status_code=500, detail="Database error")

    return SharedJournalEntriesResponse(
        journal=journal_response(journal),
        entries=[entry_response(entry) for entry in entries],
    )


@router.post(
    "/journal/{share_key}/entries/sync",
    tags=["entries"],
    response_model=SyncEntriesResponse,
)
async def sync_journal_entries_handler(
    share_key: str = Path(...),
    sync_request: SyncEntriesRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> SyncEntriesResponse:
    """
    Creates or updates entries by id. Entries which could not be synced are listed in
    failed and do not fail the request.
    """
    try:
        result = await sync.sync_entries(db_session, share_key, sync_request.entries)
    except actions.InvalidShareKey:
        raise HTTPException(status_code=400, detail="Invalid share key format")
    except actions.InvalidParameters as e:
        raise HTTPException(status_code=400, detail=str(e))
    except actions.JournalNotFound:
        raise HTTPException(status_code=404, detail="Journal not found")
    except Exception as e:
        logger.error(f"Error in sync transaction: {str(e)}")
        raise HTTPException(status_code=500, detail="Database error during sync")

    return SyncEntriesResponse(
        synced=result.synced, failed=result.failed, message=result.message
    )


@router.patch(
    "/journal/{share_key}/permissions",
    tags=["permissions"],
    response_model=UpdatePermissionsResponse,
)
async def update_journal_permissions_handler(
    share_key: str = Path(...),
    permissions_request: UpdatePermissionsRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> UpdatePermissionsResponse:
    try:
        journal = await actions.update_permissions(
            db_session,
            share_key,
            editable_by_anyone=permissions_request.editable_by_anyone,
            user_id=permissions_request.user_id,
        )
    except actions.InvalidShareKey:
        raise HTTPException(status_code=400, detail="Invalid share key format")
    except actions.InvalidParameters as e:
        raise HTTPException(status_code=400, detail=str(e))
    except actions.JournalNotFound:
        raise HTTPException(status_code=404, detail="Journal not found")
    except actions.PermissionDenied as e:
        raise HTTPException(status_code=403, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating permissions: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update permissions")

    editable_by_anyone = journal.editable_by_anyone
    return UpdatePermissionsResponse(
        editable_by_anyone=editable_by_anyone,
        message=f"Journal permissions updated: {'anyone can edit' if editable_by_anyone else 'creator only'}",
    )


@router.get("/journals", tags=["journals"], response_model=ListSharedJournalsResponse)
async def list_journals_handler(
    db_session: Session = Depends(db.yield_connection_from_env),
) -> ListSharedJournalsResponse:
    """
    All shared journals, newest first.
    """
    try:
        journals = await actions.list_journals(db_session)
    except Exception as e:
        logger.error(f"Error fetching journals: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch journals")

    return ListSharedJournalsResponse(
        journals=[
            SharedJournalSummary(
                share_key=journal.share_key,
                title=journal.title,
                created_at=journal.created_at,
                updated_at=journal.updated_at,
            )
            for journal in journals
        ]
    )


@router.delete(
    "/journal/{share_key}",
    tags=["journals"],
    response_model=DeleteSharedJournalResponse,
)
async def delete_journal_handler(
    share_key: str = Path(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> DeleteSharedJournalResponse:
    """
    Deletes journal and all its entries.
    """
    try:
        await actions.delete_journal(db_session, share_key)
    except actions.InvalidShareKey:
        raise HTTPException(status_code=400, detail="Invalid share key format")
    except actions.JournalNotFound:
        raise HTTPException(status_code=404, detail="Journal not found")
    except Exception as e:
        logger.error(f"Error deleting journal: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete journal")

    return DeleteSharedJournalResponse(
        message="Journal and all entries deleted successfully"
    )
