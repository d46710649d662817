"""
Shared journal data structures
"""
from datetime import date as date_type, datetime, time, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Naive timestamps are taken as UTC, aware ones are converted to UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError("timestamp out of range")


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Identity(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    username: Optional[str] = None


class CreateSharedJournalRequest(CamelModel):
    share_key: Optional[str] = Field(default=None, alias="shareKey")
    title: Optional[str] = None
    created_by: Optional[Identity] = Field(default=None, alias="createdBy")


class CreateSharedJournalResponse(CamelModel):
    success: bool = True
    share_key: str = Field(alias="shareKey")
    title: str
    message: str


class SharedJournalResponse(CamelModel):
    share_key: str = Field(alias="shareKey")
    title: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    created_by: Identity = Field(default_factory=Identity, alias="createdBy")
    editable_by_anyone: bool = Field(default=False, alias="editableByAnyone")


class SharedJournalEntryResponse(BaseModel):
    id: str
    content: str
    date: datetime
    updated_at: Optional[datetime] = None
    created_by_id: Optional[str] = None
    created_by_username: Optional[str] = None
    last_edited_by_id: Optional[str] = None
    last_edited_by_username: Optional[str] = None


class SharedJournalEntriesResponse(BaseModel):
    success: bool = True
    journal: SharedJournalResponse
    entries: List[SharedJournalEntryResponse] = Field(default_factory=list)


class SyncEntry(CamelModel):
    """
    Entry as sent by a client during sync. Required fields are checked before
    parsing so that missing ones are reported uniformly.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    content: str
    date: datetime
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    created_by: Optional[Identity] = Field(default=None, alias="createdBy")
    last_edited_by: Optional[Identity] = Field(default=None, alias="lastEditedBy")

    @field_validator("date", mode="before")
    @classmethod
    def date_only_as_midnight(cls, value: Any) -> Any:
        if isinstance(value, str) and len(value) == 10:
            return datetime.combine(date_type.fromisoformat(value), time())
        return value

    @field_validator("date", "updated_at")
    @classmethod
    def normalize_to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)


class SyncEntriesRequest(BaseModel):
    # Items are validated one by one so that a bad entry never fails the batch
    entries: Optional[List[Any]] = None


class SyncedEntry(BaseModel):
    id: str
    synced: bool = True


class FailedEntry(BaseModel):
    entry: Any = None
    error: str


class SyncEntriesResponse(BaseModel):
    success: bool = True
    synced: List[SyncedEntry] = Field(default_factory=list)
    failed: List[FailedEntry] = Field(default_factory=list)
    message: str


class UpdatePermissionsRequest(CamelModel):
    editable_by_anyone: Optional[StrictBool] = Field(
        default=None, alias="editableByAnyone"
    )
    user_id: Optional[str] = Field(default=None, alias="userId")


class UpdatePermissionsResponse(CamelModel):
    success: bool = True
    editable_by_anyone: bool = Field(alias="editableByAnyone")
    message: str


class SharedJournalSummary(BaseModel):
    share_key: str
    title: str
    created_at: datetime
    updated_at: datetime


class ListSharedJournalsResponse(BaseModel):
    success: bool = True
    journals: List[SharedJournalSummary] = Field(default_factory=list)


class DeleteSharedJournalResponse(BaseModel):
    success: bool = True
    message: str


class SyncResult(BaseModel):
    """
    Outcome of a sync batch as produced by the sync service.
    """

    synced: List[SyncedEntry] = Field(default_factory=list)
    failed: List[FailedEntry] = Field(default_factory=list)
    message: str
