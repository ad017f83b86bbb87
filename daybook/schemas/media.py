from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from daybook.models import MediaType


class MediaUploadRequest(BaseModel):
    """Base64 encoded photo or video to attach to the journal."""

    file_name: str = Field(..., min_length=1, max_length=255)
    file_data: str = Field(..., description="Base64 encoded file content.")
    file_type: MediaType
    mime_type: str = Field(..., max_length=100)
    diary_entry_id: UUID | None = None


class MediaAttachmentItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    diary_entry_id: UUID | None = None
    file_key: str
    file_url: str
    file_type: MediaType
    mime_type: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    uploaded_at: datetime
