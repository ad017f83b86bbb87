from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from daybook.api.deps import get_current_user_id, get_media_service
from daybook.core.errors import ForbiddenError, StorageUnavailableError
from daybook.schemas.media import MediaAttachmentItem, MediaUploadRequest
from daybook.services.media import MediaService


router = APIRouter()


@router.get("", response_model=list[MediaAttachmentItem])
async def list_media(
    limit: int = Query(100, ge=1, le=500),
    user_id: UUID = Depends(get_current_user_id),
    service: MediaService = Depends(get_media_service),
) -> list[MediaAttachmentItem]:
    attachments = await service.list_media(user_id, limit=limit)
    return [MediaAttachmentItem.model_validate(item) for item in attachments]


@router.get("/by-entry/{diary_entry_id}", response_model=list[MediaAttachmentItem])
async def list_media_for_entry(
    diary_entry_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: MediaService = Depends(get_media_service),
) -> list[MediaAttachmentItem]:
    attachments = await service.list_media_for_entry(user_id, diary_entry_id)
    return [MediaAttachmentItem.model_validate(item) for item in attachments]


@router.post(
    "",
    response_model=MediaAttachmentItem,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a base64 encoded photo or video.",
)
async def upload_media(
    payload: MediaUploadRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: MediaService = Depends(get_media_service),
) -> MediaAttachmentItem:
    try:
        attachment = await service.upload_media(
            user_id,
            file_name=payload.file_name,
            file_data=payload.file_data,
            file_type=payload.file_type,
            mime_type=payload.mime_type,
            diary_entry_id=payload.diary_entry_id,
        )
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except StorageUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to upload media",
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MediaAttachmentItem.model_validate(attachment)
