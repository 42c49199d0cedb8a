"""
Stored File Endpoints.

Lists the caller's stored files with their storage quota, and soft-deletes
files. Uploads happen outside this service.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.repositories import StoredFileRepository
from warden.core.logging_config import get_logger
from warden.core.models.io.documents import FileListing, StorageQuota, StoredFileRead
from warden.server.services.deps import CurrentUser

logger = get_logger(__name__)

router = APIRouter(tags=["files"])

BYTES_PER_MB = 1024 * 1024


@router.get(
    "",
    response_model=FileListing,
    summary="List Files",
    description="List the caller's files that are not deleted, with storage quota usage.",
)
async def list_files(
    user: CurrentUser,
    category: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
) -> FileListing:
    files = await StoredFileRepository(session).list_active_for_user(user.id, category)
    used, total = user.storage_used_bytes, user.storage_quota_bytes
    return FileListing(
        files=[StoredFileRead.model_validate(stored_file) for stored_file in files],
        quota=StorageQuota(
            used=used,
            total=total,
            used_mb=round(used / BYTES_PER_MB, 2),
            total_mb=round(total / BYTES_PER_MB, 2),
            percent_used=round(used / total * 100) if total else 0,
        ),
    )


@router.delete(
    "/{file_id}",
    summary="Delete File",
    description="Soft-delete a file and release its size from the caller's storage usage.",
    responses={404: {"description": "File not found"}},
)
async def delete_file(
    file_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
):
    repo = StoredFileRepository(session)
    stored_file = await repo.get_active_for_user(file_id, user.id)
    if stored_file is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    await repo.soft_delete(stored_file, user)
    logger.info(f"User {user.id} deleted file {file_id}")
    return {"success": True}
