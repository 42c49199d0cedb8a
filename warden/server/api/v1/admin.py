"""
Administration Endpoints.

User management and site-wide counts, restricted to administrators.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import User
from warden.core.database.repositories import (
    CharacterRepository,
    DocumentRepository,
    LoreRepository,
    PromptRepository,
    StoredFileRepository,
    UserRepository,
)
from warden.core.logging_config import get_logger
from warden.core.models.io.admin import AdminStats, AdminUserDetail, AdminUserRead
from warden.server.services.deps import AdminUser

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])


async def _get_user(session: AsyncSession, user_id: int) -> User:
    user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _refuse_self(admin: User, user_id: int, action: str) -> None:
    if admin.id == user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Cannot {action} your own account")


@router.get(
    "/users",
    response_model=List[AdminUserRead],
    summary="List Users",
    description="List every account, newest first, with character and document counts.",
)
async def list_users(
    admin: AdminUser,
    session: AsyncSession = Depends(get_session),
) -> List[AdminUserRead]:
    rows = await UserRepository(session).list_with_counts()
    return [
        AdminUserRead(
            **user.model_dump(exclude={"password"}),
            character_count=character_count,
            document_count=document_count,
        )
        for user, character_count, document_count in rows
    ]


@router.get(
    "/users/{user_id}",
    response_model=AdminUserDetail,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
async def get_user(
    user_id: int,
    admin: AdminUser,
    session: AsyncSession = Depends(get_session),
) -> AdminUserDetail:
    user = await _get_user(session, user_id)
    return AdminUserDetail(
        **user.model_dump(exclude={"password"}),
        character_count=await CharacterRepository(session).count({"user_id": user_id}),
        document_count=await DocumentRepository(session).count({"user_id": user_id}),
        file_count=len(await StoredFileRepository(session).list_active_for_user(user_id)),
    )


@router.post(
    "/users/{user_id}/toggle-admin",
    summary="Toggle Admin",
    description="Grant or revoke administrator rights. Administrators cannot change their own rights.",
    responses={
        400: {"description": "Cannot change your own admin status"},
        404: {"description": "User not found"},
    },
)
async def toggle_admin(
    user_id: int,
    admin: AdminUser,
    session: AsyncSession = Depends(get_session),
):
    _refuse_self(admin, user_id, "change the admin status of")
    user = await _get_user(session, user_id)
    user.is_admin = not user.is_admin
    user = await UserRepository(session).update(user)
    logger.info(f"Admin {admin.id} set is_admin={user.is_admin} on user {user.id}")
    return {"success": True, "is_admin": user.is_admin}


@router.delete(
    "/users/{user_id}",
    summary="Delete User",
    description="Delete an account with its characters and documents. Administrators cannot delete themselves.",
    responses={
        400: {"description": "Cannot delete your own account"},
        404: {"description": "User not found"},
    },
)
async def delete_user(
    user_id: int,
    admin: AdminUser,
    session: AsyncSession = Depends(get_session),
):
    _refuse_self(admin, user_id, "delete")
    user = await _get_user(session, user_id)
    await UserRepository(session).delete_with_content(user)
    logger.warning(f"Admin {admin.id} deleted user {user_id}")
    return {"success": True}


@router.get(
    "/stats",
    response_model=AdminStats,
    summary="Site Stats",
)
async def site_stats(
    admin: AdminUser,
    session: AsyncSession = Depends(get_session),
) -> AdminStats:
    users = UserRepository(session)
    characters = CharacterRepository(session)
    return AdminStats(
        total_users=await users.count(),
        admin_users=await users.count({"is_admin": True}),
        total_characters=await characters.count(),
        public_characters=await characters.count({"is_public": True}),
        total_documents=await DocumentRepository(session).count(),
        total_files=await StoredFileRepository(session).count(),
        total_prompts=await PromptRepository(session).count(),
        total_lore_entries=await LoreRepository(session).count(),
    )
