"""
Authentication Endpoints.

Session cookie registration, login and logout, plus the account's linked
Discord user id.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import User
from warden.core.database.repositories import UserRepository
from warden.core.logging_config import get_logger
from warden.core.models.io.auth import DiscordSettings, LoginRequest, RegisterRequest, UserRead
from warden.server.core import constant
from warden.server.services.deps import CurrentUser
from warden.server.services.security import (
    hash_password,
    is_valid_email,
    password_strength_errors,
    validate_username,
    verify_password,
)

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account with a username, a strong password and an optional email.",
    responses={
        400: {"description": "Username, password or email rejected"},
        409: {"description": "Username already exists"},
    },
)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_session),
) -> UserRead:
    """
    Register a new account.

    - **username**: 3 to 50 characters, unique ignoring case.
    - **password**: at least 8 characters with upper, lower, digit and special characters.
    - **email**: optional, must look like an address when given.
    """
    username_error = validate_username(payload.username)
    if username_error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=username_error)

    password_errors = password_strength_errors(payload.password)
    if password_errors:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="; ".join(password_errors))

    if payload.email and not is_valid_email(payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format")

    repo = UserRepository(session)
    if await repo.get_by_username(payload.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    user = await repo.create(
        User(username=payload.username, password=hash_password(payload.password), email=payload.email or None)
    )
    logger.info(f"Registered user {user.id} ({user.username})")
    return UserRead.model_validate(user)


@router.post(
    "/login",
    response_model=UserRead,
    summary="Login",
    description="Check the credentials and start a session.",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(
    payload: LoginRequest,
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> UserRead:
    user = await UserRepository(session).get_by_username(payload.username)
    if user is None or not verify_password(payload.password, user.password):
        logger.info(f"Failed login for '{payload.username}'")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    # Start from a fresh session so a pre-login cookie cannot be reused
    request.session.clear()
    request.session[constant.SESSION_USER_KEY] = user.id
    logger.info(f"User {user.id} logged in")
    return UserRead.model_validate(user)


@router.post(
    "/logout",
    summary="Logout",
    description="End the current session.",
)
async def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}


@router.get(
    "/me",
    response_model=UserRead,
    summary="Current User",
    description="Return the logged-in user.",
    responses={401: {"description": "Not authenticated"}},
)
async def me(user: CurrentUser) -> UserRead:
    return UserRead.model_validate(user)


@router.get(
    "/discord-settings",
    response_model=DiscordSettings,
    summary="Get Discord Settings",
    description="Return the Discord user id linked to the account.",
)
async def get_discord_settings(user: CurrentUser) -> DiscordSettings:
    return DiscordSettings(discord_user_id=user.discord_user_id)


@router.put(
    "/discord-settings",
    response_model=DiscordSettings,
    summary="Update Discord Settings",
    description="Link the account to a Discord user id, or unlink it with null.",
    responses={409: {"description": "Discord user already linked to another account"}},
)
async def update_discord_settings(
    payload: DiscordSettings,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> DiscordSettings:
    repo = UserRepository(session)
    discord_user_id = payload.discord_user_id or None
    if discord_user_id:
        owner = await repo.get_by_discord_id(discord_user_id)
        if owner is not None and owner.id != user.id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Discord account already linked to another user",
            )
    user.discord_user_id = discord_user_id
    await repo.update(user)
    return DiscordSettings(discord_user_id=user.discord_user_id)
