"""
Request Dependencies.

Provides the database session and the session-cookie authenticated user
to API endpoints.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import User
from warden.core.database.repositories import UserRepository
from warden.server.core import constant


async def get_current_user(request: Request, session: AsyncSession = Depends(get_session)) -> User:
    """Resolve the logged-in user from the session cookie.

    Raises:
        HTTPException: 401 when no user is logged in or the account is gone
    """
    user_id = request.session.get(constant.SESSION_USER_KEY)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        request.session.pop(constant.SESSION_USER_KEY, None)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


async def get_admin_user(user: Annotated[User, Depends(get_current_user)]) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_admin_user)]
