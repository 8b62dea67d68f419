"""Shared API dependencies."""

from fastapi import Depends, HTTPException, Request
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from temple_stuart.core.database import get_db
from temple_stuart.models.user import User


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the calling user from the identity cookie.

    Args:
        request: Incoming request
        session: Database session

    Returns:
        The calling user

    Raises:
        HTTPException: 401 if the cookie is missing, 404 if no user matches
    """
    settings = request.app.state.settings
    user_email = request.cookies.get(settings.auth_cookie_name)
    if not user_email:
        raise HTTPException(status_code=401, detail="Unauthorized")

    stmt = select(User).where(func.lower(User.email) == user_email.strip().lower())
    result = await session.execute(stmt)
    user = result.scalars().first()

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user
