# app/api/deps.py
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_async_session
from app.core.security import decode_access_token
from app.crud.user import get_user_by_id
from app.models.user import User

optional_security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> User:
    """
    Resolve the acting user from the session token, looked up in:
    - the Authorization header
    - the session cookie
    """
    token = credentials.credentials if credentials and credentials.credentials else None
    if not token:
        token = request.cookies.get(settings.SESSION_COOKIE_NAME)

    if not token:
        raise _unauthorized("Not authenticated")

    subject = decode_access_token(token)
    if not subject:
        raise _unauthorized("Invalid or expired token")

    try:
        user_id = int(subject)
    except ValueError:
        raise _unauthorized("Invalid user ID format in token")

    user = await get_user_by_id(user_id, db)
    if not user:
        raise _unauthorized("User not found")

    return user
