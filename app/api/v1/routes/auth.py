# app/api/v1/routes/auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.api.deps import get_current_user
from app.core.cookies import clear_session_cookie, set_session_cookie
from app.core.database import get_async_session
from app.core.security import create_access_token, verify_password
from app.crud.user import create_user, get_user_by_email, get_user_by_email_or_username, record_login
from app.models.user import User
from app.schemas.user import AuthResponse, CurrentUserResponse, UserCreate, UserLogin, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

USER_EXISTS = "User with this email or username already exists"


def _issue_session(user: User, response: Response) -> AuthResponse:
    token = create_access_token(str(user.id))
    set_session_cookie(response, token)
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
):
    existing = await get_user_by_email_or_username(user_in.email, user_in.username, db)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=USER_EXISTS,
        )

    try:
        user = await create_user(user_in, db)
    except IntegrityError:
        # A concurrent registration claimed the name between the check and the insert
        await db.rollback()
        logger.warning(f"Duplicate registration for {user_in.email} rejected by unique index")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=USER_EXISTS)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Register error: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Registration failed")

    logger.info(f"User {user.username} registered")
    return _issue_session(user, response)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
):
    user = await get_user_by_email(credentials.email, db)
    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Failed login attempt for {credentials.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    try:
        user = await record_login(user, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Login error: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Login failed")

    logger.info(f"User {user.username} logged in")
    return _issue_session(user, response)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(response: Response):
    """
    Logout endpoint that doesn't require authentication.
    This endpoint will clear the session cookie if present.
    """
    clear_session_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def read_current_user(user: User = Depends(get_current_user)):
    return {"user": user}
