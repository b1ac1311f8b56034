# app/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import or_
from typing import Optional

from app.core.database import utcnow
from app.core.security import get_password_hash
from app.models.user import User
from app.schemas.user import UserCreate

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()

async def get_user_by_id(user_id: int, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_email_or_username(email: str, username: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(
        select(User).where(or_(User.email == email, User.username == username)).limit(1)
    )
    return result.scalars().first()

async def create_user(user_in: UserCreate, db: AsyncSession) -> User:
    user = User(
        username=user_in.username,
        email=user_in.email,
        password_hash=get_password_hash(user_in.password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user

async def record_login(user: User, db: AsyncSession) -> User:
    user.last_login = utcnow()
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
