from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import User


async def get_or_create_user(db: AsyncSession, email: str) -> User:
    email = email.lower().strip()
    u = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if u is None:
        u = User(email=email)
        db.add(u)
        try:
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise
        await db.refresh(u)
    return u
