from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_current_user
from app.db.models import User
from app.db.session import get_db


@dataclass(slots=True)
class AuthContext:
    db: AsyncSession
    user_id: UUID


def Authed(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)) -> AuthContext:
    return AuthContext(db=db, user_id=user.id)
