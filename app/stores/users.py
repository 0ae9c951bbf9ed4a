"""SQLAlchemy-backed credential store."""

from typing import Any, Sequence

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError
from app.db.models.user import User


class UserStore:
    """Read and write `User` rows through a request-scoped session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, email: str) -> bool:
        return bool(await self.session.scalar(select(exists().where(User.email == email))))

    async def find_by_email(self, email: str) -> User | None:
        return await self.session.scalar(select(User).where(User.email == email))

    async def find_by_id(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def list_all(self) -> Sequence[User]:
        result = await self.session.scalars(select(User).order_by(User.id))
        return result.all()

    async def create(self, **fields: Any) -> User:
        """Insert a user; a concurrent insert of the same email surfaces as a conflict."""
        user = User(**fields)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("User with this email already exists")
        await self.session.refresh(user)
        return user

    async def update_by_email(self, email: str, **fields: Any) -> User | None:
        user = await self.find_by_email(email)
        if user is None:
            return None
        for name, value in fields.items():
            setattr(user, name, value)
        await self.session.commit()
        await self.session.refresh(user)
        return user
