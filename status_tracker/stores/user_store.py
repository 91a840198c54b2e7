import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from status_tracker.auth import hash_password, verify_password
from status_tracker.database import utcnow
from status_tracker.errors import DuplicateUsername
from status_tracker.models.user import Role, User

logger = logging.getLogger(__name__)


class UserStore:
    """Credential store. Password hashes never leave this class except on the ORM row."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def create(self, username: str, password: str, role: Role) -> User:
        if await self.find_by_username(username) is not None:
            raise DuplicateUsername(username)

        # keep bcrypt off the event loop
        password_hash = await run_in_threadpool(hash_password, password)
        user = User(username=username, password_hash=password_hash, role=Role(role))
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateUsername(username) from exc
        await self.db.refresh(user)
        return user

    async def validate_password(self, plain: str, hashed: str) -> bool:
        return await run_in_threadpool(verify_password, plain, hashed)

    async def update_last_login(self, user_id: int) -> None:
        await self.db.execute(update(User).where(User.id == user_id).values(last_login=utcnow()))
        await self.db.commit()

    async def list_all(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def list_admins(self) -> list[User]:
        result = await self.db.execute(select(User).where(User.role == Role.ADMIN).order_by(User.username.asc()))
        return list(result.scalars().all())

    async def delete(self, user_id: int) -> bool:
        result = await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()
        return result.rowcount > 0
