from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from status_tracker.database import utcnow
from status_tracker.errors import AltitudeOutOfRange, NoExistingStatus, UnknownUser
from status_tracker.models.status_entry import StatusEntry
from status_tracker.schemas.status import ALTITUDE_MAX, ALTITUDE_MIN

# Fields a caller may set on an entry; everything else is stamped by the store
STATUS_FIELDS = ("last_water_intake", "altitude")


def check_altitude(value: Any) -> None:
    """Reject (never clamp) anything that is not an int in [1, 10]."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or not ALTITUDE_MIN <= value <= ALTITUDE_MAX:
        raise AltitudeOutOfRange(value)


class StatusStore:
    """Append-only store of status entries. Nothing here ever UPDATEs a row."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def latest(self, user_id: int) -> StatusEntry | None:
        result = await self.db.execute(
            select(StatusEntry)
            .where(StatusEntry.user_id == user_id)
            .order_by(StatusEntry.created_at.desc(), StatusEntry.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create(self, data: Mapping[str, Any], user_id: int) -> StatusEntry:
        check_altitude(data.get("altitude"))
        now = utcnow()
        entry = StatusEntry(
            user_id=user_id,
            last_water_intake=data.get("last_water_intake"),
            altitude=data.get("altitude"),
            last_updated=data.get("last_updated") or now,
            created_at=now,
        )
        self.db.add(entry)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            # altitude is checked above, so the owner foreign key is what failed
            await self.db.rollback()
            raise UnknownUser(user_id) from exc
        await self.db.refresh(entry)
        return entry

    async def update(self, data: Mapping[str, Any], user_id: int) -> StatusEntry:
        """Insert a new entry, carrying forward any field missing (or None) in ``data``."""
        check_altitude(data.get("altitude"))
        current = await self.latest(user_id)
        if current is None:
            raise NoExistingStatus(user_id)

        merged = {}
        for field in STATUS_FIELDS:
            value = data.get(field)
            merged[field] = value if value is not None else getattr(current, field)
        merged["last_updated"] = utcnow()
        return await self.create(merged, user_id)

    async def history(self, user_id: int, limit: int) -> list[StatusEntry]:
        result = await self.db.execute(
            select(StatusEntry)
            .where(StatusEntry.user_id == user_id)
            .order_by(StatusEntry.created_at.desc(), StatusEntry.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(StatusEntry).where(StatusEntry.user_id == user_id)
        )
        return result.scalar_one()

    async def delete_all(self, user_id: int) -> bool:
        result = await self.db.execute(delete(StatusEntry).where(StatusEntry.user_id == user_id))
        await self.db.commit()
        return result.rowcount > 0
