"""Status service: create-vs-update branching and derived views over the append-only store.

Every write inserts a new row. ``update_status`` requires a prior entry
(PUT after POST); the ``record_*`` helpers pick create or update themselves.
Writes for one user are serialized through a per-user lock; reads are not.
"""
import logging
from contextlib import nullcontext
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from status_tracker.database import utcnow
from status_tracker.errors import AltitudeOutOfRange, ErrorKind, NoExistingStatus, UnknownUser
from status_tracker.models.status_entry import StatusEntry
from status_tracker.result import Err, Ok, Result
from status_tracker.schemas.status import DEFAULT_ALTITUDE, StatusCreate, StatusStats, StatusUpdate
from status_tracker.services.locks import UserLockRegistry
from status_tracker.services.storage import STORAGE_ERRORS, bounded
from status_tracker.stores.status_store import StatusStore

logger = logging.getLogger(__name__)

STATS_WINDOW = 1000
NO_EXISTING_STATUS_MESSAGE = "No existing status found for user. Create a status first."


def average_altitude(entries: list[StatusEntry]) -> float:
    """Mean altitude rounded half-up to 2 decimal places; entries without an altitude are skipped."""
    values = [e.altitude for e in entries if e.altitude is not None]
    if not values:
        return 0.0
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class StatusService:
    def __init__(self, store: StatusStore, locks: UserLockRegistry | None = None):
        self.store = store
        self.locks = locks

    def _write_lock(self, user_id: int):
        if self.locks is None:
            return nullcontext()
        return self.locks.lock_for(user_id)

    async def get_latest_status(self, user_id: int) -> Result[StatusEntry | None]:
        try:
            return Ok(await bounded(self.store.latest(user_id)))
        except STORAGE_ERRORS:
            logger.exception("Failed to retrieve latest status for user %s", user_id)
            return Err(ErrorKind.STORAGE_FAILURE, "Failed to retrieve latest status")

    async def create_status(self, data: StatusCreate, user_id: int) -> Result[StatusEntry]:
        values = {
            "last_water_intake": data.last_water_intake,
            "altitude": data.altitude,
            "last_updated": utcnow(),
        }
        async with self._write_lock(user_id):
            return await self._write(self.store.create(values, user_id), user_id, "create")

    async def update_status(self, data: StatusUpdate, user_id: int) -> Result[StatusEntry]:
        values = data.model_dump(exclude_none=True)
        values["last_updated"] = utcnow()
        async with self._write_lock(user_id):
            try:
                existing = await bounded(self.store.latest(user_id))
            except STORAGE_ERRORS:
                logger.exception("Failed to read status before update for user %s", user_id)
                return Err(ErrorKind.STORAGE_FAILURE, "Failed to update status")
            if existing is None:
                return Err(ErrorKind.NOT_FOUND, NO_EXISTING_STATUS_MESSAGE)
            return await self._write(self.store.update(values, user_id), user_id, "update")

    async def record_water(self, user_id: int, at: datetime | None = None) -> Result[StatusEntry]:
        """Mark water intake (default: now), creating the first entry if needed."""
        at = at or utcnow()
        async with self._write_lock(user_id):
            try:
                existing = await bounded(self.store.latest(user_id))
            except STORAGE_ERRORS:
                logger.exception("Failed to read status before recording water for user %s", user_id)
                return Err(ErrorKind.STORAGE_FAILURE, "Failed to record water intake")
            if existing is None:
                write = self.store.create({"last_water_intake": at, "altitude": DEFAULT_ALTITUDE}, user_id)
            else:
                write = self.store.update({"last_water_intake": at}, user_id)
            return await self._write(write, user_id, "record water")

    async def record_altitude(self, user_id: int, altitude: int) -> Result[StatusEntry]:
        """Set the altitude, creating the first entry (with no water intake yet) if needed."""
        async with self._write_lock(user_id):
            try:
                existing = await bounded(self.store.latest(user_id))
            except STORAGE_ERRORS:
                logger.exception("Failed to read status before recording altitude for user %s", user_id)
                return Err(ErrorKind.STORAGE_FAILURE, "Failed to record altitude")
            if existing is None:
                write = self.store.create({"last_water_intake": None, "altitude": altitude}, user_id)
            else:
                write = self.store.update({"altitude": altitude}, user_id)
            return await self._write(write, user_id, "record altitude")

    async def _write(self, write, user_id: int, action: str) -> Result[StatusEntry]:
        try:
            entry = await bounded(write)
        except AltitudeOutOfRange as exc:
            return Err(ErrorKind.VALIDATION, f"altitude: {exc}")
        except NoExistingStatus:
            return Err(ErrorKind.NOT_FOUND, NO_EXISTING_STATUS_MESSAGE)
        except UnknownUser:
            logger.info("Status %s rejected: user %s no longer exists", action, user_id)
            return Err(ErrorKind.NOT_FOUND, "User not found")
        except STORAGE_ERRORS:
            logger.exception("Failed to %s status for user %s", action, user_id)
            return Err(ErrorKind.STORAGE_FAILURE, f"Failed to {action} status")
        logger.info("Status %s for user %s -> entry %s", action, user_id, entry.id)
        return Ok(entry)

    async def get_status_history(self, user_id: int, limit: int) -> Result[list[StatusEntry]]:
        try:
            return Ok(await bounded(self.store.history(user_id, limit)))
        except STORAGE_ERRORS:
            logger.exception("Failed to retrieve status history for user %s", user_id)
            return Err(ErrorKind.STORAGE_FAILURE, "Failed to retrieve status history")

    async def delete_all_status(self, user_id: int) -> Result[None]:
        async with self._write_lock(user_id):
            try:
                deleted = await bounded(self.store.delete_all(user_id))
            except STORAGE_ERRORS:
                logger.exception("Failed to delete status entries for user %s", user_id)
                return Err(ErrorKind.STORAGE_FAILURE, "Failed to delete status entries")
        if not deleted:
            return Err(ErrorKind.NOT_FOUND, "No status entries found for user")
        logger.info("Deleted all status entries for user %s", user_id)
        return Ok(None)

    async def get_user_stats(self, user_id: int) -> Result[StatusStats]:
        try:
            history = await bounded(self.store.history(user_id, STATS_WINDOW))
        except STORAGE_ERRORS:
            logger.exception("Failed to retrieve statistics for user %s", user_id)
            return Err(ErrorKind.STORAGE_FAILURE, "Failed to retrieve user statistics")

        if not history:
            return Ok(StatusStats(total_entries=0, average_altitude=0, last_activity_date=None))
        return Ok(
            StatusStats(
                total_entries=len(history),
                average_altitude=average_altitude(history),
                last_activity_date=history[0].last_updated,
            )
        )
