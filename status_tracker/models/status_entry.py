from datetime import datetime

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from status_tracker.database import Base, UTCDateTime, utcnow


class StatusEntry(Base):
    """One immutable snapshot of a user's status. Rows are only ever inserted."""

    __tablename__ = "status_entries"
    __table_args__ = (
        CheckConstraint("altitude IS NULL OR (altitude >= 1 AND altitude <= 10)", name="ck_status_altitude_range"),
        Index("ix_status_entries_user_created", "user_id", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    last_water_intake: Mapped[datetime | None] = mapped_column(UTCDateTime)
    altitude: Mapped[int | None] = mapped_column(Integer)
    last_updated: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
