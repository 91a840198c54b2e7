from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, StrictInt, model_validator

from status_tracker.schemas.common import CAMEL_CONFIG

ALTITUDE_MIN = 1
ALTITUDE_MAX = 10
DEFAULT_ALTITUDE = 5
HISTORY_LIMIT_MAX = 100
HISTORY_LIMIT_DEFAULT = 10


def clamp_altitude(value: int) -> int:
    return max(ALTITUDE_MIN, min(ALTITUDE_MAX, value))


# Out-of-range requests are pulled into range rather than rejected; bools and numeric strings are not ints
Altitude = Annotated[StrictInt, AfterValidator(clamp_altitude)]


class StatusCreate(BaseModel):
    last_water_intake: datetime | None = None
    altitude: Altitude

    model_config = CAMEL_CONFIG


class StatusUpdate(BaseModel):
    last_water_intake: datetime | None = None
    altitude: Altitude | None = None

    model_config = CAMEL_CONFIG

    @model_validator(mode="after")
    def _at_least_one_field(self):
        if self.last_water_intake is None and self.altitude is None:
            raise ValueError("At least one field (lastWaterIntake or altitude) must be provided")
        return self


class WaterRecord(BaseModel):
    last_water_intake: datetime | None = None

    model_config = CAMEL_CONFIG


class AltitudeRecord(BaseModel):
    altitude: Altitude

    model_config = CAMEL_CONFIG


class StatusEntryRead(BaseModel):
    id: int
    user_id: int
    last_water_intake: datetime | None
    altitude: int | None
    last_updated: datetime
    created_at: datetime

    model_config = CAMEL_CONFIG


class StatusStats(BaseModel):
    total_entries: int
    average_altitude: float
    last_activity_date: datetime | None

    model_config = CAMEL_CONFIG
