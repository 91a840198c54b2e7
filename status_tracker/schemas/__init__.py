from status_tracker.schemas.common import ApiResponse
from status_tracker.schemas.user import (
    AdminUserCreate,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenClaims,
    UserRead,
)
from status_tracker.schemas.status import (
    AltitudeRecord,
    StatusCreate,
    StatusEntryRead,
    StatusStats,
    StatusUpdate,
    WaterRecord,
)
