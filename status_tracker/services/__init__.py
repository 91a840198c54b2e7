from status_tracker.services.auth_service import AuthService
from status_tracker.services.locks import UserLockRegistry
from status_tracker.services.status_service import StatusService

__all__ = ["AuthService", "StatusService", "UserLockRegistry"]
