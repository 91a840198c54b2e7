from status_tracker.models.user import Role, User
from status_tracker.models.status_entry import StatusEntry

__all__ = [
    "Role",
    "User",
    "StatusEntry",
]
