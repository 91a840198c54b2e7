from status_tracker.stores.status_store import StatusStore
from status_tracker.stores.user_store import UserStore

__all__ = ["StatusStore", "UserStore"]
