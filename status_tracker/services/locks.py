import asyncio


class UserLockRegistry:
    """One asyncio.Lock per user id, so read-then-insert status writes for a user run one at a time.

    Only serializes within a single process; one registry lives on ``app.state``.
    """

    def __init__(self):
        # user_id -> Lock
        self._locks: dict[int, asyncio.Lock] = {}

    def lock_for(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def discard(self, user_id: int) -> None:
        lock = self._locks.get(user_id)
        if lock is not None and not lock.locked():
            self._locks.pop(user_id, None)
