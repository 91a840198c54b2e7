"""Create the initial admin account from ADMIN_USERNAME / ADMIN_PASSWORD.

Usage: ADMIN_USERNAME=admin ADMIN_PASSWORD=secret123 status-tracker-create-admin
"""
import asyncio
import logging
import sys

from status_tracker.config import settings
from status_tracker.database import SessionLocal, engine, init_db
from status_tracker.errors import ErrorKind
from status_tracker.models.user import Role
from status_tracker.result import Err
from status_tracker.services.auth_service import AuthService
from status_tracker.stores.user_store import UserStore

logger = logging.getLogger(__name__)


async def create_admin(username: str, password: str, session_factory=SessionLocal) -> int:
    """Returns a process exit code: 0 when created or already present."""
    async with session_factory() as db:
        result = await AuthService(UserStore(db)).create_user_as_admin(username, password, Role.ADMIN)

    if isinstance(result, Err):
        if result.kind == ErrorKind.DUPLICATE_USERNAME:
            print(f"User {username!r} already exists")
            return 0
        print(f"Error creating admin user: {result.message}", file=sys.stderr)
        return 1

    user = result.value
    print("Admin user created successfully:")
    print(f"  Username: {user.username}")
    print(f"  Role:     {user.role.value}")
    print(f"  ID:       {user.id}")
    return 0


async def _run(username: str, password: str) -> int:
    await init_db()
    try:
        return await create_admin(username, password)
    finally:
        await engine.dispose()


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        print("Admin credentials not provided.", file=sys.stderr)
        print("Set ADMIN_USERNAME and ADMIN_PASSWORD environment variables.", file=sys.stderr)
        sys.exit(1)
    sys.exit(asyncio.run(_run(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)))


if __name__ == "__main__":
    main()
