import logging

from starlette.concurrency import run_in_threadpool

from status_tracker.auth import create_access_token, dummy_verify
from status_tracker.errors import DuplicateUsername, ErrorKind
from status_tracker.models.user import Role
from status_tracker.result import Err, Ok, Result
from status_tracker.schemas.user import AuthResponse, LoginRequest, UserRead, credential_problem
from status_tracker.services.storage import STORAGE_ERRORS, bounded
from status_tracker.stores.user_store import UserStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


class AuthService:
    def __init__(self, users: UserStore):
        self.users = users

    async def login(self, credentials: LoginRequest) -> Result[AuthResponse]:
        """Check credentials and issue a token.

        An unknown username and a wrong password produce the same Err, and an
        unknown username still pays for one bcrypt verify.
        """
        try:
            user = await bounded(self.users.find_by_username(credentials.username))
            if user is None:
                await run_in_threadpool(dummy_verify)
                valid = False
            else:
                valid = await bounded(self.users.validate_password(credentials.password, user.password_hash))

            if not valid:
                logger.info("Failed login for username %r", credentials.username)
                return Err(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

            await bounded(self.users.update_last_login(user.id))
        except STORAGE_ERRORS:
            logger.exception("Login failed on storage error")
            return Err(ErrorKind.STORAGE_FAILURE, "Failed to log in")

        token = create_access_token(user.id, user.username, user.role)
        logger.info("User %s (%s) logged in", user.id, user.username)
        return Ok(AuthResponse(token=token, user=UserRead.model_validate(user)))

    async def register(self, username: str, password: str) -> Result[UserRead]:
        """Public self-registration: the role is always viewer."""
        return await self._create_user(username, password, Role.VIEWER)

    async def create_user_as_admin(self, username: str, password: str, role: Role) -> Result[UserRead]:
        return await self._create_user(username, password, role)

    async def _create_user(self, username: str, password: str, role: Role) -> Result[UserRead]:
        problem = credential_problem(username, password)
        if problem:
            return Err(ErrorKind.VALIDATION, problem)

        try:
            user = await bounded(self.users.create(username, password, role))
        except DuplicateUsername:
            return Err(ErrorKind.DUPLICATE_USERNAME, "Username already exists")
        except STORAGE_ERRORS:
            logger.exception("Failed to create user %r", username)
            return Err(ErrorKind.STORAGE_FAILURE, "Failed to create user")

        logger.info("Created %s user %s (%s)", user.role.value, user.id, user.username)
        return Ok(UserRead.model_validate(user))

    async def get_user(self, user_id: int) -> Result[UserRead]:
        try:
            user = await bounded(self.users.find_by_id(user_id))
        except STORAGE_ERRORS:
            logger.exception("Failed to load user %s", user_id)
            return Err(ErrorKind.STORAGE_FAILURE, "Failed to load user")
        if user is None:
            return Err(ErrorKind.NOT_FOUND, "User not found")
        return Ok(UserRead.model_validate(user))

    async def list_users(self) -> Result[list[UserRead]]:
        try:
            users = await bounded(self.users.list_all())
        except STORAGE_ERRORS:
            logger.exception("Failed to list users")
            return Err(ErrorKind.STORAGE_FAILURE, "Failed to list users")
        return Ok([UserRead.model_validate(u) for u in users])

    async def list_admins(self) -> Result[list[UserRead]]:
        try:
            admins = await bounded(self.users.list_admins())
        except STORAGE_ERRORS:
            logger.exception("Failed to list admin users")
            return Err(ErrorKind.STORAGE_FAILURE, "Failed to list admin users")
        return Ok([UserRead.model_validate(u) for u in admins])

    async def delete_user(self, user_id: int) -> Result[None]:
        try:
            deleted = await bounded(self.users.delete(user_id))
        except STORAGE_ERRORS:
            logger.exception("Failed to delete user %s", user_id)
            return Err(ErrorKind.STORAGE_FAILURE, "Failed to delete user")
        if not deleted:
            return Err(ErrorKind.NOT_FOUND, "User not found")
        logger.info("Deleted user %s", user_id)
        return Ok(None)
