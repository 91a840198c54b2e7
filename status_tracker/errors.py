"""Error taxonomy shared by the stores, services, gates and HTTP layer."""
import enum


class ErrorKind(str, enum.Enum):
    VALIDATION = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    DUPLICATE_USERNAME = "DUPLICATE_USERNAME"
    INVALID_OPERATION = "INVALID_OPERATION"
    NOT_FOUND = "NOT_FOUND"
    TOKEN_REQUIRED = "AUTH_TOKEN_REQUIRED"
    TOKEN_INVALID = "AUTH_TOKEN_INVALID"
    TOKEN_EXPIRED = "AUTH_TOKEN_EXPIRED"
    FORBIDDEN = "AUTH_INSUFFICIENT_PRIVILEGES"
    STORAGE_FAILURE = "DATABASE_ERROR"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.INVALID_CREDENTIALS: 400,
    ErrorKind.DUPLICATE_USERNAME: 400,
    ErrorKind.INVALID_OPERATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TOKEN_REQUIRED: 401,
    ErrorKind.TOKEN_INVALID: 401,
    ErrorKind.TOKEN_EXPIRED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.STORAGE_FAILURE: 500,
}


class AppError(Exception):
    """Raised at the HTTP boundary and rendered as the JSON error envelope."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def code(self) -> str:
        return self.kind.value


class StoreError(Exception):
    pass


class DuplicateUsername(StoreError):
    def __init__(self, username: str):
        super().__init__(f"Username already exists: {username}")
        self.username = username


class NoExistingStatus(StoreError):
    def __init__(self, user_id: int):
        super().__init__(f"No existing status for user {user_id}")
        self.user_id = user_id


class AltitudeOutOfRange(StoreError, ValueError):
    def __init__(self, value):
        super().__init__(f"altitude must be an integer between 1 and 10, got {value!r}")
        self.value = value


class UnknownUser(StoreError):
    def __init__(self, user_id: int):
        super().__init__(f"No user with id {user_id}")
        self.user_id = user_id
