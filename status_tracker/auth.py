from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError

from status_tracker.config import settings
from status_tracker.models.user import Role
from status_tracker.schemas.user import TokenClaims

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


class TokenError(Exception):
    pass


class InvalidToken(TokenError):
    pass


class ExpiredToken(TokenError):
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def dummy_verify() -> None:
    """Spend the same time as a real verify so unknown usernames are not detectable."""
    pwd_context.dummy_verify()


def create_access_token(
    user_id: int,
    username: str,
    role: Role,
    expires_delta: timedelta | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": str(user_id),
        "userId": user_id,
        "username": username,
        "role": Role(role).value,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> TokenClaims:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError as exc:
        raise ExpiredToken("Token has expired") from exc
    except JWTError as exc:
        raise InvalidToken("Invalid token") from exc

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as exc:
        raise InvalidToken("Invalid token") from exc


def decode_token(token: str) -> TokenClaims | None:
    """Read claims WITHOUT checking the signature. Never use for authorization."""
    try:
        payload = jwt.get_unverified_claims(token)
        return TokenClaims.model_validate(payload)
    except (JWTError, ValidationError):
        return None
