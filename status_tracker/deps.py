"""Request dependencies: the authorization gates and the service providers.

The gates form an ordered pipeline through FastAPI's dependency graph:
``require_admin`` depends on ``get_current_claims``, so the role check never
runs without a verified token. Neither gate touches the database.
"""
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from status_tracker.auth import ExpiredToken, InvalidToken, verify_token
from status_tracker.database import get_db
from status_tracker.errors import AppError, ErrorKind
from status_tracker.models.user import Role
from status_tracker.schemas.user import TokenClaims
from status_tracker.services.auth_service import AuthService
from status_tracker.services.status_service import StatusService
from status_tracker.stores.status_store import StatusStore
from status_tracker.stores.user_store import UserStore

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_claims(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims:
    if credentials is None or not credentials.credentials:
        raise AppError(ErrorKind.TOKEN_REQUIRED, "Access token required")
    try:
        claims = verify_token(credentials.credentials)
    except ExpiredToken:
        raise AppError(ErrorKind.TOKEN_EXPIRED, "Access token has expired")
    except InvalidToken:
        raise AppError(ErrorKind.TOKEN_INVALID, "Invalid access token")
    request.state.identity = claims
    return claims


async def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    if claims.role != Role.ADMIN:
        raise AppError(ErrorKind.FORBIDDEN, "Admin access required")
    return claims


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(UserStore(db))


def get_status_service(request: Request, db: AsyncSession = Depends(get_db)) -> StatusService:
    return StatusService(StatusStore(db), locks=getattr(request.app.state, "status_locks", None))
