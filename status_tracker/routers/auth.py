from fastapi import APIRouter, Depends, Request

from status_tracker.deps import get_auth_service, get_current_claims, require_admin
from status_tracker.errors import AppError, ErrorKind
from status_tracker.result import unwrap
from status_tracker.schemas.common import ApiResponse
from status_tracker.schemas.user import (
    AdminUserCreate,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenClaims,
    UserRead,
)
from status_tracker.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", response_model=ApiResponse[AuthResponse], response_model_exclude_unset=True)
async def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    auth = unwrap(await service.login(body))
    return ApiResponse(success=True, data=auth, message="Login successful")


@router.post("/register", response_model=ApiResponse[UserRead], response_model_exclude_unset=True, status_code=201)
async def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """Public sign-up. Always creates a viewer, whatever role the body claims."""
    user = unwrap(await service.register(body.username, body.password))
    return ApiResponse(success=True, data=user, message="Account created successfully")


@router.post(
    "/admin/register",
    response_model=ApiResponse[UserRead],
    response_model_exclude_unset=True,
    status_code=201,
)
async def admin_register(
    body: AdminUserCreate,
    _: TokenClaims = Depends(require_admin),
    service: AuthService = Depends(get_auth_service),
):
    user = unwrap(await service.create_user_as_admin(body.username, body.password, body.role))
    return ApiResponse(success=True, data=user, message="User created successfully")


@router.post("/logout", response_model=ApiResponse[None], response_model_exclude_unset=True)
async def logout():
    # Tokens are stateless; the client just drops it
    return ApiResponse(success=True, message="Logout successful. Please remove the token from client storage.")


@router.get("/me", response_model=ApiResponse[UserRead], response_model_exclude_unset=True)
async def me(claims: TokenClaims = Depends(get_current_claims), service: AuthService = Depends(get_auth_service)):
    user = unwrap(await service.get_user(claims.user_id))
    return ApiResponse(success=True, data=user)


@router.get("/users", response_model=ApiResponse[list[UserRead]], response_model_exclude_unset=True)
async def list_users(_: TokenClaims = Depends(require_admin), service: AuthService = Depends(get_auth_service)):
    return ApiResponse(success=True, data=unwrap(await service.list_users()))


@router.get("/admins", response_model=ApiResponse[list[UserRead]], response_model_exclude_unset=True)
async def list_admins(
    _: TokenClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    """Admins whose status a viewer can pick from."""
    return ApiResponse(success=True, data=unwrap(await service.list_admins()))


@router.delete("/users/{user_id}", response_model=ApiResponse[None], response_model_exclude_unset=True)
async def delete_user(
    user_id: int,
    request: Request,
    claims: TokenClaims = Depends(require_admin),
    service: AuthService = Depends(get_auth_service),
):
    if user_id == claims.user_id:
        raise AppError(ErrorKind.INVALID_OPERATION, "Cannot delete your own account")
    unwrap(await service.delete_user(user_id))
    locks = getattr(request.app.state, "status_locks", None)
    if locks is not None:
        locks.discard(user_id)
    return ApiResponse(success=True, message="User deleted successfully")
