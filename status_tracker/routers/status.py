from fastapi import APIRouter, Depends, Query

from status_tracker.deps import get_current_claims, get_status_service, require_admin
from status_tracker.errors import AppError, ErrorKind
from status_tracker.models.user import Role
from status_tracker.result import unwrap
from status_tracker.schemas.common import ApiResponse
from status_tracker.schemas.status import (
    HISTORY_LIMIT_DEFAULT,
    HISTORY_LIMIT_MAX,
    AltitudeRecord,
    StatusCreate,
    StatusEntryRead,
    StatusStats,
    StatusUpdate,
    WaterRecord,
)
from status_tracker.schemas.user import TokenClaims
from status_tracker.services.status_service import StatusService

router = APIRouter()


def _target_user_id(claims: TokenClaims, user_id: int | None) -> int:
    """Admins default to their own status; viewers must say whose status they want."""
    if user_id is not None:
        return user_id
    if claims.role == Role.ADMIN:
        return claims.user_id
    raise AppError(ErrorKind.VALIDATION, "userId: userId is required")


def _entry(entry) -> StatusEntryRead | None:
    return StatusEntryRead.model_validate(entry) if entry is not None else None


@router.get("", response_model=ApiResponse[StatusEntryRead | None], response_model_exclude_unset=True)
async def get_status(
    user_id: int | None = Query(None, alias="userId", ge=1),
    claims: TokenClaims = Depends(get_current_claims),
    service: StatusService = Depends(get_status_service),
):
    target = _target_user_id(claims, user_id)
    entry = unwrap(await service.get_latest_status(target))
    return ApiResponse(success=True, data=_entry(entry))


@router.post("", response_model=ApiResponse[StatusEntryRead], response_model_exclude_unset=True, status_code=201)
async def create_status(
    body: StatusCreate,
    claims: TokenClaims = Depends(require_admin),
    service: StatusService = Depends(get_status_service),
):
    entry = unwrap(await service.create_status(body, claims.user_id))
    return ApiResponse(success=True, data=_entry(entry), message="Status created successfully")


@router.put("", response_model=ApiResponse[StatusEntryRead], response_model_exclude_unset=True)
async def update_status(
    body: StatusUpdate,
    claims: TokenClaims = Depends(require_admin),
    service: StatusService = Depends(get_status_service),
):
    entry = unwrap(await service.update_status(body, claims.user_id))
    return ApiResponse(success=True, data=_entry(entry), message="Status updated successfully")


@router.delete("", response_model=ApiResponse[None], response_model_exclude_unset=True)
async def delete_status(
    claims: TokenClaims = Depends(require_admin),
    service: StatusService = Depends(get_status_service),
):
    unwrap(await service.delete_all_status(claims.user_id))
    return ApiResponse(success=True, message="All status entries deleted successfully")


@router.post("/water", response_model=ApiResponse[StatusEntryRead], response_model_exclude_unset=True)
async def record_water(
    body: WaterRecord | None = None,
    claims: TokenClaims = Depends(require_admin),
    service: StatusService = Depends(get_status_service),
):
    at = body.last_water_intake if body is not None else None
    entry = unwrap(await service.record_water(claims.user_id, at))
    return ApiResponse(success=True, data=_entry(entry), message="Water intake recorded")


@router.post("/altitude", response_model=ApiResponse[StatusEntryRead], response_model_exclude_unset=True)
async def record_altitude(
    body: AltitudeRecord,
    claims: TokenClaims = Depends(require_admin),
    service: StatusService = Depends(get_status_service),
):
    entry = unwrap(await service.record_altitude(claims.user_id, body.altitude))
    return ApiResponse(success=True, data=_entry(entry), message="Altitude recorded")


@router.get("/history", response_model=ApiResponse[list[StatusEntryRead]], response_model_exclude_unset=True)
async def get_history(
    user_id: int | None = Query(None, alias="userId", ge=1),
    limit: int = Query(HISTORY_LIMIT_DEFAULT, ge=1, le=HISTORY_LIMIT_MAX),
    claims: TokenClaims = Depends(get_current_claims),
    service: StatusService = Depends(get_status_service),
):
    target = _target_user_id(claims, user_id)
    entries = unwrap(await service.get_status_history(target, limit))
    return ApiResponse(success=True, data=[StatusEntryRead.model_validate(e) for e in entries])


@router.get("/stats", response_model=ApiResponse[StatusStats], response_model_exclude_unset=True)
async def get_stats(
    user_id: int | None = Query(None, alias="userId", ge=1),
    claims: TokenClaims = Depends(get_current_claims),
    service: StatusService = Depends(get_status_service),
):
    target = _target_user_id(claims, user_id)
    return ApiResponse(success=True, data=unwrap(await service.get_user_stats(target)))
