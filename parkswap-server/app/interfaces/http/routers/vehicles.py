"""Vehicles of the current account."""
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_current_account
from app.interfaces.http.deps import get_db_session
from app.interfaces.http.errors import http_error
from app.modules.accounts import Account as AccountDomain
from app.modules.common import DomainError
from app.modules.vehicles import VehicleCreateInput, VehicleService
from app.schemas import SuccessResponse, VehicleCreate, VehicleListResponse, VehicleResponse

router = APIRouter()


@router.get("", response_model=VehicleListResponse, summary="List vehicles")
async def list_vehicles(
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> VehicleListResponse:
    service = VehicleService.with_session(db)
    vehicles = await service.list_vehicles(account.id)
    return VehicleListResponse(vehicles=[VehicleResponse.model_validate(vehicle) for vehicle in vehicles])


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED, summary="Add a vehicle")
async def add_vehicle(
    payload: VehicleCreate,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> VehicleResponse:
    service = VehicleService.with_session(db)
    try:
        vehicle = await service.add_vehicle(
            account.id,
            VehicleCreateInput(model=payload.model, plate=payload.plate, photo=payload.photo),
        )
    except DomainError as exc:
        await db.rollback()
        raise http_error(exc) from exc
    await db.commit()
    return VehicleResponse.model_validate(vehicle)


@router.post("/{vehicle_id}/default", response_model=VehicleResponse, summary="Make a vehicle the default")
async def select_default_vehicle(
    vehicle_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> VehicleResponse:
    service = VehicleService.with_session(db)
    try:
        vehicle = await service.select_default(account.id, vehicle_id)
    except DomainError as exc:
        await db.rollback()
        raise http_error(exc) from exc
    await db.commit()
    return VehicleResponse.model_validate(vehicle)


@router.delete("/{vehicle_id}", response_model=SuccessResponse, summary="Remove a vehicle")
async def delete_vehicle(
    vehicle_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    service = VehicleService.with_session(db)
    try:
        await service.delete_vehicle(account.id, vehicle_id)
    except DomainError as exc:
        await db.rollback()
        raise http_error(exc) from exc
    await db.commit()
    return SuccessResponse(message="Vehicle removed")
