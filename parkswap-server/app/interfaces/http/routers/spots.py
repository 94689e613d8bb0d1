"""Parking spot listing, booking and hand-over endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.security import get_current_account
from app.interfaces.http.deps import get_db_session
from app.interfaces.http.errors import http_error
from app.modules.accounts import Account as AccountDomain
from app.modules.common import DomainError
from app.modules.spots import BookingRequest, SpotProposal, SpotService
from app.schemas import (
    BookSpotRequest,
    BookSpotResponse,
    CancelBookingRequest,
    NavigationRequest,
    NavigationResponse,
    PlateConfirmRequest,
    PlateConfirmResponse,
    SpotActionResponse,
    SpotCreate,
    SpotListResponse,
    SpotResponse,
)

router = APIRouter()
settings = get_settings()


def get_spot_service(db: AsyncSession = Depends(get_db_session)) -> SpotService:
    return SpotService.with_session(
        db,
        currency=settings.wallet.currency,
        premium_parks_max=settings.premium_parks_max,
    )


async def _fail(db: AsyncSession, exc: DomainError):
    await db.rollback()
    return http_error(exc)


@router.get("", response_model=SpotListResponse, summary="Spots open for booking")
async def list_available_spots(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: SpotService = Depends(get_spot_service),
) -> SpotListResponse:
    spots = await service.list_available(limit, offset)
    return SpotListResponse(spots=[SpotResponse.model_validate(spot) for spot in spots])


@router.get("/mine", response_model=SpotListResponse, summary="Spots the current account hosts or booked")
async def list_my_spots(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
) -> SpotListResponse:
    spots = await service.list_for_user(account.id, limit, offset)
    return SpotListResponse(spots=[SpotResponse.model_validate(spot) for spot in spots])


@router.post("", response_model=SpotResponse, status_code=status.HTTP_201_CREATED, summary="Propose a spot")
async def propose_spot(
    payload: SpotCreate,
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
    db: AsyncSession = Depends(get_db_session),
) -> SpotResponse:
    try:
        spot = await service.propose_spot(account, SpotProposal(**payload.model_dump()))
    except DomainError as exc:
        raise await _fail(db, exc) from exc
    await db.commit()
    return SpotResponse.model_validate(spot)


@router.get("/{spot_id}", response_model=SpotResponse, summary="Spot details")
async def get_spot(
    spot_id: str = Path(..., min_length=1),
    _: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
) -> SpotResponse:
    try:
        spot = await service.get_spot(spot_id)
    except DomainError as exc:
        raise http_error(exc) from exc
    return SpotResponse.model_validate(spot)


@router.post("/{spot_id}/book", response_model=BookSpotResponse, summary="Book a spot and settle the price")
async def book_spot(
    payload: BookSpotRequest,
    spot_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
    db: AsyncSession = Depends(get_db_session),
) -> BookSpotResponse:
    request = BookingRequest(
        spot_id=spot_id,
        booking_session_id=payload.booking_session_id,
        book_op_id=payload.op_id,
        booker_name=payload.booker_name or account.display_name,
        booker_vehicle_plate=payload.booker_vehicle_plate,
        booker_vehicle_id=payload.booker_vehicle_id,
    )
    try:
        result = await service.book_spot(account.id, request)
    except DomainError as exc:
        raise await _fail(db, exc) from exc
    await db.commit()
    return BookSpotResponse.model_validate(result)


@router.post("/{spot_id}/navigation", response_model=NavigationResponse, summary="Booker starts driving to the spot")
async def start_navigation(
    payload: NavigationRequest,
    spot_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
    db: AsyncSession = Depends(get_db_session),
) -> NavigationResponse:
    try:
        result = await service.start_navigation(
            spot_id,
            account,
            booking_session_id=payload.booking_session_id,
            nav_op_id=payload.nav_op_id,
            vehicle_plate=payload.vehicle_plate,
            vehicle_id=payload.vehicle_id,
        )
    except DomainError as exc:
        raise await _fail(db, exc) from exc
    await db.commit()
    return NavigationResponse.model_validate(result)


@router.post(
    "/{spot_id}/booker-plate",
    response_model=PlateConfirmResponse,
    summary="Host confirms the booker's plate",
)
async def confirm_booker_plate(
    payload: PlateConfirmRequest,
    spot_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
    db: AsyncSession = Depends(get_db_session),
) -> PlateConfirmResponse:
    try:
        result = await service.confirm_booker_plate(spot_id, account.id, payload.plate, payload.booking_session_id)
    except DomainError as exc:
        raise await _fail(db, exc) from exc
    await db.commit()
    return PlateConfirmResponse.model_validate(result)


@router.post(
    "/{spot_id}/host-plate",
    response_model=PlateConfirmResponse,
    summary="Booker confirms the host's plate",
)
async def confirm_host_plate(
    payload: PlateConfirmRequest,
    spot_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
    db: AsyncSession = Depends(get_db_session),
) -> PlateConfirmResponse:
    try:
        result = await service.confirm_host_plate(spot_id, account.id, payload.plate, payload.booking_session_id)
    except DomainError as exc:
        raise await _fail(db, exc) from exc
    await db.commit()
    return PlateConfirmResponse.model_validate(result)


@router.post("/{spot_id}/cancel", response_model=SpotActionResponse, summary="Host withdraws or cancels a spot")
async def cancel_spot(
    spot_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
    db: AsyncSession = Depends(get_db_session),
) -> SpotActionResponse:
    try:
        result = await service.cancel_spot(spot_id, account.id)
    except DomainError as exc:
        raise await _fail(db, exc) from exc
    await db.commit()
    return SpotActionResponse.model_validate(result)


@router.post("/{spot_id}/cancel-booking", response_model=SpotActionResponse, summary="Booker releases a booking")
async def cancel_booking(
    payload: CancelBookingRequest | None = None,
    spot_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
    db: AsyncSession = Depends(get_db_session),
) -> SpotActionResponse:
    session_id = payload.booking_session_id if payload else None
    try:
        result = await service.cancel_booking(spot_id, account.id, session_id)
    except DomainError as exc:
        raise await _fail(db, exc) from exc
    await db.commit()
    return SpotActionResponse.model_validate(result)


@router.post("/{spot_id}/renew", response_model=SpotActionResponse, summary="Host renews a lapsed listing")
async def renew_spot(
    spot_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
    db: AsyncSession = Depends(get_db_session),
) -> SpotActionResponse:
    try:
        result = await service.renew_spot(spot_id, account.id)
    except DomainError as exc:
        raise await _fail(db, exc) from exc
    await db.commit()
    return SpotActionResponse.model_validate(result)


@router.post("/{spot_id}/complete", response_model=SpotActionResponse, summary="Host marks the swap completed")
async def complete_swap(
    spot_id: str = Path(...),
    account: AccountDomain = Depends(get_current_account),
    service: SpotService = Depends(get_spot_service),
    db: AsyncSession = Depends(get_db_session),
) -> SpotActionResponse:
    try:
        result = await service.complete_swap(spot_id, account.id)
    except DomainError as exc:
        raise await _fail(db, exc) from exc
    await db.commit()
    return SpotActionResponse.model_validate(result)
