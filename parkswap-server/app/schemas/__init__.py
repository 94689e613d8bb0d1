"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class TokenData(BaseModel):
    account_id: str
    username: str
    role: str


class AccountCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    email: Optional[str] = None
    display_name: Optional[str] = Field(None, max_length=100)


class AccountLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account_id: str
    username: str
    role: str


class AccountResponse(BaseModel):
    id: str
    username: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    phone: Optional[str] = None
    language: str = "en"
    role: str
    is_active: bool
    wallet_available_cents: Optional[int] = None
    wallet_reserved_cents: Optional[int] = None
    wallet: Optional[float] = None
    wallet_version: Optional[int] = None
    premium_parks: int
    transactions: int = 0
    kyc_status: Optional[str] = None
    kyc_session_id: Optional[str] = None
    kyc_provider: Optional[str] = None
    kyc_updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=32)
    language: Optional[str] = Field(None, max_length=8)
    email: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True
    message: str = "ok"
    data: Optional[Any] = None


class LeaderboardEntryResponse(BaseModel):
    rank: int
    account_id: str
    display_name: str
    transactions: int

    model_config = ConfigDict(from_attributes=True)


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntryResponse] = Field(default_factory=list)


class WalletSnapshotResponse(BaseModel):
    available_cents: int
    reserved_cents: int
    currency: str
    updated_at: Optional[datetime] = None


class WalletLedgerEntryResponse(BaseModel):
    id: str
    type: str
    amount_cents: int
    balance_after_cents: int
    currency: str
    spot_id: Optional[str] = None
    booking_session_id: Optional[str] = None
    counterparty_uid: Optional[str] = None
    session_id: Optional[str] = None
    payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WalletLedgerListResponse(BaseModel):
    entries: list[WalletLedgerEntryResponse] = Field(default_factory=list)


class WalletTopupRequest(BaseModel):
    # Accepts numbers or strings such as "12,50".
    amount: Union[float, str]
    return_url: Optional[str] = None


class WalletTopupSessionResponse(BaseModel):
    url: Optional[str] = None
    session_id: str
    amount_cents: int
    fee_cents: int
    total_cents: int


class WalletTopupResponse(BaseModel):
    id: str
    amount_cents: int
    fee_cents: int
    total_cents: int
    currency: str
    status: str
    payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WalletTopupListResponse(BaseModel):
    topups: list[WalletTopupResponse] = Field(default_factory=list)


class KycSessionRequest(BaseModel):
    return_url: Optional[str] = None


class KycSessionResponse(BaseModel):
    session_id: str
    status: str
    url: Optional[str] = None
    client_secret: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class WebhookAck(BaseModel):
    received: bool = True


class SpotCreate(BaseModel):
    time: Optional[int] = Field(None, ge=0, description="Minutes the listing stays available")
    price: Optional[Union[float, str]] = None
    car_model: Optional[str] = Field(None, max_length=100)
    length: Optional[float] = None
    vehicle_plate: Optional[str] = Field(None, max_length=32)
    vehicle_id: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None
    address: Optional[str] = Field(None, max_length=255)


class SpotResponse(BaseModel):
    id: str
    host_id: Optional[str] = None
    host_name: Optional[str] = None
    status: str
    price: Optional[str] = None
    price_cents: int = 0
    time: Optional[int] = None
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    car_model: Optional[str] = None
    host_vehicle_plate: Optional[str] = None
    length: Optional[float] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None
    address: Optional[str] = None
    booking_session_id: Optional[str] = None
    booker_id: Optional[str] = None
    booker_name: Optional[str] = None
    booker_vehicle_plate: Optional[str] = None
    booker_accepted: bool = False
    host_verified_booker_plate: bool = False
    booker_verified_host_plate: bool = False
    plate_confirmed: bool = False
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by_role: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SpotListResponse(BaseModel):
    spots: list[SpotResponse] = Field(default_factory=list)


class BookSpotRequest(BaseModel):
    booking_session_id: Optional[str] = None
    op_id: Optional[str] = None
    booker_name: Optional[str] = None
    booker_vehicle_plate: Optional[str] = None
    booker_vehicle_id: Optional[str] = None


class BookSpotResponse(BaseModel):
    ok: bool = True
    is_free: bool
    booking_session_id: str
    host_id: Optional[str] = None
    already_booked: bool = False

    model_config = ConfigDict(from_attributes=True)


class NavigationRequest(BaseModel):
    booking_session_id: Optional[str] = None
    nav_op_id: Optional[str] = None
    vehicle_plate: Optional[str] = None
    vehicle_id: Optional[str] = None


class NavigationResponse(BaseModel):
    ok: bool = True
    is_free: bool
    booking_session_id: str
    premium_parks_delta_applied: bool = False
    booker_before: Optional[int] = None
    booker_after: Optional[int] = None
    host_after: Optional[int] = None
    host_delta: int = 0

    model_config = ConfigDict(from_attributes=True)


class PlateConfirmRequest(BaseModel):
    plate: str = Field(..., min_length=1, max_length=32)
    booking_session_id: Optional[str] = None


class PlateConfirmResponse(BaseModel):
    ok: bool = True
    already: bool = False
    finalized: bool = False

    model_config = ConfigDict(from_attributes=True)


class CancelBookingRequest(BaseModel):
    booking_session_id: Optional[str] = None


class SpotActionResponse(BaseModel):
    ok: bool = True
    skipped: bool = False
    already: bool = False
    stale: bool = False
    deleted: bool = False
    status: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class VehicleCreate(BaseModel):
    model: str = Field(..., min_length=1, max_length=100)
    plate: str = Field(..., min_length=1, max_length=32)
    photo: Optional[str] = Field(None, max_length=1024)


class VehicleResponse(BaseModel):
    id: str
    model: str
    plate: str
    photo: Optional[str] = None
    is_default: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VehicleListResponse(BaseModel):
    vehicles: list[VehicleResponse] = Field(default_factory=list)


class SwapHistoryResponse(BaseModel):
    id: str
    spot_id: str
    booking_session_id: Optional[str] = None
    status: str
    role: str
    host_id: Optional[str] = None
    host_name: Optional[str] = None
    booker_id: Optional[str] = None
    booker_name: Optional[str] = None
    amount_cents: int
    title: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SwapHistoryListResponse(BaseModel):
    transactions: list[SwapHistoryResponse] = Field(default_factory=list)
