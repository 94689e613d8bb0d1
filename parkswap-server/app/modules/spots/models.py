"""Domain models and pure helpers for the spot lifecycle."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

STATUS_AVAILABLE = "available"
STATUS_BOOKED = "booked"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
STATUS_EXPIRED = "expired"

INACTIVE_STATUSES = frozenset({STATUS_COMPLETED, STATUS_CANCELLED, STATUS_EXPIRED})

DEFAULT_BOOKER_NAME = "Seeker"

_PLATE_JUNK = re.compile(r"[^A-Z0-9]")

# Per-booking state cleared whenever a spot is booked, cancelled or renewed.
BOOKING_STATE_RESET: dict[str, Any] = {
    "booker_accepted": False,
    "booker_accepted_at": None,
    "nav_op_id": None,
    "nav_op_at": None,
    "premium_parks_applied_at": None,
    "premium_parks_applied_by": None,
    "premium_parks_booker_delta": None,
    "premium_parks_booker_after": None,
    "premium_parks_host_delta": None,
    "premium_parks_host_after": None,
    "host_verified_booker_plate": False,
    "host_verified_booker_plate_at": None,
    "host_confirmed_booker_plate": None,
    "host_confirmed_booker_plate_norm": None,
    "booker_verified_host_plate": False,
    "booker_verified_host_plate_at": None,
    "booker_confirmed_host_plate": None,
    "booker_confirmed_host_plate_norm": None,
    "plate_confirmed": False,
    "completed_at": None,
}

CANCELLATION_RESET: dict[str, Any] = {
    "cancelled_at": None,
    "cancelled_by": None,
    "cancelled_by_role": None,
    "cancelled_for": None,
    "cancelled_for_name": None,
}

BOOKER_RESET: dict[str, Any] = {
    "booking_session_id": None,
    "booked_at": None,
    "book_op_id": None,
    "book_op_at": None,
    "booker_id": None,
    "booker_name": None,
    "booker_vehicle_plate": None,
    "booker_vehicle_id": None,
}


def new_id() -> str:
    return uuid.uuid4().hex


def normalize_plate(plate: Any) -> str:
    return _PLATE_JUNK.sub("", str(plate or "").upper())


def safe_booker_name(value: Any) -> str:
    trimmed = value.strip() if isinstance(value, str) else ""
    return trimmed or DEFAULT_BOOKER_NAME


def clean_id(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def expires_at(created_at: Optional[datetime], minutes: Optional[int]) -> Optional[datetime]:
    """Moment an available spot lapses; ``None`` means it never does."""
    created = as_utc(created_at)
    if created is None or minutes is None:
        return None
    return created + timedelta(minutes=minutes)


@dataclass(slots=True)
class SpotProposal:
    time: Optional[int] = None
    price: Any = None
    car_model: Optional[str] = None
    length: Optional[float] = None
    vehicle_plate: Optional[str] = None
    vehicle_id: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None
    address: Optional[str] = None


@dataclass(slots=True)
class BookingRequest:
    spot_id: Any
    booking_session_id: Any = None
    book_op_id: Any = None
    booker_name: Any = None
    booker_vehicle_plate: Any = None
    booker_vehicle_id: Any = None


@dataclass(slots=True)
class BookingResult:
    ok: bool
    is_free: bool
    booking_session_id: str
    host_id: Optional[str]
    already_booked: bool = False


@dataclass(slots=True)
class NavigationResult:
    ok: bool
    is_free: bool
    booking_session_id: str
    premium_parks_delta_applied: bool = False
    booker_before: Optional[int] = None
    booker_after: Optional[int] = None
    host_after: Optional[int] = None
    host_delta: int = 0


@dataclass(slots=True)
class PlateConfirmation:
    ok: bool
    already: bool = False
    finalized: bool = False


@dataclass(slots=True)
class SpotActionResult:
    ok: bool = True
    skipped: bool = False
    already: bool = False
    stale: bool = False
    deleted: bool = False
    status: Optional[str] = None


@dataclass(slots=True)
class SpotRecord:
    id: str
    host_id: Optional[str]
    host_name: Optional[str]
    status: str
    price: Optional[str]
    price_cents: int
    time: Optional[int]
    created_at: Optional[datetime]
    expires_at: Optional[datetime]
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
