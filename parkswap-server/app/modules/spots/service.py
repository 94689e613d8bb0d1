"""Spot lifecycle: proposing, booking, navigation, plate checks and cancellation.

Every mutating call runs inside the caller's transaction. Rows that decide the
outcome (the spot and the involved profiles) are read ``FOR UPDATE`` so two
concurrent bookings of one spot serialize on the spot row.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Account as AccountModel, Spot as SpotModel, utcnow
from app.modules.accounts import Account
from app.infrastructure.database.repositories.spot_repository import SqlSpotRepository
from app.modules.common import DomainError
from app.modules.history import ROLE_BOOKER, ROLE_HOST, STATUS_ACCEPTED, STATUS_CONCLUDED, STATUS_STARTED
from app.modules.history import HistoryService
from app.modules.wallets import WalletService
from app.modules.wallets.models import (
    LEDGER_BOOKING_CREDIT,
    LEDGER_BOOKING_DEBIT,
    booking_credit_ledger_id,
    booking_debit_ledger_id,
)
from app.modules.wallets.money import clamp, parse_price_to_cents

from .exceptions import (
    ActiveSpotExistsError,
    InsufficientFundsError,
    NoPremiumParksError,
    NotBookerError,
    NotHostError,
    PlateMismatchError,
    SessionMismatchError,
    SpotError,
    SpotMissingError,
    SpotNotAvailableError,
    SpotNotBookedError,
)
from .models import (
    BOOKER_RESET,
    BOOKING_STATE_RESET,
    CANCELLATION_RESET,
    STATUS_AVAILABLE,
    STATUS_BOOKED,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_EXPIRED,
    BookingRequest,
    BookingResult,
    NavigationResult,
    PlateConfirmation,
    SpotActionResult,
    SpotProposal,
    SpotRecord,
    as_utc,
    clean_id,
    expires_at,
    new_id,
    normalize_plate,
    safe_booker_name,
)
from .repository import SpotRepository

logger = logging.getLogger(__name__)


def _price_cents(spot: SpotModel) -> int:
    cents = parse_price_to_cents(spot.price)
    return cents if cents is not None else 0


def _apply(spot: SpotModel, values: dict) -> None:
    for key, value in values.items():
        setattr(spot, key, value)


class SpotService:
    """Coordinates spots, wallets, premium parks and the swap history."""

    def __init__(
        self,
        repository: SpotRepository,
        wallets: WalletService,
        history: HistoryService,
        premium_parks_max: int = 5,
    ) -> None:
        self._repository = repository
        self._wallets = wallets
        self._history = history
        self._premium_parks_max = premium_parks_max

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        *,
        currency: str = "eur",
        premium_parks_max: int = 5,
    ) -> "SpotService":
        return cls(
            SqlSpotRepository(session),
            WalletService.with_session(session, currency),
            HistoryService.with_session(session),
            premium_parks_max,
        )

    # ------------------------------------------------------------------
    # Queries

    async def get_spot(self, spot_id: str) -> SpotRecord:
        spot = await self._repository.get(spot_id)
        if spot is None:
            raise SpotMissingError(spot_id)
        return self.to_record(spot)

    async def list_available(self, limit: int = 100, offset: int = 0) -> list[SpotRecord]:
        rows = await self._repository.list_by_status(STATUS_AVAILABLE, limit, offset)
        return [self.to_record(row) for row in rows]

    async def list_for_user(self, account_id: str, limit: int = 50, offset: int = 0) -> list[SpotRecord]:
        rows = await self._repository.list_for_user(account_id, limit, offset)
        return [self.to_record(row) for row in rows]

    # ------------------------------------------------------------------
    # Host side

    async def propose_spot(self, host: Account, proposal: SpotProposal) -> SpotRecord:
        if await self._repository.find_active_for_host(host.id) is not None:
            raise ActiveSpotExistsError()

        spot = await self._repository.create(
            {
                "id": new_id(),
                "host_id": host.id,
                "host_name": host.display_name or host.username,
                "car_model": proposal.car_model,
                "host_vehicle_plate": proposal.vehicle_plate,
                "host_vehicle_id": proposal.vehicle_id,
                "time": proposal.time,
                "price": None if proposal.price is None else str(proposal.price),
                "length": proposal.length,
                "lat": proposal.lat,
                "lng": proposal.lng,
                "x": proposal.x,
                "y": proposal.y,
                "address": proposal.address,
                "status": STATUS_AVAILABLE,
                "created_at": utcnow(),
            }
        )
        await self._history.upsert(spot, user_id=host.id, status=STATUS_STARTED, role=ROLE_HOST)
        logger.info("Spot %s proposed by %s", spot.id, host.id)
        return self.to_record(spot)

    async def cancel_spot(self, spot_id: str, uid: str) -> SpotActionResult:
        spot = await self._lock_spot(spot_id)
        if spot.host_id != uid:
            raise NotHostError()

        if not spot.booker_id:
            await self._repository.delete(spot)
            logger.info("Spot %s withdrawn by host %s", spot_id, uid)
            return SpotActionResult(deleted=True)

        values = {
            **BOOKING_STATE_RESET,
            **BOOKER_RESET,
            "status": STATUS_CANCELLED,
            "cancelled_at": utcnow(),
            "cancelled_by": uid,
            "cancelled_by_role": ROLE_HOST,
            "cancelled_for": spot.booker_id,
            "cancelled_for_name": spot.booker_name,
        }

        host = await self._wallets.get_profile(uid, for_update=True)
        if host is not None:
            current = self._premium_parks(host)
            after = clamp(current - 1, 0, self._premium_parks_max)
            self._set_premium_parks(host, after)
            values.update(
                premium_parks_applied_at=utcnow(),
                premium_parks_applied_by=uid,
                premium_parks_host_delta=after - current,
                premium_parks_host_after=after,
            )

        _apply(spot, values)
        await self._repository.flush()
        logger.info("Spot %s cancelled by host %s", spot_id, uid)
        return SpotActionResult(status=STATUS_CANCELLED)

    async def renew_spot(self, spot_id: str, uid: str) -> SpotActionResult:
        spot = await self._repository.get(spot_id, for_update=True)
        if spot is None:
            return SpotActionResult(skipped=True)
        if spot.host_id != uid:
            raise NotHostError()
        if spot.status == STATUS_BOOKED or spot.booker_id:
            return SpotActionResult(skipped=True, status=spot.status)

        _apply(
            spot,
            {
                **BOOKING_STATE_RESET,
                **BOOKER_RESET,
                **CANCELLATION_RESET,
                "status": STATUS_AVAILABLE,
                "created_at": utcnow(),
            },
        )
        await self._repository.flush()
        return SpotActionResult(status=STATUS_AVAILABLE)

    async def complete_swap(self, spot_id: str, uid: str) -> SpotActionResult:
        spot = await self._lock_spot(spot_id)
        if spot.host_id != uid:
            raise NotHostError()
        if spot.status == STATUS_COMPLETED:
            return SpotActionResult(already=True, status=STATUS_COMPLETED)
        if spot.status != STATUS_BOOKED:
            raise SpotNotBookedError()

        spot.status = STATUS_COMPLETED
        spot.completed_at = utcnow()
        await self._repository.flush()
        return SpotActionResult(status=STATUS_COMPLETED)

    async def confirm_booker_plate(
        self,
        spot_id: str,
        uid: str,
        plate: str,
        booking_session_id: Optional[str] = None,
    ) -> PlateConfirmation:
        """Host confirms the plate of the arriving booker."""
        submitted = self._submitted_plate(plate)
        spot = await self._lock_spot(spot_id)
        if spot.host_id != uid:
            raise NotHostError()
        self._check_plate_session(spot, booking_session_id)

        expected = normalize_plate(spot.booker_vehicle_plate)
        if not expected or submitted != expected:
            raise PlateMismatchError()

        if spot.host_verified_booker_plate and spot.host_confirmed_booker_plate_norm == submitted:
            return PlateConfirmation(ok=True, already=True, finalized=spot.status == STATUS_COMPLETED)

        spot.host_verified_booker_plate = True
        spot.host_verified_booker_plate_at = utcnow()
        spot.host_confirmed_booker_plate = plate
        spot.host_confirmed_booker_plate_norm = submitted
        finalized = await self._finalize_if_verified(spot)
        return PlateConfirmation(ok=True, finalized=finalized)

    async def expire_spots(self, now: Optional[datetime] = None) -> int:
        """Move lapsed available listings to ``expired``; returns how many changed."""
        moment = as_utc(now) or utcnow()
        expired = 0
        for spot in await self._repository.list_expirable():
            deadline = expires_at(spot.created_at, spot.time)
            if deadline is not None and deadline <= moment:
                spot.status = STATUS_EXPIRED
                expired += 1
        if expired:
            await self._repository.flush()
            logger.info("Expired %d spot(s)", expired)
        return expired

    # ------------------------------------------------------------------
    # Booker side

    async def book_spot(self, uid: str, request: BookingRequest) -> BookingResult:
        spot_id = request.spot_id.strip() if isinstance(request.spot_id, str) else ""
        if not spot_id:
            raise SpotError("spot_missing", status="invalid-argument")

        booking_session_id = clean_id(request.booking_session_id) or new_id()
        book_op_id = clean_id(request.book_op_id) or booking_session_id
        booker_name = safe_booker_name(request.booker_name)
        vehicle_plate = clean_id(request.booker_vehicle_plate)
        vehicle_id = clean_id(request.booker_vehicle_id)

        spot = await self._lock_spot(spot_id)
        status = spot.status
        if status and status != STATUS_AVAILABLE:
            if (
                status == STATUS_BOOKED
                and spot.booker_id == uid
                and spot.booking_session_id == booking_session_id
                and spot.book_op_id == book_op_id
            ):
                return BookingResult(
                    ok=True,
                    is_free=_price_cents(spot) <= 0,
                    booking_session_id=spot.booking_session_id,
                    host_id=spot.host_id,
                    already_booked=True,
                )
            raise SpotNotAvailableError()

        amount_cents = _price_cents(spot)
        is_free = amount_cents <= 0
        host_id = spot.host_id

        booker = await self._wallets.get_profile(uid, for_update=True)
        if booker is None:
            raise SpotError("profile_missing", status="not-found")
        balance = self._wallets.ensure_wallet_fields(booker)

        if is_free and self._premium_parks(booker) <= 0:
            raise NoPremiumParksError()

        if amount_cents > 0:
            if balance.available < amount_cents:
                raise InsufficientFundsError(amount_cents, balance.available)

            booker_after = balance.available - amount_cents
            self._wallets.set_available(booker, booker_after)

            if host_id and host_id != uid:
                host = await self._wallets.get_profile(host_id, for_update=True)
                if host is None:
                    raise SpotError("host_missing", status="not-found")
                host_balance = self._wallets.ensure_wallet_fields(host)
                host_after = host_balance.available + amount_cents
                self._wallets.set_available(host, host_after)
                await self._wallets.record_entry(
                    booking_credit_ledger_id(spot_id, booking_session_id, host_id),
                    uid=host_id,
                    type=LEDGER_BOOKING_CREDIT,
                    amount_cents=amount_cents,
                    balance_after_cents=host_after,
                    spot_id=spot_id,
                    booking_session_id=booking_session_id,
                    counterparty_uid=uid,
                )

            await self._wallets.record_entry(
                booking_debit_ledger_id(spot_id, booking_session_id, uid),
                uid=uid,
                type=LEDGER_BOOKING_DEBIT,
                amount_cents=amount_cents,
                balance_after_cents=booker_after,
                spot_id=spot_id,
                booking_session_id=booking_session_id,
                counterparty_uid=host_id,
            )

        now = utcnow()
        _apply(
            spot,
            {
                **BOOKING_STATE_RESET,
                **CANCELLATION_RESET,
                "status": STATUS_BOOKED,
                "booking_session_id": booking_session_id,
                "booked_at": now,
                "book_op_id": book_op_id,
                "book_op_at": now,
                "booker_id": uid,
                "booker_name": booker_name,
                "booker_vehicle_plate": vehicle_plate,
                "booker_vehicle_id": vehicle_id,
            },
        )
        await self._repository.flush()

        await self._history.upsert(spot, user_id=uid, status=STATUS_ACCEPTED, role=ROLE_BOOKER)
        if host_id:
            await self._history.upsert(spot, user_id=host_id, status=STATUS_ACCEPTED, role=ROLE_HOST)

        logger.info(
            "Spot %s booked by %s (session=%s, amount=%d)",
            spot_id,
            uid,
            booking_session_id,
            amount_cents,
        )
        return BookingResult(ok=True, is_free=is_free, booking_session_id=booking_session_id, host_id=host_id)

    async def start_navigation(
        self,
        spot_id: str,
        booker: Account,
        *,
        booking_session_id: Optional[str] = None,
        nav_op_id: Optional[str] = None,
        vehicle_plate: Optional[str] = None,
        vehicle_id: Optional[str] = None,
    ) -> NavigationResult:
        uid = booker.id
        spot = await self._lock_spot(spot_id)
        if spot.status != STATUS_BOOKED:
            raise SpotNotBookedError()
        if spot.booker_id != uid:
            raise NotBookerError()

        requested_session = clean_id(booking_session_id)
        live_session = clean_id(spot.booking_session_id)
        if requested_session and live_session and requested_session != live_session:
            raise SessionMismatchError()
        resolved_session = live_session or requested_session or new_id()

        is_free = _price_cents(spot) <= 0
        host_id = spot.host_id
        result = NavigationResult(ok=True, is_free=is_free, booking_session_id=resolved_session)

        if is_free and spot.premium_parks_applied_at is None:
            profile = await self._wallets.get_profile(uid, for_update=True)
            if profile is None:
                raise SpotError("profile_missing", status="not-found")
            before = self._premium_parks(profile)
            if before <= 0:
                raise NoPremiumParksError()
            after = clamp(before - 1, 0, self._premium_parks_max)
            self._set_premium_parks(profile, after)

            host_after = None
            host_delta = 0
            if host_id and host_id != uid:
                host = await self._wallets.get_profile(host_id, for_update=True)
                if host is not None:
                    host_before = self._premium_parks(host)
                    host_after = clamp(host_before + 1, 0, self._premium_parks_max)
                    host_delta = host_after - host_before
                    self._set_premium_parks(host, host_after)

            _apply(
                spot,
                {
                    "premium_parks_applied_at": utcnow(),
                    "premium_parks_applied_by": uid,
                    "premium_parks_booker_delta": -1,
                    "premium_parks_booker_after": after,
                    "premium_parks_host_delta": host_delta,
                    "premium_parks_host_after": host_after,
                },
            )
            result.premium_parks_delta_applied = True
            result.booker_before = before
            result.booker_after = after
            result.host_after = host_after
            result.host_delta = host_delta

        now = utcnow()
        if not spot.booking_session_id:
            spot.booking_session_id = resolved_session
        if not spot.nav_op_id:
            spot.nav_op_id = clean_id(nav_op_id) or new_id()
            spot.nav_op_at = now
        if not spot.booker_accepted:
            spot.booker_accepted = True
            spot.booker_accepted_at = now

        name = safe_booker_name(booker.display_name)
        if spot.booker_name != name:
            spot.booker_name = name
        plate = clean_id(vehicle_plate)
        if plate and spot.booker_vehicle_plate != plate:
            spot.booker_vehicle_plate = plate
        vehicle = clean_id(vehicle_id)
        if vehicle and spot.booker_vehicle_id != vehicle:
            spot.booker_vehicle_id = vehicle

        await self._repository.flush()
        return result

    async def confirm_host_plate(
        self,
        spot_id: str,
        uid: str,
        plate: str,
        booking_session_id: Optional[str] = None,
    ) -> PlateConfirmation:
        """Booker confirms the plate of the host's vehicle."""
        submitted = self._submitted_plate(plate)
        spot = await self._lock_spot(spot_id)
        if spot.booker_id != uid:
            raise NotBookerError()
        self._check_plate_session(spot, booking_session_id)

        expected = normalize_plate(spot.host_vehicle_plate)
        if not expected or submitted != expected:
            raise PlateMismatchError()

        if spot.booker_verified_host_plate and spot.booker_confirmed_host_plate_norm == submitted:
            return PlateConfirmation(ok=True, already=True, finalized=spot.status == STATUS_COMPLETED)

        spot.booker_verified_host_plate = True
        spot.booker_verified_host_plate_at = utcnow()
        spot.booker_confirmed_host_plate = plate
        spot.booker_confirmed_host_plate_norm = submitted
        finalized = await self._finalize_if_verified(spot)
        return PlateConfirmation(ok=True, finalized=finalized)

    async def cancel_booking(
        self,
        spot_id: str,
        uid: str,
        booking_session_id: Optional[str] = None,
    ) -> SpotActionResult:
        spot = await self._repository.get(spot_id, for_update=True)
        if spot is None:
            return SpotActionResult(skipped=True)
        if spot.status != STATUS_BOOKED:
            return SpotActionResult(already=True, status=spot.status)
        if spot.booker_id != uid:
            raise NotBookerError()

        requested_session = clean_id(booking_session_id)
        live_session = clean_id(spot.booking_session_id)
        if requested_session and live_session and requested_session != live_session:
            # A newer booking session owns the spot now.
            return SpotActionResult(stale=True, status=spot.status)

        _apply(
            spot,
            {
                **BOOKING_STATE_RESET,
                **BOOKER_RESET,
                **CANCELLATION_RESET,
                "status": STATUS_AVAILABLE,
            },
        )
        await self._repository.flush()
        logger.info("Booking on spot %s released by %s", spot_id, uid)
        return SpotActionResult(status=STATUS_AVAILABLE)

    # ------------------------------------------------------------------
    # Helpers

    async def _lock_spot(self, spot_id: str) -> SpotModel:
        spot = await self._repository.get(spot_id, for_update=True)
        if spot is None:
            raise SpotMissingError(spot_id)
        return spot

    def _premium_parks(self, profile: AccountModel) -> int:
        value = profile.premium_parks
        return value if value is not None else self._premium_parks_max

    @staticmethod
    def _set_premium_parks(profile: AccountModel, value: int) -> None:
        profile.premium_parks = value
        profile.premium_parks_initialized = True

    @staticmethod
    def _submitted_plate(plate: str) -> str:
        submitted = normalize_plate(plate)
        if not submitted:
            raise DomainError("plate_missing", status="invalid-argument")
        return submitted

    @staticmethod
    def _check_plate_session(spot: SpotModel, booking_session_id: Optional[str]) -> None:
        if spot.status not in (STATUS_BOOKED, STATUS_COMPLETED):
            raise SpotNotBookedError()
        requested_session = clean_id(booking_session_id)
        live_session = clean_id(spot.booking_session_id)
        if requested_session and live_session and requested_session != live_session:
            raise SessionMismatchError()

    async def _finalize_if_verified(self, spot: SpotModel) -> bool:
        should_finalize = (
            spot.host_verified_booker_plate
            and spot.booker_verified_host_plate
            and not spot.plate_confirmed
            and spot.status != STATUS_COMPLETED
        )
        if should_finalize:
            spot.status = STATUS_COMPLETED
            spot.plate_confirmed = True
            spot.completed_at = utcnow()
        await self._repository.flush()

        if should_finalize:
            if spot.host_id:
                await self._history.upsert(spot, user_id=spot.host_id, status=STATUS_CONCLUDED, role=ROLE_HOST)
            if spot.booker_id:
                await self._history.upsert(spot, user_id=spot.booker_id, status=STATUS_CONCLUDED, role=ROLE_BOOKER)
            logger.info("Swap on spot %s completed", spot.id)
        return bool(should_finalize)

    @staticmethod
    def to_record(spot: SpotModel) -> SpotRecord:
        return SpotRecord(
            id=spot.id,
            host_id=spot.host_id,
            host_name=spot.host_name,
            status=spot.status or STATUS_AVAILABLE,
            price=spot.price,
            price_cents=_price_cents(spot),
            time=spot.time,
            created_at=spot.created_at,
            expires_at=expires_at(spot.created_at, spot.time),
            car_model=spot.car_model,
            host_vehicle_plate=spot.host_vehicle_plate,
            length=spot.length,
            lat=spot.lat,
            lng=spot.lng,
            x=spot.x,
            y=spot.y,
            address=spot.address,
            booking_session_id=spot.booking_session_id,
            booker_id=spot.booker_id,
            booker_name=spot.booker_name,
            booker_vehicle_plate=spot.booker_vehicle_plate,
            booker_accepted=bool(spot.booker_accepted),
            host_verified_booker_plate=bool(spot.host_verified_booker_plate),
            booker_verified_host_plate=bool(spot.booker_verified_host_plate),
            plate_confirmed=bool(spot.plate_confirmed),
            completed_at=spot.completed_at,
            cancelled_at=spot.cancelled_at,
            cancelled_by_role=spot.cancelled_by_role,
        )


__all__ = ["SpotService"]
