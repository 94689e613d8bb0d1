"""Wallet domain service"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Account as AccountModel, WalletLedgerEntry as LedgerEntryModel, utcnow
from app.infrastructure.database.repositories.wallet_repository import SqlWalletRepository

from .exceptions import WalletNotFoundError
from .models import LedgerEntryRecord, WALLET_VERSION, WalletBalance, WalletSnapshot
from .money import round_half_up
from .repository import WalletRepository

logger = logging.getLogger(__name__)


def _finite(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_wallet_cents(
    available_raw: Any,
    reserved_raw: Any,
    legacy_raw: Any = None,
) -> WalletBalance:
    """Resolve the cents balances of a profile, falling back to the legacy euro float.

    ``migrated`` is set whenever the stored values must be rewritten: a field
    is missing or negative.
    """
    available_value = _finite(available_raw)
    reserved_value = _finite(reserved_raw)
    legacy_value = _finite(legacy_raw)

    available = round_half_up(available_value) if available_value is not None else None
    reserved = round_half_up(reserved_value) if reserved_value is not None else None
    legacy = round_half_up(legacy_value * 100) if legacy_value is not None else None

    migrated = False
    if available is None:
        available = legacy if legacy is not None else 0
        migrated = True
    if reserved is None:
        reserved = 0
        migrated = True
    if available_value is not None and available_value < 0:
        migrated = True
    if reserved_value is not None and reserved_value < 0:
        migrated = True

    return WalletBalance(available=max(0, available), reserved=max(0, reserved), migrated=migrated)


class WalletService:
    """Balance bookkeeping on account profiles plus the wallet ledger."""

    def __init__(self, repository: WalletRepository, currency: str = "eur") -> None:
        self._repository = repository
        self._currency = currency

    @classmethod
    def with_session(cls, session: AsyncSession, currency: str = "eur") -> "WalletService":
        return cls(SqlWalletRepository(session), currency)

    @property
    def currency(self) -> str:
        return self._currency

    async def get_profile(self, account_id: str, *, for_update: bool = False) -> AccountModel | None:
        return await self._repository.get_profile(account_id, for_update=for_update)

    def ensure_wallet_fields(self, profile: AccountModel) -> WalletBalance:
        balance = normalize_wallet_cents(
            profile.wallet_available_cents,
            profile.wallet_reserved_cents,
            profile.wallet,
        )
        if balance.migrated:
            logger.info("Migrating wallet fields for account %s", profile.id)
            profile.wallet_available_cents = balance.available
            profile.wallet_reserved_cents = balance.reserved
            profile.wallet_version = WALLET_VERSION
            profile.updated_at = utcnow()
        return balance

    def set_available(self, profile: AccountModel, available_cents: int, reserved_cents: int | None = None) -> None:
        profile.wallet_available_cents = available_cents
        if reserved_cents is not None:
            profile.wallet_reserved_cents = reserved_cents
        profile.wallet = available_cents / 100
        profile.wallet_version = WALLET_VERSION
        profile.updated_at = utcnow()

    async def record_entry(
        self,
        entry_id: str,
        *,
        uid: str,
        type: str,
        amount_cents: int,
        balance_after_cents: int,
        currency: Optional[str] = None,
        spot_id: Optional[str] = None,
        booking_session_id: Optional[str] = None,
        counterparty_uid: Optional[str] = None,
        session_id: Optional[str] = None,
        payment_intent_id: Optional[str] = None,
    ) -> LedgerEntryRecord:
        values = {
            "uid": uid,
            "type": type,
            "amount_cents": amount_cents,
            "balance_after_cents": balance_after_cents,
            "currency": currency or self._currency,
            "spot_id": spot_id,
            "booking_session_id": booking_session_id,
            "counterparty_uid": counterparty_uid,
            "session_id": session_id,
            "payment_intent_id": payment_intent_id,
            "created_at": utcnow(),
        }
        entry = await self._repository.upsert_ledger_entry(entry_id, values)
        return self._to_record(entry)

    async def snapshot(self, account_id: str) -> WalletSnapshot:
        profile = await self._repository.get_profile(account_id)
        if profile is None:
            raise WalletNotFoundError(account_id)
        balance = self.ensure_wallet_fields(profile)
        return WalletSnapshot(
            account_id=profile.id,
            available_cents=balance.available,
            reserved_cents=balance.reserved,
            currency=self._currency,
            updated_at=profile.updated_at,
        )

    async def list_ledger(self, account_id: str, limit: int = 20, offset: int = 0) -> list[LedgerEntryRecord]:
        rows = await self._repository.list_ledger(account_id, limit, offset)
        return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(model: LedgerEntryModel) -> LedgerEntryRecord:
        return LedgerEntryRecord(
            id=model.id,
            uid=model.uid,
            type=model.type,
            amount_cents=model.amount_cents,
            balance_after_cents=model.balance_after_cents,
            currency=model.currency,
            spot_id=model.spot_id,
            booking_session_id=model.booking_session_id,
            counterparty_uid=model.counterparty_uid,
            session_id=model.session_id,
            payment_intent_id=model.payment_intent_id,
            created_at=model.created_at,
        )
