"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

WALLET_VERSION = 1

LEDGER_TOPUP = "topup"
LEDGER_BOOKING_DEBIT = "booking_debit"
LEDGER_BOOKING_CREDIT = "booking_credit"


@dataclass(slots=True)
class WalletBalance:
    available: int
    reserved: int
    migrated: bool = False


@dataclass(slots=True)
class WalletSnapshot:
    account_id: str
    available_cents: int
    reserved_cents: int
    currency: str
    updated_at: Optional[datetime]


@dataclass(slots=True)
class LedgerEntryRecord:
    id: str
    uid: str
    type: str
    amount_cents: int
    balance_after_cents: int
    currency: str
    spot_id: Optional[str]
    booking_session_id: Optional[str]
    counterparty_uid: Optional[str]
    session_id: Optional[str]
    payment_intent_id: Optional[str]
    created_at: Optional[datetime]


def booking_debit_ledger_id(spot_id: str, booking_session_id: str, uid: str) -> str:
    return f"booking_{spot_id}_{booking_session_id}_{uid}_debit"


def booking_credit_ledger_id(spot_id: str, booking_session_id: str, host_id: str) -> str:
    return f"booking_{spot_id}_{booking_session_id}_{host_id}_credit"


def topup_ledger_id(checkout_session_id: str, uid: str) -> str:
    return f"topup_{checkout_session_id}_{uid}"
