"""Domain models for wallet top-ups."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class TopupRecord:
    id: str
    uid: str
    amount_cents: int
    fee_cents: int
    total_cents: int
    status: str
    currency: str
    session_id: Optional[str]
    payment_intent_id: Optional[str]
    created_at: Optional[datetime]


@dataclass(slots=True)
class CheckoutLink:
    url: Optional[str]
    session_id: str
    amount_cents: int
    fee_cents: int
    total_cents: int


@dataclass(slots=True)
class TopupOutcome:
    credited: bool
    uid: Optional[str] = None
    amount_cents: int = 0
    balance_after_cents: Optional[int] = None
    reason: Optional[str] = None
