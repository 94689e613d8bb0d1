"""Domain models for the swap history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

STATUS_STARTED = "started"
STATUS_ACCEPTED = "accepted"
STATUS_CONCLUDED = "concluded"

ROLE_HOST = "host"
ROLE_BOOKER = "booker"


@dataclass(slots=True)
class SwapRecord:
    id: str
    user_id: str
    spot_id: str
    booking_session_id: Optional[str]
    status: str
    role: str
    host_id: Optional[str]
    host_name: Optional[str]
    booker_id: Optional[str]
    booker_name: Optional[str]
    amount_cents: int
    title: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


def swap_transaction_id(spot_id: str, user_id: str) -> str:
    return f"{spot_id}-{user_id}"


def swap_title(host_name: Optional[str], booker_name: Optional[str]) -> str:
    if host_name and booker_name:
        return f"{booker_name} ➜ {host_name}"
    return host_name or booker_name or "Swap"
