"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Account:
    id: str
    username: str
    role: str
    is_active: bool
    password_hash: str = field(repr=False)
    email: Optional[str] = None
    display_name: Optional[str] = None
    phone: Optional[str] = None
    language: str = "en"
    wallet_available_cents: Optional[int] = None
    wallet_reserved_cents: Optional[int] = None
    wallet: Optional[float] = None
    wallet_version: Optional[int] = None
    premium_parks: int = 5
    transactions: int = 0
    kyc_status: Optional[str] = None
    kyc_session_id: Optional[str] = None
    kyc_provider: Optional[str] = None
    kyc_updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None


@dataclass(slots=True)
class AccountCreateInput:
    username: str
    password: str
    role: str = "user"
    email: Optional[str] = None
    display_name: Optional[str] = None
    is_active: bool = True


# Sentinel used to differentiate between "not provided" and explicit None.
UNSET = object()


@dataclass(slots=True)
class ProfileUpdateInput:
    display_name: Optional[str] | object = UNSET
    phone: Optional[str] | object = UNSET
    language: Optional[str] | object = UNSET
    email: Optional[str] | object = UNSET


@dataclass(slots=True)
class LeaderboardEntry:
    rank: int
    account_id: str
    display_name: str
    transactions: int
