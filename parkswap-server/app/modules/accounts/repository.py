"""Repository protocol for accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence

from app.db.models import Account as AccountModel


class AccountRepository(Protocol):
    """Abstract repository interface for account persistence."""

    async def get_by_id(self, account_id: str) -> AccountModel | None:
        ...

    async def get_by_username(self, username: str) -> AccountModel | None:
        ...

    async def create_account(
        self,
        *,
        username: str,
        password_hash: str,
        role: str,
        email: str | None,
        display_name: str | None,
        is_active: bool,
    ) -> AccountModel:
        ...

    async def update_profile(self, account_id: str, values: dict[str, Any]) -> AccountModel | None:
        ...

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        ...

    async def top_by_transactions(self, limit: int) -> Sequence[AccountModel]:
        ...
