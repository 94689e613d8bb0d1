"""Repository protocol for wallet operations."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from app.db.models import Account as AccountModel, WalletLedgerEntry as LedgerEntryModel


class WalletRepository(Protocol):
    async def get_profile(self, account_id: str, *, for_update: bool = False) -> AccountModel | None:
        ...

    async def upsert_ledger_entry(self, entry_id: str, values: dict[str, Any]) -> LedgerEntryModel:
        ...

    async def list_ledger(self, account_id: str, limit: int, offset: int) -> Sequence[LedgerEntryModel]:
        ...
