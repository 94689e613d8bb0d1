"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Account, WalletLedgerEntry


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_profile(self, account_id: str, *, for_update: bool = False) -> Account | None:
        stmt = select(Account).where(Account.id == account_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def upsert_ledger_entry(self, entry_id: str, values: dict[str, Any]) -> WalletLedgerEntry:
        entry = await self.session.get(WalletLedgerEntry, entry_id)
        if entry is None:
            entry = WalletLedgerEntry(id=entry_id, **values)
            self.session.add(entry)
        else:
            for key, value in values.items():
                setattr(entry, key, value)
        await self.session.flush()
        return entry

    async def list_ledger(self, account_id: str, limit: int, offset: int) -> Sequence[WalletLedgerEntry]:
        stmt = (
            select(WalletLedgerEntry)
            .where(WalletLedgerEntry.uid == account_id)
            .order_by(desc(WalletLedgerEntry.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
