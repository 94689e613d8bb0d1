"""SQLAlchemy implementation for top-up repository"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import WalletTopup


class SqlTopupRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, checkout_session_id: str, *, for_update: bool = False) -> WalletTopup | None:
        stmt = select(WalletTopup).where(WalletTopup.id == checkout_session_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_once(self, checkout_session_id: str, values: dict[str, Any]) -> WalletTopup | None:
        """Insert the top-up row; ``None`` when another writer already inserted it."""
        topup = WalletTopup(id=checkout_session_id, **values)
        try:
            async with self.session.begin_nested():
                self.session.add(topup)
        except IntegrityError:
            return None
        return topup

    async def list_topups(
        self,
        account_id: str,
        limit: int,
        offset: int,
        status: str | None = None,
    ) -> Sequence[WalletTopup]:
        stmt = select(WalletTopup).where(WalletTopup.uid == account_id)
        if status and status != "all":
            stmt = stmt.where(WalletTopup.status == status)
        stmt = stmt.order_by(desc(WalletTopup.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()
