"""SQLAlchemy implementation for swap history"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Account, SwapTransaction, utcnow


class SqlSwapRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, transaction_id: str) -> SwapTransaction | None:
        stmt = (
            select(SwapTransaction)
            .where(SwapTransaction.id == transaction_id)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add(self, transaction: SwapTransaction) -> SwapTransaction:
        self.session.add(transaction)
        await self.session.flush()
        return transaction

    async def flush(self) -> None:
        await self.session.flush()

    async def increment_account_transactions(self, account_id: str) -> None:
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(transactions=Account.transactions + 1, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)

    async def list_for_user(self, account_id: str, limit: int, offset: int) -> Sequence[SwapTransaction]:
        stmt = (
            select(SwapTransaction)
            .where(SwapTransaction.user_id == account_id)
            .order_by(desc(SwapTransaction.updated_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
