"""SQLAlchemy implementation for the spot repository"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Spot

_INACTIVE = ("completed", "cancelled", "expired")


class SqlSpotRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, spot_id: str, *, for_update: bool = False) -> Spot | None:
        stmt = select(Spot).where(Spot.id == spot_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create(self, values: dict[str, Any]) -> Spot:
        spot = Spot(**values)
        self.session.add(spot)
        await self.session.flush()
        await self.session.refresh(spot)
        return spot

    async def delete(self, spot: Spot) -> None:
        await self.session.delete(spot)
        await self.session.flush()

    async def flush(self) -> None:
        await self.session.flush()

    async def find_active_for_host(self, host_id: str) -> Spot | None:
        stmt = (
            select(Spot)
            .where(Spot.host_id == host_id)
            .where(or_(Spot.status.is_(None), Spot.status.not_in(_INACTIVE)))
            .order_by(desc(Spot.created_at))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_by_status(self, status: str, limit: int, offset: int) -> Sequence[Spot]:
        stmt = (
            select(Spot)
            .where(Spot.status == status)
            .order_by(desc(Spot.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_expirable(self) -> Sequence[Spot]:
        stmt = (
            select(Spot)
            .where(or_(Spot.status == "available", Spot.status.is_(None)))
            .where(Spot.time.is_not(None))
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_for_user(self, account_id: str, limit: int, offset: int) -> Sequence[Spot]:
        stmt = (
            select(Spot)
            .where(or_(Spot.host_id == account_id, Spot.booker_id == account_id))
            .order_by(desc(Spot.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
