"""SQLAlchemy implementation for the vehicle repository"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Vehicle


class SqlVehicleRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, vehicle_id: str, owner_id: str) -> Vehicle | None:
        stmt = select(Vehicle).where(Vehicle.id == vehicle_id, Vehicle.owner_id == owner_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_for_owner(self, owner_id: str) -> int:
        stmt = select(func.count()).select_from(Vehicle).where(Vehicle.owner_id == owner_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def create(self, values: dict[str, Any]) -> Vehicle:
        vehicle = Vehicle(**values)
        self.session.add(vehicle)
        await self.session.flush()
        return vehicle

    async def delete(self, vehicle: Vehicle) -> None:
        await self.session.delete(vehicle)
        await self.session.flush()

    async def clear_default(self, owner_id: str) -> None:
        stmt = (
            update(Vehicle)
            .where(Vehicle.owner_id == owner_id, Vehicle.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)

    async def list_for_owner(self, owner_id: str) -> Sequence[Vehicle]:
        stmt = (
            select(Vehicle)
            .where(Vehicle.owner_id == owner_id)
            .order_by(Vehicle.is_default.desc(), Vehicle.created_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def flush(self) -> None:
        await self.session.flush()
