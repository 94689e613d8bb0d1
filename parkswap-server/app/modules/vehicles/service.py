"""Vehicle garage of an account; exactly one vehicle is the default once any exists."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Vehicle as VehicleModel, utcnow
from app.infrastructure.database.repositories.vehicle_repository import SqlVehicleRepository
from app.modules.common import DomainError

from .models import VehicleCreateInput, VehicleRecord

logger = logging.getLogger(__name__)


class VehicleNotFoundError(DomainError):
    status = "not-found"

    def __init__(self, vehicle_id: str) -> None:
        super().__init__("vehicle_missing", f"vehicle not found: {vehicle_id}")


class VehicleService:
    def __init__(self, repository: SqlVehicleRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "VehicleService":
        return cls(SqlVehicleRepository(session))

    async def add_vehicle(self, owner_id: str, payload: VehicleCreateInput) -> VehicleRecord:
        model = (payload.model or "").strip()
        plate = (payload.plate or "").strip().upper()
        if not model or not plate:
            raise DomainError("vehicle_invalid", "model and plate are required", status="invalid-argument")

        is_first = await self._repository.count_for_owner(owner_id) == 0
        vehicle = await self._repository.create(
            {
                "owner_id": owner_id,
                "model": model,
                "plate": plate,
                "photo": payload.photo or None,
                "is_default": is_first,
                "created_at": utcnow(),
            }
        )
        logger.info("Vehicle %s added for %s", vehicle.id, owner_id)
        return self._to_record(vehicle)

    async def list_vehicles(self, owner_id: str) -> list[VehicleRecord]:
        rows = await self._repository.list_for_owner(owner_id)
        return [self._to_record(row) for row in rows]

    async def delete_vehicle(self, owner_id: str, vehicle_id: str) -> None:
        vehicle = await self._repository.get(vehicle_id, owner_id)
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)
        was_default = bool(vehicle.is_default)
        await self._repository.delete(vehicle)

        if was_default:
            remaining = await self._repository.list_for_owner(owner_id)
            if remaining:
                remaining[0].is_default = True
                await self._repository.flush()

    async def select_default(self, owner_id: str, vehicle_id: str) -> VehicleRecord:
        vehicle = await self._repository.get(vehicle_id, owner_id)
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)
        await self._repository.clear_default(owner_id)
        vehicle.is_default = True
        await self._repository.flush()
        return self._to_record(vehicle)

    @staticmethod
    def _to_record(model: VehicleModel) -> VehicleRecord:
        return VehicleRecord(
            id=model.id,
            owner_id=model.owner_id,
            model=model.model,
            plate=model.plate,
            photo=model.photo,
            is_default=bool(model.is_default),
            created_at=model.created_at,
        )
