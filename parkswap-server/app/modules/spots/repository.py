"""Repository protocol for spots."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from app.db.models import Spot as SpotModel


class SpotRepository(Protocol):
    async def get(self, spot_id: str, *, for_update: bool = False) -> SpotModel | None:
        ...

    async def create(self, values: dict[str, Any]) -> SpotModel:
        ...

    async def delete(self, spot: SpotModel) -> None:
        ...

    async def flush(self) -> None:
        ...

    async def find_active_for_host(self, host_id: str) -> SpotModel | None:
        ...

    async def list_by_status(self, status: str, limit: int, offset: int) -> Sequence[SpotModel]:
        ...

    async def list_expirable(self) -> Sequence[SpotModel]:
        ...

    async def list_for_user(self, account_id: str, limit: int, offset: int) -> Sequence[SpotModel]:
        ...
