"""Swap history service: one row per (spot, user), counted once on conclusion."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Spot as SpotModel, SwapTransaction as SwapModel, utcnow
from app.infrastructure.database.repositories.swap_repository import SqlSwapRepository
from app.modules.wallets.money import parse_price_to_cents

from .models import STATUS_CONCLUDED, SwapRecord, swap_title, swap_transaction_id

logger = logging.getLogger(__name__)


class HistoryService:
    def __init__(self, repository: SqlSwapRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "HistoryService":
        return cls(SqlSwapRepository(session))

    async def upsert(self, spot: SpotModel, *, user_id: str | None, status: str, role: str) -> bool:
        """Record ``status`` for ``user_id`` on ``spot``.

        Returns ``True`` when this call concluded the swap for the first time
        and bumped the user's completed-swap counter.
        """
        if spot is None or not user_id:
            return False

        transaction_id = swap_transaction_id(spot.id, user_id)
        values = {
            "user_id": user_id,
            "spot_id": spot.id,
            "booking_session_id": spot.booking_session_id or None,
            "status": status,
            "role": role,
            "host_id": spot.host_id,
            "host_name": spot.host_name or "",
            "booker_id": spot.booker_id or None,
            "booker_name": spot.booker_name or "",
            "amount_cents": max(0, parse_price_to_cents(spot.price) or 0),
            "title": swap_title(spot.host_name, spot.booker_name),
            "updated_at": utcnow(),
        }

        existing = await self._repository.get(transaction_id)
        if existing is None:
            existing = await self._repository.add(SwapModel(id=transaction_id, created_at=utcnow(), **values))
        else:
            for key, value in values.items():
                setattr(existing, key, value)

        should_count = status == STATUS_CONCLUDED and existing.concluded_counted_at is None
        if should_count:
            existing.concluded_counted_at = utcnow()
            await self._repository.increment_account_transactions(user_id)
            logger.info("Swap %s concluded for %s", spot.id, user_id)
        await self._repository.flush()
        return should_count

    async def list_for_user(self, user_id: str, limit: int = 50, offset: int = 0) -> list[SwapRecord]:
        rows = await self._repository.list_for_user(user_id, limit, offset)
        return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(model: SwapModel) -> SwapRecord:
        return SwapRecord(
            id=model.id,
            user_id=model.user_id,
            spot_id=model.spot_id,
            booking_session_id=model.booking_session_id,
            status=model.status,
            role=model.role,
            host_id=model.host_id,
            host_name=model.host_name,
            booker_id=model.booker_id,
            booker_name=model.booker_name,
            amount_cents=model.amount_cents,
            title=model.title or "Swap",
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
