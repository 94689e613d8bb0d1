"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Account as AccountModel


class SqlAccountRepository:
    """Account repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: str) -> AccountModel | None:
        stmt = select(AccountModel).where(AccountModel.id == account_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> AccountModel | None:
        stmt = select(AccountModel).where(AccountModel.username == username)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

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
        model = AccountModel(
            username=username,
            password_hash=password_hash,
            role=role,
            email=email,
            display_name=display_name,
            is_active=is_active,
            transactions=0,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return model

    async def update_profile(self, account_id: str, values: dict[str, Any]) -> AccountModel | None:
        model = await self.get_by_id(account_id)
        if model is None:
            return None
        for key, value in values.items():
            setattr(model, key, value)
        await self._session.flush()
        await self._session.refresh(model)
        return model

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(last_login_at=timestamp)
        )
        await self._session.execute(stmt)

    async def top_by_transactions(self, limit: int) -> Sequence[AccountModel]:
        stmt = (
            select(AccountModel)
            .where(AccountModel.is_active.is_(True))
            .order_by(desc(AccountModel.transactions), AccountModel.created_at)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()
