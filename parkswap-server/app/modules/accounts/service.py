"""Domain services for account management."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.crypto import hash_password, verify_password
from app.db.models import Account as AccountModel
from app.infrastructure.database.repositories.account_repository import SqlAccountRepository

from .exceptions import AccountAlreadyExistsError, AccountNotFoundError
from .models import UNSET, Account, AccountCreateInput, LeaderboardEntry, ProfileUpdateInput
from .repository import AccountRepository

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 50


class AccountService:
    """Encapsulates core account use cases."""

    def __init__(self, repository: AccountRepository, premium_parks_max: int = 5) -> None:
        self._repository = repository
        self._premium_parks_max = premium_parks_max

    @classmethod
    def with_session(cls, session: AsyncSession, premium_parks_max: int = 5) -> "AccountService":
        return cls(SqlAccountRepository(session), premium_parks_max)

    async def get_by_id(self, account_id: str) -> Account | None:
        return self._to_domain(await self._repository.get_by_id(account_id))

    async def get_by_username(self, username: str) -> Account | None:
        return self._to_domain(await self._repository.get_by_username(username))

    async def authenticate(self, username: str, password: str) -> Account | None:
        account = await self.get_by_username(username)
        if account is None or not account.is_active:
            return None
        if not verify_password(password, account.password_hash):
            return None
        return account

    async def create_account(self, payload: AccountCreateInput) -> Account:
        existing = await self._repository.get_by_username(payload.username)
        if existing is not None:
            raise AccountAlreadyExistsError(payload.username)

        model = await self._repository.create_account(
            username=payload.username,
            password_hash=hash_password(payload.password),
            role=payload.role,
            email=payload.email,
            display_name=payload.display_name or payload.username,
            is_active=payload.is_active,
        )
        logger.info("Account %s created", model.id)
        return self._to_domain(model)

    async def update_profile(self, account_id: str, payload: ProfileUpdateInput) -> Account:
        values = {
            name: getattr(payload, name)
            for name in ("display_name", "phone", "language", "email")
            if getattr(payload, name) is not UNSET
        }
        model = await self._repository.update_profile(account_id, values)
        if model is None:
            raise AccountNotFoundError(account_id)
        return self._to_domain(model)

    async def set_last_login(self, account_id: str) -> None:
        await self._repository.set_last_login(account_id, datetime.now(timezone.utc))

    async def leaderboard(self, limit: int = LEADERBOARD_SIZE) -> list[LeaderboardEntry]:
        rows = await self._repository.top_by_transactions(limit)
        return [
            LeaderboardEntry(
                rank=index,
                account_id=row.id,
                display_name=row.display_name or row.username,
                transactions=row.transactions or 0,
            )
            for index, row in enumerate(rows, start=1)
        ]

    def _to_domain(self, model: AccountModel | None) -> Account | None:
        if model is None:
            return None
        premium_parks = model.premium_parks
        return Account(
            id=str(model.id),
            username=model.username,
            role=model.role or "user",
            is_active=bool(model.is_active),
            password_hash=model.password_hash,
            email=model.email,
            display_name=model.display_name,
            phone=model.phone,
            language=model.language or "en",
            wallet_available_cents=model.wallet_available_cents,
            wallet_reserved_cents=model.wallet_reserved_cents,
            wallet=model.wallet,
            wallet_version=model.wallet_version,
            premium_parks=premium_parks if premium_parks is not None else self._premium_parks_max,
            transactions=model.transactions or 0,
            kyc_status=model.kyc_status,
            kyc_session_id=model.kyc_session_id,
            kyc_provider=model.kyc_provider,
            kyc_updated_at=model.kyc_updated_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login_at=model.last_login_at,
        )
