"""Identity verification (KYC) through Stripe Identity."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import utcnow
from app.infrastructure.database.repositories.account_repository import SqlAccountRepository
from app.infrastructure.payments import StripeGateway
from app.modules.common import DomainError
from app.modules.wallets.money import normalize_return_url

logger = logging.getLogger(__name__)

KYC_PROVIDER = "stripe"
DEFAULT_KYC_STATUS = "processing"


@dataclass(slots=True)
class KycSession:
    session_id: str
    status: str
    url: Optional[str]
    client_secret: Optional[str]


class KycService:
    def __init__(self, accounts: SqlAccountRepository, gateway: StripeGateway, default_return_url: str) -> None:
        self._accounts = accounts
        self._gateway = gateway
        self._default_return_url = default_return_url

    @classmethod
    def with_session(cls, session: AsyncSession, gateway: StripeGateway, default_return_url: str) -> "KycService":
        return cls(SqlAccountRepository(session), gateway, default_return_url)

    async def create_session(self, uid: str, return_url: Any = None) -> KycSession:
        if not self._gateway.is_configured:
            raise DomainError("stripe_not_configured", "Stripe is not configured.", status="unavailable")

        target = normalize_return_url(return_url) or self._default_return_url
        session = await self._gateway.create_verification_session(uid=uid, return_url=target)
        status = session.status or DEFAULT_KYC_STATUS
        await self._write_status(uid, status, session.id)
        return KycSession(
            session_id=session.id,
            status=status,
            url=session.url,
            client_secret=session.client_secret,
        )

    async def apply_verification_event(self, verification: Mapping[str, Any]) -> bool:
        """Mirror a verification session's status onto its account; ``False`` when it names none."""
        metadata = verification.get("metadata")
        if not isinstance(metadata, Mapping):
            metadata = {}
        uid = metadata.get("uid")
        if not uid:
            return False
        status = verification.get("status") or DEFAULT_KYC_STATUS
        updated = await self._write_status(uid, status, verification.get("id"))
        if not updated:
            logger.warning("Verification session %s references unknown account %s", verification.get("id"), uid)
        return updated

    async def _write_status(self, uid: str, status: str, session_id: Optional[str]) -> bool:
        model = await self._accounts.update_profile(
            uid,
            {
                "kyc_status": status,
                "kyc_session_id": session_id,
                "kyc_provider": KYC_PROVIDER,
                "kyc_updated_at": utcnow(),
            },
        )
        if model is not None:
            logger.info("KYC status for %s is now %s", uid, status)
        return model is not None
