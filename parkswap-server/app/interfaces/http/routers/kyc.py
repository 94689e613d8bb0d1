"""Identity verification sessions."""
import stripe
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.security import get_current_account
from app.infrastructure.payments import StripeGateway
from app.interfaces.http.deps import get_db_session, get_payment_gateway
from app.interfaces.http.errors import http_error, payment_provider_error
from app.modules.accounts import Account as AccountDomain
from app.modules.common import DomainError
from app.modules.kyc import KycService
from app.schemas import KycSessionRequest, KycSessionResponse

router = APIRouter()
settings = get_settings()


@router.post(
    "/session",
    response_model=KycSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a Stripe Identity verification",
)
async def create_kyc_session(
    payload: KycSessionRequest | None = None,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> KycSessionResponse:
    kyc_service = KycService.with_session(db, gateway, settings.stripe.return_url)
    try:
        session = await kyc_service.create_session(account.id, payload.return_url if payload else None)
    except DomainError as exc:
        await db.rollback()
        raise http_error(exc) from exc
    except stripe.StripeError as exc:
        await db.rollback()
        raise payment_provider_error(exc) from exc
    await db.commit()
    return KycSessionResponse.model_validate(session)
