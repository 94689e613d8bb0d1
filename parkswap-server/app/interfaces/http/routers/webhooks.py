"""Stripe webhook receiver for identity and checkout events."""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.infrastructure.payments import StripeGateway, StripeNotConfiguredError, WebhookSignatureError
from app.interfaces.http.deps import get_db_session, get_payment_gateway, get_topup_limits
from app.modules.kyc import KycService
from app.modules.payments import StripeWebhookService
from app.modules.topups import TopupLimits, TopupService
from app.schemas import WebhookAck

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


@router.post("/stripe", response_model=WebhookAck, summary="Stripe webhook endpoint")
async def stripe_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    gateway: StripeGateway = Depends(get_payment_gateway),
    limits: TopupLimits = Depends(get_topup_limits),
):
    payload = await request.body()
    try:
        event = gateway.verify_event(payload, request.headers.get("stripe-signature"))
    except StripeNotConfiguredError as exc:
        logger.error("Stripe webhook received but %s", exc)
        return PlainTextResponse(str(exc), status_code=500)
    except WebhookSignatureError as exc:
        logger.warning("Stripe webhook signature verification failed: %s", exc)
        return PlainTextResponse(f"Webhook signature verification failed: {exc}", status_code=400)

    service = StripeWebhookService(
        KycService.with_session(db, gateway, settings.stripe.return_url),
        TopupService.with_session(db, gateway, limits),
    )
    ack = await service.handle_event(event)
    await db.commit()
    return ack
