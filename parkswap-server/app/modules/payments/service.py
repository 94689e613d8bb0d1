"""Dispatch of verified Stripe webhook events."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from app.modules.kyc import KycService
from app.modules.topups import TopupService

logger = logging.getLogger(__name__)

IDENTITY_EVENT_PREFIX = "identity.verification_session."
CHECKOUT_COMPLETED = "checkout.session.completed"


class StripeWebhookService:
    def __init__(self, kyc: KycService, topups: TopupService) -> None:
        self._kyc = kyc
        self._topups = topups

    async def handle_event(self, event: Mapping[str, Any]) -> dict[str, bool]:
        event_type = str(event.get("type") or "")
        data = event.get("data") or {}
        obj = data.get("object") if isinstance(data, Mapping) else None
        if not isinstance(obj, Mapping):
            logger.warning("Stripe event %s carries no object payload; acknowledged", event_type)
            return {"received": True}

        if event_type.startswith(IDENTITY_EVENT_PREFIX):
            await self._kyc.apply_verification_event(obj)
        elif event_type == CHECKOUT_COMPLETED:
            outcome = await self._topups.apply_checkout_completed(obj)
            if not outcome.credited:
                logger.info("Checkout %s not credited: %s", obj.get("id"), outcome.reason)
        else:
            logger.debug("Ignoring Stripe event %s", event_type)
        return {"received": True}
