"""Thin async wrapper around the Stripe SDK.

Every SDK call is blocking, so it runs in the threadpool. The API key and
version are passed per request instead of mutating the module globals of
``stripe``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

import stripe
from fastapi.concurrency import run_in_threadpool

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class StripeNotConfiguredError(RuntimeError):
    """Raised when an operation needs a Stripe secret (or webhook secret) that is not set."""


class WebhookSignatureError(ValueError):
    """Raised when a webhook payload fails signature verification or cannot be decoded."""


@dataclass(slots=True)
class VerificationSessionResult:
    id: str
    status: Optional[str]
    url: Optional[str]
    client_secret: Optional[str]


@dataclass(slots=True)
class CheckoutSessionResult:
    id: str
    url: Optional[str]


class StripeGateway:
    def __init__(
        self,
        secret_key: str = "",
        *,
        webhook_secret: str = "",
        api_version: str = "2024-04-10",
        webhook_tolerance: int = 300,
    ) -> None:
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        self._api_version = api_version
        self._webhook_tolerance = webhook_tolerance

    @property
    def is_configured(self) -> bool:
        return bool(self._secret_key)

    @property
    def has_webhook_secret(self) -> bool:
        return bool(self._webhook_secret)

    def _request_options(self) -> dict[str, Any]:
        if not self.is_configured:
            raise StripeNotConfiguredError("Stripe is not configured.")
        return {"api_key": self._secret_key, "stripe_version": self._api_version}

    async def create_verification_session(self, *, uid: str, return_url: str) -> VerificationSessionResult:
        options = self._request_options()
        session = await run_in_threadpool(
            stripe.identity.VerificationSession.create,
            type="document",
            metadata={"uid": uid},
            return_url=return_url,
            **options,
        )
        logger.info("Stripe verification session created: session=%s uid=%s", session.id, uid)
        return VerificationSessionResult(
            id=session.id,
            status=getattr(session, "status", None),
            url=getattr(session, "url", None),
            client_secret=getattr(session, "client_secret", None),
        )

    async def create_checkout_session(self, params: dict[str, Any]) -> CheckoutSessionResult:
        options = self._request_options()
        session = await run_in_threadpool(stripe.checkout.Session.create, **params, **options)
        logger.info(
            "Stripe checkout session created: session=%s client_reference_id=%s",
            session.id,
            params.get("client_reference_id"),
        )
        return CheckoutSessionResult(id=session.id, url=getattr(session, "url", None))

    def verify_event(self, payload: bytes, signature: str | None) -> dict[str, Any]:
        """Check the ``Stripe-Signature`` header against the raw body and decode the event."""
        if not self.is_configured:
            raise StripeNotConfiguredError("Stripe is not configured.")
        if not self.has_webhook_secret:
            raise StripeNotConfiguredError("Stripe webhook secret is missing.")
        if not signature:
            raise WebhookSignatureError("No signatures found matching the expected signature for payload")

        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise WebhookSignatureError("Payload is not valid UTF-8") from exc

        try:
            stripe.WebhookSignature.verify_header(
                text,
                signature,
                self._webhook_secret,
                self._webhook_tolerance,
            )
        except stripe.SignatureVerificationError as exc:
            raise WebhookSignatureError(str(exc.user_message or exc)) from exc

        try:
            event = json.loads(text)
        except json.JSONDecodeError as exc:
            raise WebhookSignatureError("Invalid payload") from exc
        if not isinstance(event, dict):
            raise WebhookSignatureError("Invalid payload")
        return event


@lru_cache()
def get_stripe_gateway() -> StripeGateway:
    settings = get_settings()
    if not settings.stripe_enabled:
        logger.warning("STRIPE__SECRET_KEY not configured; payment endpoints are disabled")
    return StripeGateway(
        settings.stripe.secret_key,
        webhook_secret=settings.stripe.webhook_secret,
        api_version=settings.stripe.api_version,
        webhook_tolerance=settings.stripe.webhook_tolerance,
    )
