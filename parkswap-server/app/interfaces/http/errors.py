"""Translate domain errors into HTTP responses."""

from __future__ import annotations

import logging

import stripe
from fastapi import HTTPException, status

from app.modules.accounts import AccountNotFoundError
from app.modules.common import DomainError

logger = logging.getLogger(__name__)

STATUS_CODES = {
    "invalid-argument": status.HTTP_400_BAD_REQUEST,
    "out-of-range": status.HTTP_400_BAD_REQUEST,
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "permission-denied": status.HTTP_403_FORBIDDEN,
    "not-found": status.HTTP_404_NOT_FOUND,
    "already-exists": status.HTTP_409_CONFLICT,
    "failed-precondition": status.HTTP_409_CONFLICT,
    "unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def http_error(exc: DomainError) -> HTTPException:
    detail = {"code": exc.code, "message": exc.message}
    if exc.details:
        detail["details"] = exc.details
    return HTTPException(status_code=STATUS_CODES.get(exc.status, status.HTTP_400_BAD_REQUEST), detail=detail)


def account_missing(exc: AccountNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": "account_missing", "message": str(exc)},
    )


def payment_provider_error(exc: stripe.StripeError) -> HTTPException:
    logger.error("Stripe request failed: %s", exc)
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={"code": "payment_provider_error", "message": str(exc.user_message or "Payment provider error")},
    )


__all__ = ["STATUS_CODES", "account_missing", "http_error", "payment_provider_error"]
