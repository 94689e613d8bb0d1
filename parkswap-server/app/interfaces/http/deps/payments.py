"""Payment provider dependency providers."""

from app.core.config import get_settings
from app.infrastructure.payments import StripeGateway, get_stripe_gateway
from app.modules.topups import TopupLimits


def get_payment_gateway() -> StripeGateway:
    return get_stripe_gateway()


def get_topup_limits() -> TopupLimits:
    settings = get_settings()
    return TopupLimits(
        min_cents=settings.wallet.topup_min_cents,
        max_cents=settings.wallet.topup_max_cents,
        fee_percent=settings.stripe.fee_percent,
        fee_fixed=settings.stripe.fee_fixed,
        currency=settings.wallet.currency,
        default_return_url=settings.stripe.return_url,
    )


__all__ = ["get_payment_gateway", "get_topup_limits"]
