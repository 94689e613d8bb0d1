"""Payment provider integrations."""

from .stripe_gateway import (
    CheckoutSessionResult,
    StripeGateway,
    StripeNotConfiguredError,
    VerificationSessionResult,
    WebhookSignatureError,
    get_stripe_gateway,
)

__all__ = [
    "CheckoutSessionResult",
    "StripeGateway",
    "StripeNotConfiguredError",
    "VerificationSessionResult",
    "WebhookSignatureError",
    "get_stripe_gateway",
]
