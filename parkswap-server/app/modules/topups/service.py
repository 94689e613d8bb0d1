"""Top-up domain service."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import WalletTopup as TopupModel, utcnow
from app.infrastructure.database.repositories.topup_repository import SqlTopupRepository
from app.infrastructure.payments import StripeGateway
from app.modules.common import DomainError
from app.modules.wallets import WalletService
from app.modules.wallets.models import LEDGER_TOPUP, topup_ledger_id
from app.modules.wallets.money import (
    CHECKOUT_SESSION_PLACEHOLDER,
    build_return_url,
    compute_fee_cents,
    format_amount_label,
    normalize_return_url,
    parse_amount_to_cents,
)

from .models import CheckoutLink, TopupOutcome, TopupRecord

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(value: Any) -> Optional[int]:
    """Integer prefix of ``value`` (``"12abc"`` -> 12), ``None`` when there is none."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _line_item(currency: str, cents: int, name: str) -> dict[str, Any]:
    return {
        "price_data": {
            "currency": currency,
            "unit_amount": cents,
            "product_data": {"name": name},
        },
        "quantity": 1,
    }


@dataclass(slots=True)
class TopupLimits:
    min_cents: int = 100
    max_cents: int = 10000
    fee_percent: float = 1.4
    fee_fixed: float = 0.25
    currency: str = "eur"
    default_return_url: str = "https://parkswap.app"


class TopupService:
    def __init__(
        self,
        repository: SqlTopupRepository,
        wallets: WalletService,
        gateway: StripeGateway,
        limits: TopupLimits | None = None,
    ) -> None:
        self._repository = repository
        self._wallets = wallets
        self._gateway = gateway
        self._limits = limits or TopupLimits()

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        gateway: StripeGateway,
        limits: TopupLimits | None = None,
    ) -> "TopupService":
        limits = limits or TopupLimits()
        return cls(
            SqlTopupRepository(session),
            WalletService.with_session(session, limits.currency),
            gateway,
            limits,
        )

    async def create_checkout(self, uid: str, amount: Any, return_url: Any = None) -> CheckoutLink:
        if not self._gateway.is_configured:
            raise DomainError("stripe_not_configured", "Stripe is not configured.", status="unavailable")

        amount_cents = parse_amount_to_cents(amount)
        if amount_cents is None:
            raise DomainError("invalid_amount", "Invalid amount.", status="invalid-argument")
        limits = self._limits
        if amount_cents < limits.min_cents or amount_cents > limits.max_cents:
            raise DomainError(
                "amount_out_of_range",
                "Amount out of range.",
                status="out-of-range",
                min_cents=limits.min_cents,
                max_cents=limits.max_cents,
            )

        fees = compute_fee_cents(amount_cents, limits.fee_percent, limits.fee_fixed)
        base_url = normalize_return_url(return_url) or limits.default_return_url
        success_url = build_return_url(
            base_url,
            {"topup": "success", "session_id": CHECKOUT_SESSION_PLACEHOLDER},
            limits.default_return_url,
        )
        cancel_url = build_return_url(base_url, {"topup": "cancel"}, limits.default_return_url)

        line_items = [
            _line_item(limits.currency, amount_cents, f"Recharge wallet {format_amount_label(amount_cents)}€"),
        ]
        if fees.fee_cents > 0:
            line_items.append(
                _line_item(limits.currency, fees.fee_cents, f"Frais de service {format_amount_label(fees.fee_cents)}€")
            )

        session = await self._gateway.create_checkout_session(
            {
                "mode": "payment",
                "payment_method_types": ["card"],
                "line_items": line_items,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "client_reference_id": uid,
                "metadata": {
                    "uid": uid,
                    "amountCents": str(amount_cents),
                    "feeCents": str(fees.fee_cents),
                    "totalCents": str(fees.total_cents),
                },
            }
        )
        return CheckoutLink(
            url=session.url,
            session_id=session.id,
            amount_cents=amount_cents,
            fee_cents=fees.fee_cents,
            total_cents=fees.total_cents,
        )

    async def apply_checkout_completed(self, checkout: Mapping[str, Any]) -> TopupOutcome:
        """Credit the wallet for a completed checkout session, at most once per session id."""
        payment_status = checkout.get("payment_status")
        if payment_status and payment_status != "paid":
            return TopupOutcome(credited=False, reason="unpaid")

        metadata = checkout.get("metadata")
        if not isinstance(metadata, Mapping):
            metadata = {}
        uid = metadata.get("uid") or checkout.get("client_reference_id")
        amount_cents = parse_leading_int(metadata.get("amountCents"))
        checkout_id = checkout.get("id")
        if not uid or amount_cents is None or not checkout_id:
            return TopupOutcome(credited=False, uid=uid, reason="invalid_metadata")

        if await self._repository.get(checkout_id, for_update=True) is not None:
            return TopupOutcome(credited=False, uid=uid, reason="already_processed")

        profile = await self._wallets.get_profile(uid, for_update=True)
        if profile is None:
            logger.warning("Checkout %s references unknown account %s", checkout_id, uid)
            return TopupOutcome(credited=False, uid=uid, reason="unknown_account")

        currency = checkout.get("currency") or self._limits.currency
        payment_intent = checkout.get("payment_intent") or None
        topup = await self._repository.create_once(
            checkout_id,
            {
                "uid": uid,
                "amount_cents": amount_cents,
                "fee_cents": parse_leading_int(metadata.get("feeCents")) or 0,
                "total_cents": parse_leading_int(metadata.get("totalCents")) or amount_cents,
                "status": payment_status or "paid",
                "currency": currency,
                "session_id": checkout_id,
                "payment_intent_id": payment_intent,
                "created_at": utcnow(),
            },
        )
        if topup is None:
            logger.info("Checkout %s credited concurrently; skipping", checkout_id)
            return TopupOutcome(credited=False, uid=uid, reason="already_processed")

        balance = self._wallets.ensure_wallet_fields(profile)
        next_available = balance.available + amount_cents
        self._wallets.set_available(profile, next_available, balance.reserved)
        await self._wallets.record_entry(
            topup_ledger_id(checkout_id, uid),
            uid=uid,
            type=LEDGER_TOPUP,
            amount_cents=amount_cents,
            balance_after_cents=next_available,
            currency=currency,
            session_id=checkout_id,
            payment_intent_id=payment_intent,
        )
        logger.info("Wallet %s credited %d cents from checkout %s", uid, amount_cents, checkout_id)
        return TopupOutcome(credited=True, uid=uid, amount_cents=amount_cents, balance_after_cents=next_available)

    async def list_topups(
        self,
        uid: str,
        limit: int = 20,
        offset: int = 0,
        status: str | None = None,
    ) -> list[TopupRecord]:
        rows = await self._repository.list_topups(uid, limit, offset, status)
        return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(model: TopupModel) -> TopupRecord:
        return TopupRecord(
            id=model.id,
            uid=model.uid,
            amount_cents=model.amount_cents,
            fee_cents=model.fee_cents,
            total_cents=model.total_cents,
            status=model.status,
            currency=model.currency,
            session_id=model.session_id,
            payment_intent_id=model.payment_intent_id,
            created_at=model.created_at,
        )
