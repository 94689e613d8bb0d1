"""Wallet balance, ledger and Stripe top-ups."""
import stripe
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.security import get_current_account
from app.infrastructure.payments import StripeGateway
from app.interfaces.http.deps import get_db_session, get_payment_gateway, get_topup_limits
from app.interfaces.http.errors import http_error, payment_provider_error
from app.modules.accounts import Account as AccountDomain
from app.modules.common import DomainError
from app.modules.topups import TopupLimits, TopupService
from app.modules.wallets import WalletNotFoundError, WalletService
from app.schemas import (
    WalletLedgerEntryResponse,
    WalletLedgerListResponse,
    WalletSnapshotResponse,
    WalletTopupListResponse,
    WalletTopupRequest,
    WalletTopupResponse,
    WalletTopupSessionResponse,
)

router = APIRouter()
settings = get_settings()


@router.get("", response_model=WalletSnapshotResponse, summary="Wallet balance")
async def get_wallet_snapshot(
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> WalletSnapshotResponse:
    wallet_service = WalletService.with_session(db, settings.wallet.currency)
    try:
        snapshot = await wallet_service.snapshot(account.id)
    except WalletNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Wallet not found") from exc
    # Legacy profiles are migrated on first read.
    await db.commit()
    return WalletSnapshotResponse(
        available_cents=snapshot.available_cents,
        reserved_cents=snapshot.reserved_cents,
        currency=snapshot.currency,
        updated_at=snapshot.updated_at,
    )


@router.get("/ledger", response_model=WalletLedgerListResponse, summary="Wallet ledger, newest first")
async def list_wallet_ledger(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> WalletLedgerListResponse:
    wallet_service = WalletService.with_session(db, settings.wallet.currency)
    records = await wallet_service.list_ledger(account.id, limit, offset)
    return WalletLedgerListResponse(entries=[WalletLedgerEntryResponse.model_validate(record) for record in records])


@router.post(
    "/topups",
    response_model=WalletTopupSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a Stripe checkout to top up the wallet",
)
async def create_wallet_topup(
    payload: WalletTopupRequest,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    gateway: StripeGateway = Depends(get_payment_gateway),
    limits: TopupLimits = Depends(get_topup_limits),
) -> WalletTopupSessionResponse:
    topup_service = TopupService.with_session(db, gateway, limits)
    try:
        link = await topup_service.create_checkout(account.id, payload.amount, payload.return_url)
    except DomainError as exc:
        raise http_error(exc) from exc
    except stripe.StripeError as exc:
        raise payment_provider_error(exc) from exc
    return WalletTopupSessionResponse(
        url=link.url,
        session_id=link.session_id,
        amount_cents=link.amount_cents,
        fee_cents=link.fee_cents,
        total_cents=link.total_cents,
    )


@router.get("/topups", response_model=WalletTopupListResponse, summary="Credited top-ups")
async def list_wallet_topups(
    status_filter: str | None = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    gateway: StripeGateway = Depends(get_payment_gateway),
    limits: TopupLimits = Depends(get_topup_limits),
) -> WalletTopupListResponse:
    topup_service = TopupService.with_session(db, gateway, limits)
    records = await topup_service.list_topups(account.id, limit, offset, status_filter)
    return WalletTopupListResponse(topups=[WalletTopupResponse.model_validate(record) for record in records])
