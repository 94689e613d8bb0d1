"""Swap history of the current account."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_current_account
from app.interfaces.http.deps import get_db_session
from app.modules.accounts import Account as AccountDomain
from app.modules.history import HistoryService
from app.schemas import SwapHistoryListResponse, SwapHistoryResponse

router = APIRouter()


@router.get("", response_model=SwapHistoryListResponse, summary="Swap history, most recent first")
async def list_history(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> SwapHistoryListResponse:
    service = HistoryService.with_session(db)
    records = await service.list_for_user(account.id, limit, offset)
    return SwapHistoryListResponse(transactions=[SwapHistoryResponse.model_validate(record) for record in records])
