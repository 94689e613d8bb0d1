"""Current account profile and the public leaderboard."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_current_account
from app.interfaces.http.deps import get_account_service, get_db_session
from app.interfaces.http.errors import account_missing
from app.modules.accounts import Account as AccountDomain
from app.modules.accounts import AccountNotFoundError, AccountService, ProfileUpdateInput, UNSET
from app.schemas import AccountResponse, LeaderboardEntryResponse, LeaderboardResponse, ProfileUpdate

router = APIRouter()


@router.get("/me", response_model=AccountResponse, summary="Current account profile")
async def read_profile(account: AccountDomain = Depends(get_current_account)) -> AccountResponse:
    return AccountResponse.model_validate(account)


@router.patch("/me", response_model=AccountResponse, summary="Update the current profile")
async def update_profile(
    payload: ProfileUpdate,
    account: AccountDomain = Depends(get_current_account),
    account_service: AccountService = Depends(get_account_service),
    db: AsyncSession = Depends(get_db_session),
) -> AccountResponse:
    provided = payload.model_dump(exclude_unset=True)
    update = ProfileUpdateInput(**{name: provided.get(name, UNSET) for name in ("display_name", "phone", "language", "email")})
    try:
        updated = await account_service.update_profile(account.id, update)
    except AccountNotFoundError as exc:
        raise account_missing(exc) from exc
    except IntegrityError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered") from exc
    await db.commit()
    return AccountResponse.model_validate(updated)


@router.get("/leaderboard", response_model=LeaderboardResponse, summary="Top swappers")
async def leaderboard(
    limit: int = Query(50, ge=1, le=50),
    _: AccountDomain = Depends(get_current_account),
    account_service: AccountService = Depends(get_account_service),
) -> LeaderboardResponse:
    entries = await account_service.leaderboard(limit)
    return LeaderboardResponse(entries=[LeaderboardEntryResponse.model_validate(entry) for entry in entries])
