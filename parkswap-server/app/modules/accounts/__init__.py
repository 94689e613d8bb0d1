"""Account domain services and models."""

from .exceptions import AccountAlreadyExistsError, AccountError, AccountNotFoundError
from .models import UNSET, Account, AccountCreateInput, LeaderboardEntry, ProfileUpdateInput
from .service import AccountService

__all__ = [
    "Account",
    "AccountAlreadyExistsError",
    "AccountCreateInput",
    "AccountError",
    "AccountNotFoundError",
    "AccountService",
    "LeaderboardEntry",
    "ProfileUpdateInput",
    "UNSET",
]
