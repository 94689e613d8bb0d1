"""Wallet domain exports"""

from .exceptions import WalletError, WalletNotFoundError
from .models import LedgerEntryRecord, WalletBalance, WalletSnapshot
from .service import WalletService, normalize_wallet_cents

__all__ = [
    "LedgerEntryRecord",
    "WalletBalance",
    "WalletError",
    "WalletNotFoundError",
    "WalletService",
    "WalletSnapshot",
    "normalize_wallet_cents",
]
