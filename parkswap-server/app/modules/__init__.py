"""Domain modules and their public exports."""

from . import common, wallets, accounts, history, spots, topups, kyc, payments, vehicles

__all__ = [
    "common",
    "wallets",
    "accounts",
    "history",
    "spots",
    "topups",
    "kyc",
    "payments",
    "vehicles",
]
