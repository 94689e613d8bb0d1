"""Wallet top-up exports"""

from .models import CheckoutLink, TopupOutcome, TopupRecord
from .service import TopupLimits, TopupService, parse_leading_int

__all__ = ["CheckoutLink", "TopupOutcome", "TopupLimits", "TopupRecord", "TopupService", "parse_leading_int"]
