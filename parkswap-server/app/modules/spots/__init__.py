"""Spot lifecycle exports"""

from .exceptions import (
    ActiveSpotExistsError,
    InsufficientFundsError,
    NoPremiumParksError,
    NotBookerError,
    NotHostError,
    PlateMismatchError,
    SessionMismatchError,
    SpotError,
    SpotMissingError,
    SpotNotAvailableError,
    SpotNotBookedError,
)
from .models import (
    BookingRequest,
    BookingResult,
    NavigationResult,
    PlateConfirmation,
    SpotActionResult,
    SpotProposal,
    SpotRecord,
    normalize_plate,
)
from .service import SpotService

__all__ = [
    "ActiveSpotExistsError",
    "BookingRequest",
    "BookingResult",
    "InsufficientFundsError",
    "NavigationResult",
    "NoPremiumParksError",
    "NotBookerError",
    "NotHostError",
    "PlateConfirmation",
    "PlateMismatchError",
    "SessionMismatchError",
    "SpotActionResult",
    "SpotError",
    "SpotMissingError",
    "SpotNotAvailableError",
    "SpotNotBookedError",
    "SpotProposal",
    "SpotRecord",
    "SpotService",
    "normalize_plate",
]
