"""Swap history exports"""

from .models import ROLE_BOOKER, ROLE_HOST, STATUS_ACCEPTED, STATUS_CONCLUDED, STATUS_STARTED, SwapRecord
from .service import HistoryService

__all__ = [
    "HistoryService",
    "ROLE_BOOKER",
    "ROLE_HOST",
    "STATUS_ACCEPTED",
    "STATUS_CONCLUDED",
    "STATUS_STARTED",
    "SwapRecord",
]
