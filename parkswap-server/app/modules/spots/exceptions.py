"""Spot domain specific exceptions."""

from __future__ import annotations

from app.modules.common import DomainError


class SpotError(DomainError):
    """Base class for spot lifecycle errors."""


class SpotMissingError(SpotError):
    status = "not-found"

    def __init__(self, spot_id: str | None = None) -> None:
        super().__init__("spot_missing", f"spot not found: {spot_id}" if spot_id else None)


class SpotNotAvailableError(SpotError):
    def __init__(self) -> None:
        super().__init__("spot_not_available")


class SpotNotBookedError(SpotError):
    def __init__(self) -> None:
        super().__init__("spot_not_booked")


class InsufficientFundsError(SpotError):
    def __init__(self, required_cents: int, available_cents: int) -> None:
        super().__init__(
            "insufficient_funds",
            required_cents=required_cents,
            available_cents=available_cents,
        )


class NoPremiumParksError(SpotError):
    def __init__(self) -> None:
        super().__init__("no_premium_parks")


class ActiveSpotExistsError(SpotError):
    def __init__(self) -> None:
        super().__init__("active_spot_exists")


class NotHostError(SpotError):
    status = "permission-denied"

    def __init__(self) -> None:
        super().__init__("not_host")


class NotBookerError(SpotError):
    status = "permission-denied"

    def __init__(self) -> None:
        super().__init__("not_booker")


class SessionMismatchError(SpotError):
    def __init__(self) -> None:
        super().__init__("session_mismatch")


class PlateMismatchError(SpotError):
    def __init__(self) -> None:
        super().__init__("plate_mismatch")
