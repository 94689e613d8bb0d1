"""Base error carrying a machine readable code for API clients."""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Business rule violation surfaced to the caller.

    ``status`` follows the callable error vocabulary (``invalid-argument``,
    ``not-found``, ``failed-precondition``, ...). ``code`` is the stable
    identifier clients switch on.
    """

    status = "failed-precondition"

    def __init__(self, code: str, message: Optional[str] = None, *, status: Optional[str] = None, **details: Any) -> None:
        super().__init__(message or code)
        self.code = code
        self.message = message or code
        if status is not None:
            self.status = status
        self.details = details
