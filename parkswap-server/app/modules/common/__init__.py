"""Shared abstractions used across domain modules."""

from .errors import DomainError

__all__ = ["DomainError"]
