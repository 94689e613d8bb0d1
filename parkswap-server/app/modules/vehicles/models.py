"""Domain models for vehicles."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class VehicleRecord:
    id: str
    owner_id: str
    model: str
    plate: str
    photo: Optional[str]
    is_default: bool
    created_at: Optional[datetime]


@dataclass(slots=True)
class VehicleCreateInput:
    model: str
    plate: str
    photo: Optional[str] = None
