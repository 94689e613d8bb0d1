"""Vehicle exports"""

from .models import VehicleCreateInput, VehicleRecord
from .service import VehicleNotFoundError, VehicleService

__all__ = ["VehicleCreateInput", "VehicleNotFoundError", "VehicleRecord", "VehicleService"]
