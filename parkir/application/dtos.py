# File: parkir/application/dtos.py
"""
Data Transfer Objects (DTOs) for Parkir

DTOs carry data between the console and the application service:
1. Input DTOs - requests validated at the boundary
2. Output DTOs - results and status snapshots for presentation

DTO Principles:
- Validation at creation
- No business logic, only data
- Serialization support
"""

from typing import Dict, List, Optional, Any
from datetime import datetime
from decimal import Decimal
from enum import Enum
import json

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from ..domain.models import ParkingErrorKind, VehicleCategory


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Aware timestamps become naive local time, matching the service clock"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


# ============================================================================
# BASE DTO CLASSES
# ============================================================================

class BaseDTO(BaseModel):
    """Base DTO with common functionality"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        arbitrary_types_allowed=True
    )

    def to_dict(self, exclude_none: bool = False, **kwargs) -> Dict[str, Any]:
        """Convert DTO to dictionary"""
        return self.model_dump(exclude_none=exclude_none, **kwargs)

    def to_json(self, **kwargs) -> str:
        """Convert DTO to JSON string"""
        return self.model_dump_json(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseDTO':
        """Create DTO from dictionary"""
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> 'BaseDTO':
        """Create DTO from JSON string"""
        return cls(**json.loads(json_str))


# ============================================================================
# ENUM DTOs
# ============================================================================

class VehicleCategoryDTO(str, Enum):
    """Vehicle category DTO"""
    CAR = "car"
    MOTORCYCLE = "motorcycle"

    def to_domain(self) -> VehicleCategory:
        return VehicleCategory(self.value)


# ============================================================================
# REQUEST DTOs
# ============================================================================

class ParkVehicleRequest(BaseDTO):
    """Request to park an arriving vehicle"""
    plate: str = Field(..., description="License plate number")
    vehicle_category: VehicleCategoryDTO
    entry_time: Optional[datetime] = Field(default=None, description="Defaults to the service clock")

    @field_validator("plate")
    @classmethod
    def validate_plate(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("License plate cannot be empty")
        return v

    @field_validator("vehicle_category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        if isinstance(v, VehicleCategory):
            return v.value
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("entry_time")
    @classmethod
    def normalize_entry_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(v)


class ExitVehicleRequest(BaseDTO):
    """Request to release a spot; the range check belongs to the facility"""
    spot_number: StrictInt
    exit_time: Optional[datetime] = Field(default=None, description="Defaults to the service clock")

    @field_validator("exit_time")
    @classmethod
    def normalize_exit_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(v)


# ============================================================================
# RESULT DTOs
# ============================================================================

class ParkingAllocationDTO(BaseDTO):
    """Outcome of a park request"""
    success: bool
    spot_number: Optional[int] = None
    plate: Optional[str] = None
    vehicle_category: Optional[VehicleCategory] = None
    entry_time: Optional[datetime] = None
    error_kind: Optional[ParkingErrorKind] = None
    message: str = ""


class ParkingExitDTO(BaseDTO):
    """Outcome of an exit request"""
    success: bool
    spot_number: Optional[int] = None
    plate: Optional[str] = None
    vehicle_category: Optional[VehicleCategory] = None
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    duration_hours: Optional[float] = None
    fee: Optional[Decimal] = None
    currency: Optional[str] = None
    error_kind: Optional[ParkingErrorKind] = None
    message: str = ""


class SpotDTO(BaseDTO):
    """One spot in the facility listing"""
    number: int
    is_occupied: bool
    vehicle_category: Optional[VehicleCategory] = None
    plate: Optional[str] = None


class ParkingAreaStatusDTO(BaseDTO):
    """Facility-wide occupancy and revenue snapshot"""
    capacity: int
    occupied: int
    available: int
    occupancy_rate: float = Field(..., ge=0.0, le=1.0)
    total_sessions: int
    total_revenue: Decimal
    currency: str
    spots: List[SpotDTO] = Field(default_factory=list)
    timestamp: datetime
