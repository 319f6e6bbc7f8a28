# File: parkir/domain/models.py
"""
Domain Models for the Parkir parking facility

This module contains:
1. Value Objects: Money, OccupantView, SpotSnapshot
2. Enums: VehicleCategory (with its hourly rate table), SpotState, ParkingErrorKind
3. Errors and Results: the failure taxonomy and the Result returned by every operation
4. Entities: Vehicle and ParkingSpot
5. Domain Events: arrival and departure records for presentation

No I/O happens here. Time is always passed in by the caller.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Generic, TypeVar, Union
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
import uuid


T = TypeVar('T')

SECONDS_PER_HOUR = Decimal('3600')


# ============================================================================
# DOMAIN PRIMITIVES / VALUE OBJECTS
# ============================================================================

@dataclass(frozen=True)
class Money:
    """
    Value Object: Monetary amount with currency
    Amounts are kept unrounded; rounding is a display concern
    """
    amount: Decimal
    currency: str = "IDR"

    def __post_init__(self):
        """Validate money amount"""
        if self.amount < Decimal('0'):
            raise ValueError("Money amount cannot be negative")

        if len(self.currency) != 3:
            raise ValueError(f"Currency must be 3-letter code: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money amounts (same currency only)"""
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency} to {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, multiplier: Decimal) -> 'Money':
        """Multiply money by a decimal"""
        if multiplier < Decimal('0'):
            raise ValueError("Multiplier cannot be negative")
        return Money(self.amount * multiplier, self.currency)

    @classmethod
    def zero(cls, currency: str = "IDR") -> 'Money':
        return cls(Decimal('0'), currency)

    def format(self) -> str:
        """Format money for display, whole units only"""
        symbol = "Rp" if self.currency == "IDR" else self.currency
        return f"{symbol} {self.amount:,.0f}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "amount": float(self.amount),
            "currency": self.currency
        }


# ============================================================================
# ENUMS FOR DOMAIN TYPES
# ============================================================================

class VehicleCategory(Enum):
    """
    Closed set of vehicle categories accepted by the facility
    The hourly rate table below is the only place fee policy varies
    """
    CAR = "car"
    MOTORCYCLE = "motorcycle"

    @property
    def hourly_rate(self) -> Money:
        """Get hourly rate for this category"""
        return HOURLY_RATES[self]

    @classmethod
    def parse(cls, value: Union['VehicleCategory', str]) -> 'VehicleCategory':
        """
        Resolve a category from an enum member, its value or its name
        Raises: InvalidInputError for anything else
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for category in cls:
                if key in (category.value, category.name.lower()):
                    return category
        raise InvalidInputError(f"Unknown vehicle category: {value!r}")

    def __str__(self) -> str:
        """Human-readable string representation"""
        names = {
            VehicleCategory.CAR: "Car",
            VehicleCategory.MOTORCYCLE: "Motorcycle",
        }
        return names[self]


# Currency units (IDR) per hour of occupancy
HOURLY_RATES: Dict[VehicleCategory, Money] = {
    VehicleCategory.CAR: Money(Decimal('5000')),
    VehicleCategory.MOTORCYCLE: Money(Decimal('2000')),
}


class SpotState(Enum):
    """Parking spot states"""
    EMPTY = "empty"
    OCCUPIED = "occupied"


class ParkingErrorKind(Enum):
    """Every recoverable failure an operation can report"""
    INVALID_INPUT = "invalid_input"
    SPOT_OCCUPIED = "spot_occupied"
    SPOT_EMPTY = "spot_empty"
    FACILITY_FULL = "facility_full"
    INVALID_SPOT_NUMBER = "invalid_spot_number"


# ============================================================================
# DOMAIN ERRORS
# ============================================================================

class ParkingError(Exception):
    """Base exception for parking domain errors"""
    kind: ParkingErrorKind = ParkingErrorKind.INVALID_INPUT


class InvalidInputError(ParkingError, ValueError):
    """Malformed construction arguments"""
    kind = ParkingErrorKind.INVALID_INPUT


class SpotOccupiedError(ParkingError):
    """Park attempted on an occupied spot"""
    kind = ParkingErrorKind.SPOT_OCCUPIED


class SpotEmptyError(ParkingError):
    """Release attempted on an empty spot"""
    kind = ParkingErrorKind.SPOT_EMPTY


class FacilityFullError(ParkingError):
    """No empty spot at park time"""
    kind = ParkingErrorKind.FACILITY_FULL


class InvalidSpotNumberError(ParkingError):
    """Spot number outside the facility"""
    kind = ParkingErrorKind.INVALID_SPOT_NUMBER


ERROR_TYPES = {
    error_type.kind: error_type
    for error_type in (
        InvalidInputError, SpotOccupiedError, SpotEmptyError,
        FacilityFullError, InvalidSpotNumberError
    )
}


# ============================================================================
# OPERATION RESULTS
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a domain operation: either a value or an error kind
    Operations return failures instead of raising them
    """
    ok: bool
    value: Optional[T] = None
    error: Optional[ParkingErrorKind] = None
    message: str = ""

    @classmethod
    def success(cls, value: T, message: str = "") -> 'Result[T]':
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error: ParkingErrorKind, message: str) -> 'Result[T]':
        return cls(ok=False, error=error, message=message)

    @classmethod
    def from_error(cls, exc: ParkingError) -> 'Result[T]':
        return cls.failure(exc.kind, str(exc))

    def unwrap(self) -> T:
        """
        Get the value or raise the exception matching the error kind
        """
        if self.ok:
            return self.value
        raise ERROR_TYPES[self.error](self.message)

    def __bool__(self) -> bool:
        return self.ok


# ============================================================================
# DOMAIN ENTITIES
# ============================================================================

class Entity:
    """
    Base class for all domain entities
    Provides common functionality for entities with identity
    """

    def __init__(self, id: Optional[str] = None):
        self._id = id or str(uuid.uuid4())

    @property
    def id(self) -> str:
        """Get entity ID"""
        return self._id

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they have the same ID and type"""
        if not isinstance(other, Entity):
            return False
        return self.id == other.id and type(self) == type(other)

    def __hash__(self) -> int:
        return hash((self.id, type(self).__name__))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


@dataclass(frozen=True)
class Vehicle:
    """
    A vehicle inside (or entering) the facility
    Immutable: plate, category and arrival time never change after creation
    """
    plate: str
    category: VehicleCategory
    arrival_time: datetime

    def __post_init__(self):
        """Validate and normalize vehicle attributes"""
        if not isinstance(self.plate, str) or not self.plate.strip():
            raise InvalidInputError("License plate cannot be empty")
        object.__setattr__(self, 'plate', self.plate.strip())
        object.__setattr__(self, 'category', VehicleCategory.parse(self.category))

        if not isinstance(self.arrival_time, datetime):
            raise InvalidInputError("Arrival time must be a datetime")

    @classmethod
    def create(
        cls,
        plate: str,
        category: Union[VehicleCategory, str],
        arrival_time: datetime
    ) -> Result['Vehicle']:
        """Create a vehicle, reporting bad input as an INVALID_INPUT result"""
        try:
            return Result.success(cls(plate, category, arrival_time))
        except InvalidInputError as e:
            return Result.from_error(e)

    @property
    def hourly_rate(self) -> Money:
        return self.category.hourly_rate

    def parked_duration(self, now: datetime) -> timedelta:
        """Elapsed time since arrival; a clock behind arrival counts as zero"""
        return max(now - self.arrival_time, timedelta(0))

    def compute_fee(self, now: datetime) -> Money:
        """
        Fee owed at `now`: fractional hours elapsed times the hourly rate
        No rounding and no minimum charge
        """
        seconds = Decimal(str(self.parked_duration(now).total_seconds()))
        return self.hourly_rate * (seconds / SECONDS_PER_HOUR)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plate": self.plate,
            "category": self.category.value,
            "arrival_time": self.arrival_time.isoformat(),
            "hourly_rate": self.hourly_rate.to_dict()
        }

    def __str__(self) -> str:
        return f"{self.category} [{self.plate}]"


@dataclass(frozen=True)
class OccupantView:
    """Read-only view of the vehicle in a spot"""
    plate: str
    category: VehicleCategory


@dataclass(frozen=True)
class SpotSnapshot:
    """One row of the facility listing"""
    number: int
    is_occupied: bool
    occupant_category: Optional[VehicleCategory] = None
    occupant_plate: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "is_occupied": self.is_occupied,
            "occupant_category": self.occupant_category.value if self.occupant_category else None,
            "occupant_plate": self.occupant_plate
        }


class ParkingSpot:
    """
    A single parking spot
    EMPTY --park--> OCCUPIED --release--> EMPTY; anything else is reported, not applied
    """

    def __init__(self, number: int):
        if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
            raise InvalidInputError(f"Spot number must be a positive integer, got {number!r}")
        self._number = number
        self._occupant: Optional[Vehicle] = None

    @property
    def number(self) -> int:
        return self._number

    @property
    def state(self) -> SpotState:
        return SpotState.EMPTY if self._occupant is None else SpotState.OCCUPIED

    def is_available(self) -> bool:
        return self._occupant is None

    def peek_occupant(self) -> Optional[OccupantView]:
        if self._occupant is None:
            return None
        return OccupantView(self._occupant.plate, self._occupant.category)

    def park(self, vehicle: Vehicle, now: Optional[datetime] = None) -> Result['VehicleParkedEvent']:
        """
        Take the vehicle into this spot
        `now` is the wall-clock time recorded on the arrival event; defaults to arrival time
        """
        if not self.is_available():
            return Result.failure(
                ParkingErrorKind.SPOT_OCCUPIED,
                f"Spot #{self._number} is already occupied"
            )

        self._occupant = vehicle
        event = VehicleParkedEvent(
            spot_number=self._number,
            plate=vehicle.plate,
            category=vehicle.category,
            timestamp=now or vehicle.arrival_time
        )
        return Result.success(event)

    def release(self, now: datetime) -> Result['VehicleLeftEvent']:
        """
        Vacate the spot and report the fee owed at `now`
        The occupant is dropped; nothing references it afterwards
        """
        if self._occupant is None:
            return Result.failure(
                ParkingErrorKind.SPOT_EMPTY,
                f"Spot #{self._number} is empty"
            )

        vehicle = self._occupant
        if (now.tzinfo is None) != (vehicle.arrival_time.tzinfo is None):
            return Result.failure(
                ParkingErrorKind.INVALID_INPUT,
                "Exit time and arrival time must both be naive or both timezone-aware"
            )

        fee = vehicle.compute_fee(now)
        self._occupant = None

        event = VehicleLeftEvent(
            spot_number=self._number,
            plate=vehicle.plate,
            category=vehicle.category,
            entry_time=vehicle.arrival_time,
            exit_time=now,
            duration=vehicle.parked_duration(now),
            fee=fee
        )
        return Result.success(event)

    def snapshot(self) -> SpotSnapshot:
        occupant = self.peek_occupant()
        if occupant is None:
            return SpotSnapshot(self._number, False)
        return SpotSnapshot(self._number, True, occupant.category, occupant.plate)

    def __repr__(self) -> str:
        return f"ParkingSpot(number={self._number}, state={self.state.value})"

    def __str__(self) -> str:
        if self._occupant is None:
            return f"Spot #{self._number}: Empty"
        return f"Spot #{self._number}: {self._occupant.category} - {self._occupant.plate}"


# ============================================================================
# DOMAIN EVENTS
# ============================================================================

class DomainEvent(ABC):
    """
    Base class for all domain events
    Events represent something that happened in the domain
    """

    def __init__(self, timestamp: Optional[datetime] = None):
        self.event_id = str(uuid.uuid4())
        self.timestamp = timestamp or datetime.now()
        self.version = "1.0"

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization"""
        pass

    def __str__(self) -> str:
        return f"{self.__class__.__name__} at {self.timestamp}"


class VehicleParkedEvent(DomainEvent):
    """Event raised when a vehicle is parked"""

    def __init__(
        self,
        spot_number: int,
        plate: str,
        category: VehicleCategory,
        timestamp: Optional[datetime] = None
    ):
        super().__init__(timestamp)
        self.spot_number = spot_number
        self.plate = plate
        self.category = category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "vehicle.parked",
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
            "data": {
                "spot_number": self.spot_number,
                "plate": self.plate,
                "category": self.category.value
            }
        }


class VehicleLeftEvent(DomainEvent):
    """Event raised when a vehicle leaves"""

    def __init__(
        self,
        spot_number: int,
        plate: str,
        category: VehicleCategory,
        entry_time: datetime,
        exit_time: datetime,
        duration: timedelta,
        fee: Money
    ):
        super().__init__(exit_time)
        self.spot_number = spot_number
        self.plate = plate
        self.category = category
        self.entry_time = entry_time
        self.exit_time = exit_time
        self.duration = duration
        self.fee = fee

    @property
    def duration_hours(self) -> float:
        return self.duration.total_seconds() / 3600

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "vehicle.left",
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
            "data": {
                "spot_number": self.spot_number,
                "plate": self.plate,
                "category": self.category.value,
                "entry_time": self.entry_time.isoformat(),
                "exit_time": self.exit_time.isoformat(),
                "duration_hours": self.duration_hours,
                "fee_amount": float(self.fee.amount),
                "fee_currency": self.fee.currency
            }
        }
