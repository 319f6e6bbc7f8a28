# File: parkir/domain/aggregates.py
"""
Aggregate Root for the Parkir facility

ParkingArea owns a fixed, ordered set of ParkingSpot entities and is the only
way to change them:
- spots are created together when the facility is sized and never added or removed
- spot numbers are exactly 1..capacity
- park/release go through the aggregate, which records domain events
"""

from typing import List, Optional, Tuple
from datetime import datetime
import logging

from .models import (
    Entity, ParkingSpot, Vehicle, SpotSnapshot,
    ParkingErrorKind, Result, InvalidInputError,
    DomainEvent, VehicleLeftEvent
)
from .strategies import AllocationStrategy, FirstFitStrategy


# ============================================================================
# BASE AGGREGATE ROOT
# ============================================================================

class AggregateRoot(Entity):
    """
    Base class for all aggregate roots
    Provides domain event collection and versioning
    """

    def __init__(self, id: Optional[str] = None):
        super().__init__(id)
        self._version: int = 1
        self._changes: List[DomainEvent] = []
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def version(self) -> int:
        """Get current aggregate version"""
        return self._version

    def _increment_version(self) -> None:
        self._version += 1

    def _add_domain_event(self, event: DomainEvent) -> None:
        """Add a domain event to the list of changes"""
        self._changes.append(event)
        self._logger.debug(f"Added domain event: {event.__class__.__name__}")

    def clear_events(self) -> List[DomainEvent]:
        """Clear and return all domain events"""
        events = self._changes.copy()
        self._changes.clear()
        return events

    @property
    def has_changes(self) -> bool:
        return len(self._changes) > 0

    def _validate_invariants(self) -> None:
        """Validate aggregate invariants - to be overridden by subclasses"""
        pass


# ============================================================================
# PARKING AREA AGGREGATE
# ============================================================================

class ParkingArea(AggregateRoot):
    """
    Aggregate Root: the whole facility
    Allocates spots first-fit and releases them by number
    """

    def __init__(
        self,
        capacity: int,
        strategy: Optional[AllocationStrategy] = None,
        id: Optional[str] = None
    ):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidInputError(f"Capacity must be a positive integer, got {capacity!r}")

        super().__init__(id)
        self._spots: Tuple[ParkingSpot, ...] = tuple(
            ParkingSpot(number) for number in range(1, capacity + 1)
        )
        self.strategy = strategy or FirstFitStrategy()

        self._validate_invariants()
        self._logger.info(f"Created ParkingArea with {capacity} spots (ID: {self.id})")

    @classmethod
    def create(
        cls,
        capacity: int,
        strategy: Optional[AllocationStrategy] = None
    ) -> Result['ParkingArea']:
        """Create a facility, reporting a bad capacity as an INVALID_INPUT result"""
        try:
            return Result.success(cls(capacity, strategy))
        except InvalidInputError as e:
            return Result.from_error(e)

    def _validate_invariants(self) -> None:
        """Spot numbers must be exactly 1..capacity, in order"""
        numbers = [spot.number for spot in self._spots]
        if numbers != list(range(1, len(self._spots) + 1)):
            raise ValueError(f"Spot numbers out of sequence: {numbers}")

        self._logger.debug("All parking area invariants satisfied")

    # ========================================================================
    # QUERIES
    # ========================================================================

    @property
    def capacity(self) -> int:
        return len(self._spots)

    @property
    def spots(self) -> Tuple[ParkingSpot, ...]:
        return self._spots

    def get_spot(self, spot_number: int) -> Optional[ParkingSpot]:
        if not self._is_valid_spot_number(spot_number):
            return None
        return self._spots[spot_number - 1]

    def available_count(self) -> int:
        return sum(1 for spot in self._spots if spot.is_available())

    def occupied_count(self) -> int:
        return self.capacity - self.available_count()

    def is_full(self) -> bool:
        return self.available_count() == 0

    def find_spot_by_plate(self, plate: str) -> Optional[int]:
        """Number of the spot holding `plate`, if any"""
        wanted = plate.strip()
        for spot in self._spots:
            occupant = spot.peek_occupant()
            if occupant is not None and occupant.plate == wanted:
                return spot.number
        return None

    def list_spots(self) -> Tuple[SpotSnapshot, ...]:
        """
        Snapshot of every spot, ordered by number
        Immutable; later park/release calls do not change it
        """
        return tuple(spot.snapshot() for spot in self._spots)

    # ========================================================================
    # PUBLIC BUSINESS METHODS
    # ========================================================================

    def park_vehicle(self, vehicle: Vehicle, now: Optional[datetime] = None) -> Result[int]:
        """
        Park a vehicle in the first empty spot
        Returns: Result with the spot number, or FACILITY_FULL (vehicle stays with the caller)
        """
        self._logger.info(f"Parking vehicle: {vehicle.plate}")

        spot = self.strategy.select_spot(self._spots, vehicle)
        if spot is None:
            self._logger.warning(f"No empty spot for {vehicle.plate}: facility full")
            return Result.failure(
                ParkingErrorKind.FACILITY_FULL,
                "All parking spots are occupied"
            )

        parked = spot.park(vehicle, now)
        if not parked.ok:
            # strategy handed back a spot that is not empty
            self._logger.error(f"{self.strategy} selected unavailable spot #{spot.number}")
            return Result.failure(parked.error, parked.message)

        self._increment_version()
        self._add_domain_event(parked.value)

        self._logger.info(f"Vehicle {vehicle.plate} parked in spot #{spot.number}")
        return Result.success(spot.number, parked.message)

    def release_vehicle(self, spot_number: int, now: datetime) -> Result[VehicleLeftEvent]:
        """
        Vacate a spot by number
        Returns: Result with the departure record, INVALID_SPOT_NUMBER, SPOT_EMPTY
        or INVALID_INPUT (exit time not comparable with the arrival time)
        """
        if not self._is_valid_spot_number(spot_number):
            self._logger.warning(f"Release requested for invalid spot {spot_number!r}")
            return Result.failure(
                ParkingErrorKind.INVALID_SPOT_NUMBER,
                f"Spot number must be between 1 and {self.capacity}, got {spot_number!r}"
            )

        released = self._spots[spot_number - 1].release(now)
        if not released.ok:
            self._logger.warning(released.message)
            return released

        self._increment_version()
        self._add_domain_event(released.value)

        self._logger.info(
            f"Vehicle {released.value.plate} left spot #{spot_number}. "
            f"Fee: {released.value.fee.format()}"
        )
        return released

    def _is_valid_spot_number(self, spot_number: int) -> bool:
        return (
            isinstance(spot_number, int)
            and not isinstance(spot_number, bool)
            and 1 <= spot_number <= self.capacity
        )

    def __str__(self) -> str:
        return f"ParkingArea({self.occupied_count()}/{self.capacity} occupied)"
