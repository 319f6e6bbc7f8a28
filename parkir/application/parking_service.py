# File: parkir/application/parking_service.py
"""
Parking Application Service

Orchestrates the ParkingArea aggregate for the console (or any other caller):
1. Validate incoming requests and build domain objects
2. Supply the current time from an injectable clock
3. Run the park / exit use cases and translate Results into DTOs
4. Publish the aggregate's domain events on the EventBus
5. Keep session and revenue statistics
"""

from typing import Any, Callable, Dict, List, Optional, Union
from datetime import datetime
import logging
import threading

from pydantic import ValidationError

from ..domain.models import (
    Money, Vehicle, VehicleLeftEvent, ParkingErrorKind, SpotSnapshot
)
from ..domain.aggregates import ParkingArea
from ..domain.strategies import AllocationStrategy
from ..infrastructure.config import ParkingConfig
from ..infrastructure.messaging import EventBus
from .dtos import (
    ParkVehicleRequest, ExitVehicleRequest,
    ParkingAllocationDTO, ParkingExitDTO,
    SpotDTO, ParkingAreaStatusDTO
)


Clock = Callable[[], datetime]


def _validation_message(error: ValidationError) -> str:
    return "; ".join(err["msg"] for err in error.errors())


def _exit_error_kind(error: ValidationError) -> ParkingErrorKind:
    """A bad spot number is INVALID_SPOT_NUMBER; any other bad field is INVALID_INPUT"""
    fields = {err["loc"][0] for err in error.errors() if err["loc"]}
    if "spot_number" in fields:
        return ParkingErrorKind.INVALID_SPOT_NUMBER
    return ParkingErrorKind.INVALID_INPUT


# ============================================================================
# MAIN PARKING SERVICE
# ============================================================================

class ParkingService:
    """
    Main application service for the facility

    Every operation holds the service lock for its whole duration, so spot
    transitions stay atomic even if one service is shared between callers.
    """

    def __init__(
        self,
        parking_area: ParkingArea,
        event_bus: Optional[EventBus] = None,
        clock: Clock = datetime.now
    ):
        """
        Initialize the parking service

        Args:
            parking_area: The facility aggregate this service drives
            event_bus: Bus receiving arrival/departure events; a private one if omitted
            clock: Zero-argument callable returning the current time
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.parking_area = parking_area
        self.event_bus = event_bus or EventBus()
        self.clock = clock

        self._lock = threading.Lock()
        self.total_sessions: int = 0
        self.total_revenue: Money = Money.zero()

        self.logger.info(f"ParkingService initialized for {parking_area.capacity} spots")

    # ========================================================================
    # USE CASES
    # ========================================================================

    def park_vehicle(
        self,
        request: Union[ParkVehicleRequest, Dict[str, Any]]
    ) -> ParkingAllocationDTO:
        """
        Use Case: Vehicle Entry
        1. Validate the request
        2. Build the vehicle with its arrival time
        3. Allocate the first empty spot
        4. Publish the arrival event
        """
        if isinstance(request, dict):
            try:
                request = ParkVehicleRequest(**request)
            except ValidationError as e:
                message = _validation_message(e)
                self.logger.warning(f"Rejected parking request: {message}")
                return ParkingAllocationDTO(
                    success=False,
                    error_kind=ParkingErrorKind.INVALID_INPUT,
                    message=message
                )

        self.logger.info(f"Processing parking request for {request.plate}")

        with self._lock:
            entry_time = request.entry_time or self.clock()
            created = Vehicle.create(request.plate, request.vehicle_category.to_domain(), entry_time)
            if not created.ok:
                return ParkingAllocationDTO(
                    success=False,
                    plate=request.plate,
                    error_kind=created.error,
                    message=created.message
                )

            vehicle = created.value
            parked = self.parking_area.park_vehicle(vehicle, entry_time)
            if not parked.ok:
                return ParkingAllocationDTO(
                    success=False,
                    plate=vehicle.plate,
                    vehicle_category=vehicle.category,
                    error_kind=parked.error,
                    message=parked.message
                )

            self.total_sessions += 1
            self._publish_events()

        return ParkingAllocationDTO(
            success=True,
            spot_number=parked.value,
            plate=vehicle.plate,
            vehicle_category=vehicle.category,
            entry_time=entry_time,
            message="Vehicle parked successfully"
        )

    def exit_vehicle(
        self,
        request: Union[ExitVehicleRequest, Dict[str, Any]]
    ) -> ParkingExitDTO:
        """
        Use Case: Vehicle Exit
        1. Validate the request
        2. Release the spot and compute the fee
        3. Record revenue
        4. Publish the departure event
        """
        if isinstance(request, dict):
            try:
                request = ExitVehicleRequest(**request)
            except ValidationError as e:
                message = _validation_message(e)
                self.logger.warning(f"Rejected exit request: {message}")
                return ParkingExitDTO(
                    success=False,
                    error_kind=_exit_error_kind(e),
                    message=message
                )

        self.logger.info(f"Processing exit request for spot {request.spot_number}")

        with self._lock:
            exit_time = request.exit_time or self.clock()
            released = self.parking_area.release_vehicle(request.spot_number, exit_time)
            if not released.ok:
                return ParkingExitDTO(
                    success=False,
                    spot_number=request.spot_number,
                    error_kind=released.error,
                    message=released.message
                )

            departure: VehicleLeftEvent = released.value
            self.total_revenue = self.total_revenue + departure.fee
            self._publish_events()

        return ParkingExitDTO(
            success=True,
            spot_number=departure.spot_number,
            plate=departure.plate,
            vehicle_category=departure.category,
            entry_time=departure.entry_time,
            exit_time=departure.exit_time,
            duration_hours=departure.duration_hours,
            fee=departure.fee.amount,
            currency=departure.fee.currency,
            message="Vehicle left successfully"
        )

    def list_spots(self) -> List[SpotDTO]:
        """All spots ordered by number"""
        with self._lock:
            snapshots = self.parking_area.list_spots()
        return [self._to_spot_dto(snapshot) for snapshot in snapshots]

    def get_status(self) -> ParkingAreaStatusDTO:
        """Occupancy, revenue and the full spot listing"""
        with self._lock:
            snapshots = self.parking_area.list_spots()
            occupied = sum(1 for s in snapshots if s.is_occupied)
            capacity = self.parking_area.capacity
            status = ParkingAreaStatusDTO(
                capacity=capacity,
                occupied=occupied,
                available=capacity - occupied,
                occupancy_rate=occupied / capacity,
                total_sessions=self.total_sessions,
                total_revenue=self.total_revenue.amount,
                currency=self.total_revenue.currency,
                spots=[self._to_spot_dto(s) for s in snapshots],
                timestamp=self.clock()
            )
        self.logger.debug(f"Status: {occupied}/{capacity} occupied")
        return status

    def find_vehicle(self, plate: str) -> Optional[int]:
        """Spot number holding `plate`, if parked"""
        with self._lock:
            return self.parking_area.find_spot_by_plate(plate)

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _publish_events(self) -> None:
        self.event_bus.publish_all(self.parking_area.clear_events())

    @staticmethod
    def _to_spot_dto(snapshot: SpotSnapshot) -> SpotDTO:
        return SpotDTO(
            number=snapshot.number,
            is_occupied=snapshot.is_occupied,
            vehicle_category=snapshot.occupant_category,
            plate=snapshot.occupant_plate
        )


# ============================================================================
# SERVICE FACTORY
# ============================================================================

class ParkingServiceFactory:
    """Factory for creating parking service instances"""

    @staticmethod
    def create_default_service(
        config: Optional[ParkingConfig] = None,
        event_bus: Optional[EventBus] = None,
        clock: Clock = datetime.now,
        strategy: Optional[AllocationStrategy] = None
    ) -> ParkingService:
        """Create a service over a fresh facility sized from the configuration"""
        config = config or ParkingConfig()
        parking_area = ParkingArea.create(config.capacity, strategy).unwrap()
        return ParkingService(parking_area, event_bus=event_bus, clock=clock)
