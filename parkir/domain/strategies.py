# File: parkir/domain/strategies.py
"""
Strategy Pattern for spot allocation

The facility only needs first-fit: the lowest-numbered empty spot wins.
The interface exists so the aggregate does not hard-code the scan.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
import logging

from .models import ParkingSpot, Vehicle


class AllocationStrategy(ABC):
    """
    Abstract base class for allocation strategies
    Picks a spot for a vehicle out of the facility's ordered spots
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def select_spot(
        self,
        spots: Sequence[ParkingSpot],
        vehicle: Vehicle
    ) -> Optional[ParkingSpot]:
        """
        Select a spot for the given vehicle
        Returns: an available ParkingSpot, or None when nothing fits
        """
        pass

    def get_strategy_name(self) -> str:
        """Get human-readable strategy name"""
        return self.__class__.__name__.replace("Strategy", "")

    def __str__(self) -> str:
        return self.get_strategy_name()


class FirstFitStrategy(AllocationStrategy):
    """
    Lowest-numbered empty spot
    Deterministic: the same occupancy always yields the same spot
    """

    def select_spot(
        self,
        spots: Sequence[ParkingSpot],
        vehicle: Vehicle
    ) -> Optional[ParkingSpot]:
        # spots arrive ordered by number
        for spot in spots:
            if spot.is_available():
                self.logger.debug(f"Selected spot #{spot.number} for {vehicle.plate}")
                return spot
        return None
