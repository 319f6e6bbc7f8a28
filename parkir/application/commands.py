# File: parkir/application/commands.py
"""
Command Pattern for Parkir operations

Each menu action of the console is a command object that can be validated,
executed against the ParkingService and kept in an audit history.

Command Types:
1. ParkVehicleCommand - vehicle entry
2. ExitVehicleCommand - vehicle exit by spot number
3. ListSpotsCommand - facility listing
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Tuple
from datetime import datetime
import logging
import uuid

from .parking_service import ParkingService


# ============================================================================
# COMMAND RESULT
# ============================================================================

@dataclass
class CommandResult:
    """Outcome of executing one command"""
    success: bool
    command_id: str
    command_type: str
    executed_at: datetime
    data: Optional[Any] = None
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = self.data.to_dict() if hasattr(self.data, "to_dict") else self.data
        return {
            "success": self.success,
            "command_id": self.command_id,
            "command_type": self.command_type,
            "executed_at": self.executed_at.isoformat(),
            "data": data,
            "error_message": self.error_message,
            "metadata": self.metadata
        }


# ============================================================================
# COMMAND INTERFACES AND BASE CLASSES
# ============================================================================

class Command(ABC):
    """
    Abstract base class for all commands

    A command represents an intent to change or read the facility state.
    Commands are named in the imperative (e.g., ParkVehicleCommand).
    """

    def __init__(self, command_id: Optional[str] = None):
        self.command_id = command_id or str(uuid.uuid4())
        self.executed_at: Optional[datetime] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def execute(self, service: ParkingService) -> CommandResult:
        """
        Execute the command using the provided service
        """
        pass

    @abstractmethod
    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate command parameters before execution

        Returns: (is_valid, error_messages)
        """
        pass

    def get_description(self) -> str:
        """Get human-readable command description"""
        return self.__class__.__name__.replace("Command", "")

    def _result(self, success: bool, data: Any = None, error_message: Optional[str] = None) -> CommandResult:
        self.executed_at = datetime.now()
        return CommandResult(
            success=success,
            command_id=self.command_id,
            command_type=self.__class__.__name__,
            executed_at=self.executed_at,
            data=data,
            error_message=error_message
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "command_id": self.command_id,
            "command_type": self.__class__.__name__,
            "executed_at": self.executed_at.isoformat() if self.executed_at else None
        }


# ============================================================================
# PARKING COMMANDS
# ============================================================================

class ParkVehicleCommand(Command):
    """
    Command: Park a vehicle
    Business Operation: Vehicle Entry and first-fit Spot Allocation
    """

    def __init__(self, plate: str, vehicle_category: str, entry_time: Optional[datetime] = None):
        super().__init__()
        self.plate = plate
        self.vehicle_category = vehicle_category
        self.entry_time = entry_time

    def validate(self) -> Tuple[bool, List[str]]:
        errors = []
        if not self.plate or not self.plate.strip():
            errors.append("License plate is required")
        if not self.vehicle_category:
            errors.append("Vehicle category is required")
        return len(errors) == 0, errors

    def execute(self, service: ParkingService) -> CommandResult:
        self.logger.info(f"Executing ParkVehicleCommand for {self.plate}")

        result = service.park_vehicle({
            "plate": self.plate,
            "vehicle_category": self.vehicle_category,
            "entry_time": self.entry_time
        })
        return self._result(result.success, result, None if result.success else result.message)

    def get_description(self) -> str:
        return f"Park {self.plate}"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"plate": self.plate, "vehicle_category": self.vehicle_category})
        return data


class ExitVehicleCommand(Command):
    """
    Command: Release a spot
    Business Operation: Vehicle Exit and fee computation
    """

    def __init__(self, spot_number: int, exit_time: Optional[datetime] = None):
        super().__init__()
        self.spot_number = spot_number
        self.exit_time = exit_time

    def validate(self) -> Tuple[bool, List[str]]:
        errors = []
        if isinstance(self.spot_number, bool) or not isinstance(self.spot_number, int):
            errors.append(f"Spot number must be an integer, got {self.spot_number!r}")
        return len(errors) == 0, errors

    def execute(self, service: ParkingService) -> CommandResult:
        self.logger.info(f"Executing ExitVehicleCommand for spot {self.spot_number}")

        result = service.exit_vehicle({
            "spot_number": self.spot_number,
            "exit_time": self.exit_time
        })
        return self._result(result.success, result, None if result.success else result.message)

    def get_description(self) -> str:
        return f"Exit spot #{self.spot_number}"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["spot_number"] = self.spot_number
        return data


class ListSpotsCommand(Command):
    """Command: Read the facility status"""

    def validate(self) -> Tuple[bool, List[str]]:
        return True, []

    def execute(self, service: ParkingService) -> CommandResult:
        return self._result(True, service.get_status())


# ============================================================================
# COMMAND PROCESSOR
# ============================================================================

class CommandProcessor:
    """
    Validates and executes commands, keeping a bounded history
    """

    def __init__(self, service: ParkingService, history_size: int = 100):
        self.service = service
        self.history: Deque[Tuple[Command, CommandResult]] = deque(maxlen=history_size)
        self.logger = logging.getLogger(self.__class__.__name__)

    def process(self, command: Command) -> CommandResult:
        """Validate then execute a command"""
        is_valid, errors = command.validate()
        if not is_valid:
            self.logger.warning(f"{command.get_description()} rejected: {errors}")
            result = command._result(False, error_message="; ".join(errors))
        else:
            result = command.execute(self.service)

        self.history.append((command, result))
        return result

    def get_history(self) -> List[Dict[str, Any]]:
        """Executed commands, oldest first"""
        return [
            {**command.to_dict(), "success": result.success, "error_message": result.error_message}
            for command, result in self.history
        ]
