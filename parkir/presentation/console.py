# File: parkir/presentation/console.py
"""
Console front end for Parkir

MVC split:
- ConsoleView: every print, prompt and screen clear lives here
- ReceiptPrinter: renders arrival/departure events published on the EventBus
- ParkingPresenter: the menu loop, turning user input into commands

The domain and service layers never print; this module is the only I/O.
"""

from typing import Callable, Optional, Sequence, TextIO
from datetime import datetime
import logging
import os
import sys

from ..domain.models import (
    DomainEvent, Money, ParkingErrorKind, VehicleLeftEvent, VehicleParkedEvent
)
from ..application.commands import (
    CommandProcessor, CommandResult, ExitVehicleCommand, ListSpotsCommand, ParkVehicleCommand
)
from ..application.dtos import ParkingAreaStatusDTO, VehicleCategoryDTO
from ..infrastructure.config import ParkingConfig
from ..infrastructure.messaging import EventHandler, EventRecorder


MENU_PARK = "1"
MENU_EXIT = "2"
MENU_SHOW = "3"
MENU_QUIT = "4"
MENU_HISTORY = "5"

CATEGORY_CHOICES = {
    "1": VehicleCategoryDTO.CAR,
    "2": VehicleCategoryDTO.MOTORCYCLE,
}

ERROR_MESSAGES = {
    ParkingErrorKind.INVALID_INPUT: "Invalid input: {message}",
    ParkingErrorKind.SPOT_OCCUPIED: "Parking spot is already occupied.",
    ParkingErrorKind.SPOT_EMPTY: "{message}.",
    ParkingErrorKind.FACILITY_FULL: "All parking spots are full.",
    ParkingErrorKind.INVALID_SPOT_NUMBER: "Invalid parking spot number.",
}


# ============================================================================
# VIEW
# ============================================================================

class ConsoleView:
    """Formats and writes everything the user sees"""

    def __init__(
        self,
        config: Optional[ParkingConfig] = None,
        output: Optional[TextIO] = None,
        input_fn: Callable[[str], str] = input
    ):
        self.config = config or ParkingConfig()
        self.output = output or sys.stdout
        self.input_fn = input_fn

    def write(self, text: str = "") -> None:
        print(text, file=self.output)

    def prompt(self, text: str) -> str:
        """Ask for a line of input; raises EOFError when input is exhausted"""
        self.output.write(text)
        self.output.flush()
        return self.input_fn("").strip()

    def clear(self) -> None:
        if self.config.clear_screen:
            os.system("cls" if os.name == "nt" else "clear")

    def pause(self) -> None:
        try:
            self.prompt("\nPress Enter to continue...")
        except EOFError:
            pass

    def format_time(self, value: datetime) -> str:
        return f"{value.strftime(self.config.timestamp_format)} {self.config.timezone_label}".rstrip()

    def show_menu(self) -> None:
        self.write("\nMenu:")
        self.write(f"{MENU_PARK}. Park vehicle")
        self.write(f"{MENU_EXIT}. Release vehicle")
        self.write(f"{MENU_SHOW}. Show parking area")
        self.write(f"{MENU_QUIT}. Quit")
        self.write(f"{MENU_HISTORY}. Show recent activity")

    def show_category_menu(self) -> None:
        self.write("Vehicle type:")
        self.write("1. Car")
        self.write("2. Motorcycle")

    def show_arrival(self, event: VehicleParkedEvent) -> None:
        self.write(
            f"Vehicle with plate {event.plate} parked at spot #{event.spot_number}"
        )
        self.write(f"Parking time: {self.format_time(event.timestamp)}")

    def show_departure(self, event: VehicleLeftEvent) -> None:
        self.write(
            f"Vehicle with plate {event.plate} left spot #{event.spot_number}"
        )
        self.write(f"Exit time: {self.format_time(event.exit_time)}")
        self.write(f"Parking fee: {event.fee.format()}")

    def show_status(self, status: ParkingAreaStatusDTO) -> None:
        self.write("Parking area:")
        for spot in status.spots:
            if spot.is_occupied:
                self.write(f"Spot #{spot.number}: {spot.vehicle_category} - {spot.plate}")
            else:
                self.write(f"Spot #{spot.number}: Empty")
        self.write(
            f"\n{status.occupied}/{status.capacity} occupied, "
            f"revenue {Money(status.total_revenue, status.currency).format()}"
        )

    def show_history(self, events: Sequence[DomainEvent], rejected: int = 0) -> None:
        """Recent arrivals and departures, oldest first"""
        self.write("Recent activity:")
        if not events:
            self.write("No arrivals or departures yet.")
        for event in events:
            if isinstance(event, VehicleParkedEvent):
                self.write(
                    f"{self.format_time(event.timestamp)}  {event.plate} ({event.category}) "
                    f"parked at spot #{event.spot_number}"
                )
            elif isinstance(event, VehicleLeftEvent):
                self.write(
                    f"{self.format_time(event.exit_time)}  {event.plate} ({event.category}) "
                    f"left spot #{event.spot_number}, fee {event.fee.format()}"
                )
        self.write(f"\nRejected requests this session: {rejected}")

    def show_error(self, kind: Optional[ParkingErrorKind], message: str) -> None:
        template = ERROR_MESSAGES.get(kind, "{message}")
        self.write(template.format(message=message))


class ReceiptPrinter(EventHandler):
    """Prints arrival and departure receipts as events are published"""

    def __init__(self, view: ConsoleView):
        self.view = view

    def handle(self, event: DomainEvent) -> None:
        if isinstance(event, VehicleParkedEvent):
            self.view.show_arrival(event)
        elif isinstance(event, VehicleLeftEvent):
            self.view.show_departure(event)


# ============================================================================
# PRESENTER
# ============================================================================

class ParkingPresenter:
    """
    Menu loop driving the facility through commands
    Receipts arrive through the EventBus; this class reports failures
    """

    def __init__(
        self,
        view: ConsoleView,
        processor: CommandProcessor,
        history: Optional[EventRecorder] = None
    ):
        self.view = view
        self.processor = processor
        self.history = history or EventRecorder()
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self) -> None:
        """Show the menu until the user quits or input ends"""
        self.logger.info("Console session started")
        try:
            while True:
                self.view.show_menu()
                choice = self.view.prompt("Choose menu: ")
                self.view.clear()
                if choice == MENU_QUIT:
                    break
                self.handle_choice(choice)
                self.view.pause()
                self.view.clear()
        except EOFError:
            self.view.write()
        self.logger.info("Console session ended")

    def handle_choice(self, choice: str) -> None:
        if choice == MENU_PARK:
            self.park_vehicle()
        elif choice == MENU_EXIT:
            self.release_vehicle()
        elif choice == MENU_SHOW:
            self.show_parking_area()
        elif choice == MENU_HISTORY:
            self.show_history()
        else:
            self.view.write("Invalid choice.")

    def park_vehicle(self) -> None:
        plate = self.view.prompt("Enter license plate: ")
        self.view.show_category_menu()
        category = CATEGORY_CHOICES.get(self.view.prompt("Choose vehicle type: "))
        self.view.clear()

        if category is None:
            self.view.write("Invalid vehicle type choice.")
            return

        self._report(self.processor.process(ParkVehicleCommand(plate, category.value)))

    def release_vehicle(self) -> None:
        raw = self.view.prompt("Enter parking spot number: ")
        try:
            spot_number = int(raw)
        except ValueError:
            self.view.show_error(ParkingErrorKind.INVALID_SPOT_NUMBER, raw)
            return

        self._report(self.processor.process(ExitVehicleCommand(spot_number)))

    def show_parking_area(self) -> None:
        result = self.processor.process(ListSpotsCommand())
        self.view.show_status(result.data)

    def show_history(self) -> None:
        rejected = sum(1 for entry in self.processor.get_history() if not entry["success"])
        self.view.show_history(self.history.events, rejected)

    def _report(self, result: CommandResult) -> None:
        if result.success:
            return
        kind = getattr(result.data, "error_kind", None) or ParkingErrorKind.INVALID_INPUT
        self.view.show_error(kind, result.error_message or "")
