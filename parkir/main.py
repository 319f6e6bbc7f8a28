# File: parkir/main.py
"""
Main application entry point for Parkir
Wires configuration, logging, the event bus, the service and the console
"""

from typing import List, Optional
import argparse
import logging
import sys

from .application.commands import CommandProcessor
from .application.parking_service import ParkingService, ParkingServiceFactory
from .infrastructure.config import ConfigError, ParkingConfig, load_config
from .infrastructure.messaging import EventBus, EventRecorder, LoggingEventHandler
from .presentation.console import ConsoleView, ParkingPresenter, ReceiptPrinter


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """Setup application logging configuration"""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
    return logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parkir",
        description="Console parking facility: park, release and list vehicles"
    )
    parser.add_argument("--capacity", type=int, help="Number of parking spots (default 20)")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--no-clear", dest="clear_screen", action="store_false", default=None,
        help="Do not clear the terminal between screens"
    )
    return parser


class ParkirApplication:
    """Main application controller that sets up all components"""

    def __init__(self, config: ParkingConfig, view: Optional[ConsoleView] = None):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

        # Components (dependency injection)
        self.event_bus = EventBus()
        self.service: ParkingService = ParkingServiceFactory.create_default_service(
            config, event_bus=self.event_bus
        )
        self.processor = CommandProcessor(self.service)
        self.view = view or ConsoleView(config)

        self.history = EventRecorder(max_events=config.event_history_size)
        self.event_bus.subscribe_all(self.history)
        self.event_bus.subscribe_all(LoggingEventHandler(logging.DEBUG))
        self.event_bus.subscribe_all(ReceiptPrinter(self.view))

        self.presenter = ParkingPresenter(self.view, self.processor, self.history)
        self.logger.info(f"Parkir started with {config.capacity} spots")

    def run(self) -> None:
        self.presenter.run()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            args.config,
            overrides={
                "capacity": args.capacity,
                "log_level": args.log_level,
                "log_file": args.log_file,
                "clear_screen": args.clear_screen,
            }
        )
    except ConfigError as e:
        print(f"parkir: {e}", file=sys.stderr)
        return 2

    try:
        setup_logging(config.log_level, config.log_file)
    except OSError as e:
        print(f"parkir: cannot open log file: {e}", file=sys.stderr)
        return 2

    try:
        ParkirApplication(config).run()
    except KeyboardInterrupt:
        print(file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
