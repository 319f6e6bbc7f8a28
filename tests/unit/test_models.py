#!/usr/bin/env python3
"""
Domain Model Unit Tests

Tests for Money, VehicleCategory, Vehicle, ParkingSpot and Result.
"""

import unittest
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from parkir.domain.models import (
    Money, VehicleCategory, Vehicle, ParkingSpot, SpotState,
    ParkingErrorKind, Result, InvalidInputError, SpotEmptyError,
    OccupantView, SpotSnapshot, VehicleParkedEvent, VehicleLeftEvent
)


T0 = datetime(2024, 5, 1, 8, 0, 0)


class TestMoney(unittest.TestCase):
    """Unit tests for the Money value object"""

    def test_negative_amount_rejected(self):
        with self.assertRaises(ValueError):
            Money(Decimal('-1'))

    def test_addition_and_currency_mismatch(self):
        total = Money(Decimal('5000')) + Money(Decimal('2500'))
        self.assertEqual(total.amount, Decimal('7500'))

        with self.assertRaises(ValueError):
            Money(Decimal('1'), "IDR") + Money(Decimal('1'), "USD")

    def test_format_drops_decimals(self):
        self.assertEqual(Money(Decimal('10000')).format(), "Rp 10,000")
        self.assertEqual(Money(Decimal('1234.4')).format(), "Rp 1,234")
        self.assertEqual(Money(Decimal('12.5'), "USD").format(), "USD 12")


class TestVehicleCategory(unittest.TestCase):
    """Unit tests for the closed category set and rate table"""

    def test_hourly_rates(self):
        self.assertEqual(VehicleCategory.CAR.hourly_rate.amount, Decimal('5000'))
        self.assertEqual(VehicleCategory.MOTORCYCLE.hourly_rate.amount, Decimal('2000'))

    def test_parse_accepts_values_names_and_members(self):
        self.assertIs(VehicleCategory.parse("car"), VehicleCategory.CAR)
        self.assertIs(VehicleCategory.parse(" Motorcycle "), VehicleCategory.MOTORCYCLE)
        self.assertIs(VehicleCategory.parse("CAR"), VehicleCategory.CAR)
        self.assertIs(VehicleCategory.parse(VehicleCategory.MOTORCYCLE), VehicleCategory.MOTORCYCLE)

    def test_parse_rejects_unknown(self):
        for value in ("truck", "", None, 1):
            with self.assertRaises(InvalidInputError, msg=f"value={value!r}"):
                VehicleCategory.parse(value)

    def test_display_name(self):
        self.assertEqual(str(VehicleCategory.CAR), "Car")
        self.assertEqual(str(VehicleCategory.MOTORCYCLE), "Motorcycle")


class TestVehicle(unittest.TestCase):
    """Unit tests for Vehicle creation and fees"""

    def test_create_success(self):
        result = Vehicle.create(" B1234XY ", "car", T0)
        self.assertTrue(result.ok)
        vehicle = result.value
        self.assertEqual(vehicle.plate, "B1234XY")
        self.assertIs(vehicle.category, VehicleCategory.CAR)
        self.assertEqual(vehicle.arrival_time, T0)

    def test_create_rejects_empty_plate(self):
        for plate in ("", "   "):
            result = Vehicle.create(plate, VehicleCategory.CAR, T0)
            self.assertFalse(result.ok)
            self.assertEqual(result.error, ParkingErrorKind.INVALID_INPUT)

    def test_create_rejects_unknown_category(self):
        result = Vehicle.create("B1234XY", "bus", T0)
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ParkingErrorKind.INVALID_INPUT)

    def test_direct_construction_raises(self):
        with self.assertRaises(InvalidInputError):
            Vehicle("", VehicleCategory.CAR, T0)
        with self.assertRaises(ValueError):
            Vehicle("B1", "tank", T0)

    def test_vehicle_is_immutable(self):
        vehicle = Vehicle("B1234XY", VehicleCategory.CAR, T0)
        with self.assertRaises(Exception):
            vehicle.arrival_time = T0 + timedelta(hours=1)
        self.assertEqual(vehicle.arrival_time, T0)

    def test_fee_two_hours(self):
        """Car for 2h costs 10000, motorcycle 4000"""
        car = Vehicle("B1234XY", VehicleCategory.CAR, T0)
        motorcycle = Vehicle("B5678ZZ", VehicleCategory.MOTORCYCLE, T0)
        now = T0 + timedelta(hours=2)

        self.assertEqual(car.compute_fee(now).amount, Decimal('10000'))
        self.assertEqual(motorcycle.compute_fee(now).amount, Decimal('4000'))

    def test_fee_uses_fractional_hours(self):
        car = Vehicle("B1234XY", VehicleCategory.CAR, T0)
        self.assertEqual(car.compute_fee(T0 + timedelta(minutes=30)).amount, Decimal('2500'))
        self.assertEqual(car.compute_fee(T0 + timedelta(seconds=36)).amount, Decimal('50'))
        self.assertEqual(car.compute_fee(T0).amount, Decimal('0'))

    def test_fee_is_monotonic(self):
        for category in VehicleCategory:
            vehicle = Vehicle("MONO1", category, T0)
            previous = vehicle.compute_fee(T0)
            for minutes in (1, 7, 59, 60, 61, 240, 1440, 10000):
                current = vehicle.compute_fee(T0 + timedelta(minutes=minutes))
                self.assertGreaterEqual(current.amount, previous.amount)
                previous = current

    def test_fee_is_pure(self):
        car = Vehicle("B1234XY", VehicleCategory.CAR, T0)
        now = T0 + timedelta(hours=3)
        self.assertEqual(car.compute_fee(now), car.compute_fee(now))

    def test_clock_behind_arrival_charges_nothing(self):
        car = Vehicle("B1234XY", VehicleCategory.CAR, T0)
        self.assertEqual(car.compute_fee(T0 - timedelta(minutes=5)).amount, Decimal('0'))


class TestParkingSpot(unittest.TestCase):
    """Unit tests for the ParkingSpot state machine"""

    def setUp(self):
        self.spot = ParkingSpot(3)
        self.car = Vehicle("B1234XY", VehicleCategory.CAR, T0)

    def test_new_spot_is_empty(self):
        self.assertTrue(self.spot.is_available())
        self.assertEqual(self.spot.state, SpotState.EMPTY)
        self.assertIsNone(self.spot.peek_occupant())
        self.assertEqual(self.spot.number, 3)

    def test_invalid_spot_number(self):
        for number in (0, -1, True, "1"):
            with self.assertRaises(InvalidInputError):
                ParkingSpot(number)

    def test_park_records_arrival(self):
        result = self.spot.park(self.car)
        self.assertTrue(result.ok)
        event = result.value
        self.assertIsInstance(event, VehicleParkedEvent)
        self.assertEqual(event.plate, "B1234XY")
        self.assertEqual(event.spot_number, 3)
        self.assertEqual(event.category, VehicleCategory.CAR)
        self.assertEqual(event.timestamp, T0)

        self.assertEqual(self.spot.state, SpotState.OCCUPIED)
        self.assertEqual(self.spot.peek_occupant(), OccupantView("B1234XY", VehicleCategory.CAR))

    def test_park_on_occupied_spot_is_rejected(self):
        self.spot.park(self.car)
        other = Vehicle("B5678ZZ", VehicleCategory.MOTORCYCLE, T0)

        result = self.spot.park(other)
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ParkingErrorKind.SPOT_OCCUPIED)
        self.assertEqual(self.spot.peek_occupant().plate, "B1234XY")

    def test_release_computes_fee_and_empties(self):
        self.spot.park(self.car)
        now = T0 + timedelta(hours=1, minutes=30)

        result = self.spot.release(now)
        self.assertTrue(result.ok)
        event = result.value
        self.assertIsInstance(event, VehicleLeftEvent)
        self.assertEqual(event.plate, "B1234XY")
        self.assertEqual(event.fee.amount, Decimal('7500'))
        self.assertEqual(event.exit_time, now)
        self.assertEqual(event.entry_time, T0)
        self.assertAlmostEqual(event.duration_hours, 1.5)

        self.assertTrue(self.spot.is_available())
        self.assertIsNone(self.spot.peek_occupant())

    def test_release_empty_spot_is_rejected(self):
        result = self.spot.release(T0)
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ParkingErrorKind.SPOT_EMPTY)
        self.assertTrue(self.spot.is_available())

    def test_release_with_mismatched_timestamps_is_rejected(self):
        """An aware exit time cannot be compared with a naive arrival"""
        self.spot.park(self.car)

        result = self.spot.release(datetime(2024, 5, 1, 9, tzinfo=timezone.utc))

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ParkingErrorKind.INVALID_INPUT)
        self.assertEqual(self.spot.peek_occupant().plate, "B1234XY")
        self.assertTrue(self.spot.release(T0 + timedelta(hours=1)).ok)

    def test_snapshot(self):
        self.assertEqual(self.spot.snapshot(), SpotSnapshot(3, False))
        self.spot.park(self.car)
        self.assertEqual(
            self.spot.snapshot(),
            SpotSnapshot(3, True, VehicleCategory.CAR, "B1234XY")
        )
        self.assertEqual(str(self.spot), "Spot #3: Car - B1234XY")


class TestResult(unittest.TestCase):
    """Unit tests for Result"""

    def test_success_and_failure(self):
        ok = Result.success(5)
        self.assertTrue(ok)
        self.assertEqual(ok.unwrap(), 5)

        failed = Result.failure(ParkingErrorKind.SPOT_EMPTY, "Spot #1 is empty")
        self.assertFalse(failed)
        self.assertIsNone(failed.value)

    def test_unwrap_raises_matching_error(self):
        failed = Result.failure(ParkingErrorKind.SPOT_EMPTY, "Spot #1 is empty")
        with self.assertRaises(SpotEmptyError) as ctx:
            failed.unwrap()
        self.assertEqual(str(ctx.exception), "Spot #1 is empty")
        self.assertEqual(ctx.exception.kind, ParkingErrorKind.SPOT_EMPTY)


if __name__ == '__main__':
    unittest.main()
