"""Tests for tracking number generation."""

import re
from datetime import UTC, datetime

from logistics.shipment.tracking import generate_tracking_number


def test_format():
    assert re.fullmatch(r"GEX-\d{8}-[0-9A-F]{8}", generate_tracking_number())


def test_date_part():
    number = generate_tracking_number(datetime(2026, 2, 19, tzinfo=UTC))
    assert number.startswith("GEX-20260219-")


def test_numbers_are_random():
    assert len({generate_tracking_number() for _ in range(50)}) == 50
