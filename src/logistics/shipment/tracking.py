"""Tracking number generation."""

import secrets
from datetime import UTC, datetime

TRACKING_PREFIX = "GEX"


def generate_tracking_number(now: datetime | None = None) -> str:
    """Return a tracking number like ``GEX-20260219-A3F9C21B``."""
    now = now or datetime.now(UTC)
    return f"{TRACKING_PREFIX}-{now:%Y%m%d}-{secrets.token_hex(4).upper()}"
