"""Mapping from the legacy order model onto the shipment lifecycle.

Used when backfilling shipments booked before warehouse verification
existed. A ``None`` result means the legacy row cannot be placed on a
ladder and is left for an operator.
"""

from enum import Enum

from logistics.shipment.enums import ShipmentStatus, TransportMode


class LegacyOrderStatus(Enum):
    PENDING = "pending"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


_SHIPMENT_TYPE_MODES = {
    "air": TransportMode.AIR,
    "ocean": TransportMode.SEA,
}

# Statuses whose mapping does not depend on the transport mode
_FIXED = {
    LegacyOrderStatus.PENDING: ShipmentStatus.WAREHOUSE_VERIFIED_PRICED,
    LegacyOrderStatus.OUT_FOR_DELIVERY: ShipmentStatus.IN_TRANSIT_TO_LAGOS_OFFICE,
    LegacyOrderStatus.DELIVERED: ShipmentStatus.PICKED_UP_COMPLETED,
    LegacyOrderStatus.CANCELLED: ShipmentStatus.CANCELLED,
    LegacyOrderStatus.RETURNED: ShipmentStatus.CANCELLED,
}

_BY_MODE = {
    LegacyOrderStatus.PICKED_UP: {
        TransportMode.AIR: ShipmentStatus.DISPATCHED_TO_ORIGIN_AIRPORT,
        TransportMode.SEA: ShipmentStatus.DISPATCHED_TO_ORIGIN_PORT,
    },
    LegacyOrderStatus.IN_TRANSIT: {
        TransportMode.AIR: ShipmentStatus.FLIGHT_DEPARTED,
        TransportMode.SEA: ShipmentStatus.VESSEL_DEPARTED,
    },
}


def resolve_transport_mode(shipment_type: str | None) -> TransportMode | None:
    """``air`` books by air, ``ocean`` by sea; anything else (road, unset) is unknown."""
    if not shipment_type:
        return None
    return _SHIPMENT_TYPE_MODES.get(shipment_type.lower())


def map_legacy_status(legacy_status, transport_mode=None) -> ShipmentStatus | None:
    try:
        legacy = LegacyOrderStatus(legacy_status.lower() if isinstance(legacy_status, str) else legacy_status)
    except ValueError:
        return None

    if legacy in _FIXED:
        return _FIXED[legacy]

    if not transport_mode:
        return None
    mode = TransportMode(transport_mode.upper() if isinstance(transport_mode, str) else transport_mode)
    return _BY_MODE[legacy][mode]
