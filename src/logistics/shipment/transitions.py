"""Shipment status transition rules.

State Machine:
    PREORDER_SUBMITTED → AWAITING_WAREHOUSE_RECEIPT → WAREHOUSE_RECEIVED → WAREHOUSE_VERIFIED_PRICED
    AIR: → DISPATCHED_TO_ORIGIN_AIRPORT → AT_ORIGIN_AIRPORT → BOARDED_ON_FLIGHT → FLIGHT_DEPARTED
         → FLIGHT_LANDED_LAGOS
    SEA: → DISPATCHED_TO_ORIGIN_PORT → AT_ORIGIN_PORT → LOADED_ON_VESSEL → VESSEL_DEPARTED
         → VESSEL_ARRIVED_LAGOS_PORT
    → CUSTOMS_CLEARED_LAGOS → IN_TRANSIT_TO_LAGOS_OFFICE → READY_FOR_PICKUP → PICKED_UP_COMPLETED
    * → {ON_HOLD, CANCELLED, RESTRICTED_ITEM_REJECTED, RESTRICTED_ITEM_OVERRIDE_APPROVED}

Moves along a ladder may skip intermediate statuses but never go backwards.
"""

from logistics.errors import TransitionNotAllowed
from logistics.shipment.enums import PaymentCollectionStatus, ShipmentStatus, TransportMode

COMMON_FLOW: tuple[ShipmentStatus, ...] = (
    ShipmentStatus.PREORDER_SUBMITTED,
    ShipmentStatus.AWAITING_WAREHOUSE_RECEIPT,
    ShipmentStatus.WAREHOUSE_RECEIVED,
    ShipmentStatus.WAREHOUSE_VERIFIED_PRICED,
)

AIR_LADDER: tuple[ShipmentStatus, ...] = (
    ShipmentStatus.DISPATCHED_TO_ORIGIN_AIRPORT,
    ShipmentStatus.AT_ORIGIN_AIRPORT,
    ShipmentStatus.BOARDED_ON_FLIGHT,
    ShipmentStatus.FLIGHT_DEPARTED,
    ShipmentStatus.FLIGHT_LANDED_LAGOS,
)

SEA_LADDER: tuple[ShipmentStatus, ...] = (
    ShipmentStatus.DISPATCHED_TO_ORIGIN_PORT,
    ShipmentStatus.AT_ORIGIN_PORT,
    ShipmentStatus.LOADED_ON_VESSEL,
    ShipmentStatus.VESSEL_DEPARTED,
    ShipmentStatus.VESSEL_ARRIVED_LAGOS_PORT,
)

COMMON_TAIL: tuple[ShipmentStatus, ...] = (
    ShipmentStatus.CUSTOMS_CLEARED_LAGOS,
    ShipmentStatus.IN_TRANSIT_TO_LAGOS_OFFICE,
    ShipmentStatus.READY_FOR_PICKUP,
    ShipmentStatus.PICKED_UP_COMPLETED,
)

AIR_FLOW = COMMON_FLOW + AIR_LADDER + COMMON_TAIL
SEA_FLOW = COMMON_FLOW + SEA_LADDER + COMMON_TAIL

EXCEPTION_STATUSES = frozenset(
    {
        ShipmentStatus.ON_HOLD,
        ShipmentStatus.CANCELLED,
        ShipmentStatus.RESTRICTED_ITEM_REJECTED,
        ShipmentStatus.RESTRICTED_ITEM_OVERRIDE_APPROVED,
    }
)

# Entered only by warehouse verification, which also prices the shipment
VERIFICATION_ONLY_STATUSES = frozenset({ShipmentStatus.WAREHOUSE_VERIFIED_PRICED})


def _as_status(value) -> ShipmentStatus | None:
    if value is None or isinstance(value, ShipmentStatus):
        return value
    return ShipmentStatus(value)


def _as_mode(value) -> TransportMode | None:
    if value is None or isinstance(value, TransportMode):
        return value
    return TransportMode(value)


def _as_payment(value) -> PaymentCollectionStatus | None:
    if value is None or isinstance(value, PaymentCollectionStatus):
        return value
    return PaymentCollectionStatus(value)


def flow_for(mode) -> tuple[ShipmentStatus, ...]:
    """Ordered statuses reachable under ``mode``; the common flow when unknown."""
    mode = _as_mode(mode)
    if mode is None:
        return COMMON_FLOW
    return AIR_FLOW if mode == TransportMode.AIR else SEA_FLOW


def is_exception_status(status) -> bool:
    return _as_status(status) in EXCEPTION_STATUSES


def is_mode_dependent(status) -> bool:
    """True for statuses that only exist once a transport mode is assigned."""
    status = _as_status(status)
    return status not in COMMON_FLOW and status not in EXCEPTION_STATUSES


def initial_status_for_mode(mode=None) -> ShipmentStatus:
    return flow_for(mode)[0]


def can_transition_sequentially(mode, current, next_status) -> bool:
    """Whether ``next_status`` lies ahead of ``current`` on the mode's ladder."""
    try:
        next_status = _as_status(next_status)
        current = _as_status(current)
    except ValueError:
        return False

    if next_status in EXCEPTION_STATUSES:
        return True

    flow = flow_for(mode)
    if next_status not in flow:
        return False

    if current is None:
        return next_status == flow[0]

    # Leaving an exception status resumes the ladder wherever the operator says
    if current in EXCEPTION_STATUSES:
        return True

    if current not in flow:
        return False

    return flow.index(next_status) > flow.index(current)


def validate_transition(mode, current, target, payment_status=None) -> None:
    """Raise ``TransitionNotAllowed`` unless ``current → target`` is legal."""
    mode = _as_mode(mode)
    current = _as_status(current)
    try:
        target = _as_status(target)
    except ValueError:
        raise TransitionNotAllowed({"status": [f"Unknown status: {target}"]}, code="sequence") from None

    if target in EXCEPTION_STATUSES:
        return

    if target in VERIFICATION_ONLY_STATUSES:
        raise TransitionNotAllowed(
            {"status": [f"{target.value} is set by warehouse verification, not by a status update"]},
            code="verification_required",
        )

    if mode is None and is_mode_dependent(target):
        raise TransitionNotAllowed(
            {
                "status": [
                    f"Cannot move to {target.value}: transport mode is not set. "
                    "Complete warehouse verification first."
                ]
            },
            code="mode_unknown",
        )

    if not can_transition_sequentially(mode, current, target):
        current_label = current.value if current else "no status"
        raise TransitionNotAllowed(
            {"status": [f"Cannot transition from {current_label} to {target.value}"]},
            code="sequence",
        )

    if target == ShipmentStatus.READY_FOR_PICKUP and _as_payment(payment_status) != PaymentCollectionStatus.PAID_IN_FULL:
        raise TransitionNotAllowed(
            {"payment_collection_status": ["Shipment must be paid in full before it is ready for pickup"]},
            code="payment_required",
        )
