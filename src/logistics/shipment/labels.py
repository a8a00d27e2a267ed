"""Human-readable status labels, milestone notification texts and the customer mirror.

Every ``ShipmentStatus`` must have a label and every milestone status must
have a notification text. Both tables are checked when this module is
imported, so a new status without copy fails fast instead of falling back
to a placeholder string at runtime.
"""

from logistics.shipment.enums import ShipmentStatus

STATUS_LABELS: dict[ShipmentStatus, str] = {
    ShipmentStatus.PREORDER_SUBMITTED: "Pre-order Submitted",
    ShipmentStatus.AWAITING_WAREHOUSE_RECEIPT: "Awaiting Warehouse Receipt",
    ShipmentStatus.WAREHOUSE_RECEIVED: "Received at Warehouse",
    ShipmentStatus.WAREHOUSE_VERIFIED_PRICED: "Verified and Priced",
    ShipmentStatus.DISPATCHED_TO_ORIGIN_AIRPORT: "Dispatched to Origin Airport",
    ShipmentStatus.AT_ORIGIN_AIRPORT: "At Origin Airport",
    ShipmentStatus.BOARDED_ON_FLIGHT: "Boarded on Flight",
    ShipmentStatus.FLIGHT_DEPARTED: "Flight Departed",
    ShipmentStatus.FLIGHT_LANDED_LAGOS: "Flight Landed in Lagos",
    ShipmentStatus.DISPATCHED_TO_ORIGIN_PORT: "Dispatched to Origin Port",
    ShipmentStatus.AT_ORIGIN_PORT: "At Origin Port",
    ShipmentStatus.LOADED_ON_VESSEL: "Loaded on Vessel",
    ShipmentStatus.VESSEL_DEPARTED: "Vessel Departed",
    ShipmentStatus.VESSEL_ARRIVED_LAGOS_PORT: "Vessel Arrived at Lagos Port",
    ShipmentStatus.CUSTOMS_CLEARED_LAGOS: "Cleared Customs in Lagos",
    ShipmentStatus.IN_TRANSIT_TO_LAGOS_OFFICE: "In Transit to Lagos Office",
    ShipmentStatus.READY_FOR_PICKUP: "Ready for Pickup",
    ShipmentStatus.PICKED_UP_COMPLETED: "Picked Up",
    ShipmentStatus.ON_HOLD: "On Hold",
    ShipmentStatus.CANCELLED: "Cancelled",
    ShipmentStatus.RESTRICTED_ITEM_REJECTED: "Restricted Item Rejected",
    ShipmentStatus.RESTRICTED_ITEM_OVERRIDE_APPROVED: "Restricted Item Approved",
}

# Statuses that reach the customer; everything else is operator-only
MILESTONE_STATUSES = frozenset(
    {
        ShipmentStatus.WAREHOUSE_RECEIVED,
        ShipmentStatus.WAREHOUSE_VERIFIED_PRICED,
        ShipmentStatus.FLIGHT_DEPARTED,
        ShipmentStatus.FLIGHT_LANDED_LAGOS,
        ShipmentStatus.VESSEL_DEPARTED,
        ShipmentStatus.VESSEL_ARRIVED_LAGOS_PORT,
        ShipmentStatus.CUSTOMS_CLEARED_LAGOS,
        ShipmentStatus.READY_FOR_PICKUP,
        ShipmentStatus.PICKED_UP_COMPLETED,
        ShipmentStatus.ON_HOLD,
        ShipmentStatus.CANCELLED,
        ShipmentStatus.RESTRICTED_ITEM_REJECTED,
    }
)

NOTIFICATION_MESSAGES: dict[ShipmentStatus, str] = {
    ShipmentStatus.WAREHOUSE_RECEIVED: "Your shipment {tracking_number} has arrived at our warehouse.",
    ShipmentStatus.WAREHOUSE_VERIFIED_PRICED: (
        "Your shipment {tracking_number} has been weighed, measured and priced."
    ),
    ShipmentStatus.FLIGHT_DEPARTED: "Your shipment {tracking_number} is on its way by air.",
    ShipmentStatus.FLIGHT_LANDED_LAGOS: "Your shipment {tracking_number} has landed in Lagos.",
    ShipmentStatus.VESSEL_DEPARTED: "Your shipment {tracking_number} has sailed.",
    ShipmentStatus.VESSEL_ARRIVED_LAGOS_PORT: "Your shipment {tracking_number} has arrived at Lagos port.",
    ShipmentStatus.CUSTOMS_CLEARED_LAGOS: "Your shipment {tracking_number} has cleared customs.",
    ShipmentStatus.READY_FOR_PICKUP: "Your shipment {tracking_number} is ready for pickup at our Lagos office.",
    ShipmentStatus.PICKED_UP_COMPLETED: "Your shipment {tracking_number} has been picked up. Thank you!",
    ShipmentStatus.ON_HOLD: "Your shipment {tracking_number} is on hold. Our team will contact you.",
    ShipmentStatus.CANCELLED: "Your shipment {tracking_number} has been cancelled.",
    ShipmentStatus.RESTRICTED_ITEM_REJECTED: (
        "Your shipment {tracking_number} contains a restricted item and cannot be shipped."
    ),
}


def _check_complete() -> None:
    missing_labels = set(ShipmentStatus) - set(STATUS_LABELS)
    if missing_labels:
        raise RuntimeError(f"Statuses without a label: {sorted(s.value for s in missing_labels)}")
    missing_messages = MILESTONE_STATUSES - set(NOTIFICATION_MESSAGES)
    if missing_messages:
        raise RuntimeError(f"Milestones without a message: {sorted(s.value for s in missing_messages)}")


_check_complete()


def status_label(status) -> str:
    return STATUS_LABELS[ShipmentStatus(status)]


def is_milestone(status) -> bool:
    return ShipmentStatus(status) in MILESTONE_STATUSES


def notification_message(status, tracking_number: str) -> str:
    return NOTIFICATION_MESSAGES[ShipmentStatus(status)].format(tracking_number=tracking_number)


def customer_status_for(status):
    """Project the operator status onto the customer-facing status.

    The customer sees the operator status as-is today; keeping the
    projection in one place means the two fields cannot drift apart.
    """
    if status is None:
        return None
    return ShipmentStatus(status).value
