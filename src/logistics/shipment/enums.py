"""Enumerations shared by the shipment lifecycle and the pricing engine."""

from enum import Enum


class TransportMode(Enum):
    AIR = "AIR"
    SEA = "SEA"


class ShipmentStatus(Enum):
    # Common flow (mode not yet required)
    PREORDER_SUBMITTED = "PREORDER_SUBMITTED"
    AWAITING_WAREHOUSE_RECEIPT = "AWAITING_WAREHOUSE_RECEIPT"
    WAREHOUSE_RECEIVED = "WAREHOUSE_RECEIVED"
    WAREHOUSE_VERIFIED_PRICED = "WAREHOUSE_VERIFIED_PRICED"
    # Air ladder
    DISPATCHED_TO_ORIGIN_AIRPORT = "DISPATCHED_TO_ORIGIN_AIRPORT"
    AT_ORIGIN_AIRPORT = "AT_ORIGIN_AIRPORT"
    BOARDED_ON_FLIGHT = "BOARDED_ON_FLIGHT"
    FLIGHT_DEPARTED = "FLIGHT_DEPARTED"
    FLIGHT_LANDED_LAGOS = "FLIGHT_LANDED_LAGOS"
    # Sea ladder
    DISPATCHED_TO_ORIGIN_PORT = "DISPATCHED_TO_ORIGIN_PORT"
    AT_ORIGIN_PORT = "AT_ORIGIN_PORT"
    LOADED_ON_VESSEL = "LOADED_ON_VESSEL"
    VESSEL_DEPARTED = "VESSEL_DEPARTED"
    VESSEL_ARRIVED_LAGOS_PORT = "VESSEL_ARRIVED_LAGOS_PORT"
    # Common tail
    CUSTOMS_CLEARED_LAGOS = "CUSTOMS_CLEARED_LAGOS"
    IN_TRANSIT_TO_LAGOS_OFFICE = "IN_TRANSIT_TO_LAGOS_OFFICE"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    PICKED_UP_COMPLETED = "PICKED_UP_COMPLETED"
    # Exceptions
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"
    RESTRICTED_ITEM_REJECTED = "RESTRICTED_ITEM_REJECTED"
    RESTRICTED_ITEM_OVERRIDE_APPROVED = "RESTRICTED_ITEM_OVERRIDE_APPROVED"


class PaymentCollectionStatus(Enum):
    UNPAID = "UNPAID"
    PAYMENT_IN_PROGRESS = "PAYMENT_IN_PROGRESS"
    PAID_IN_FULL = "PAID_IN_FULL"


class PricingSource(Enum):
    DEFAULT_RATE = "DEFAULT_RATE"
    CUSTOMER_OVERRIDE = "CUSTOMER_OVERRIDE"
    MANUAL_ADJUSTMENT = "MANUAL_ADJUSTMENT"
    MIGRATED_UNVERIFIED = "MIGRATED_UNVERIFIED"
