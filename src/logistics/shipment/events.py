"""Shipment domain events — immutable facts about shipment state changes.

``ShipmentStatusChanged`` is the append-only status log: it is raised once per
accepted transition, including registration and warehouse verification, and
is projected into the status timeline for downstream analytics.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from logistics.domain import logistics


@logistics.event(part_of="Shipment")
class ShipmentRegistered:
    """A shipment was booked and given a tracking number."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    tracking_number = String(required=True)
    sender_id = Identifier(required=True)
    requested_mode = String()
    registered_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentVerifiedAtWarehouse:
    """Packages were measured at the warehouse and the shipment was priced."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    transport_mode = String(required=True)
    package_count = Integer(required=True)
    total_weight_kg = Float()
    total_cbm = Float()
    calculated_charge_usd = Float(required=True)
    final_charge_usd = Float(required=True)
    pricing_source = String(required=True)
    verified_by = Identifier(required=True)
    verified_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentStatusChanged:
    """The shipment entered a new lifecycle status."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    status = String(required=True)
    actor_id = Identifier()
    occurred_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class PaymentCollectionStatusChanged:
    """Payment collection progressed for the shipment."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    payment_collection_status = String(required=True)
    changed_at = DateTime(required=True)
